import unittest

from salvus_relief.notifications import resolve_status_templates


class TestResolveStatusTemplates(unittest.TestCase):
    """Tests for choosing which emails a status transition sends."""

    def test_unchanged_status_sends_nothing(self):
        for doctype in ("Beneficiary", "Relief Vendor", "Campaign"):
            self.assertEqual(resolve_status_templates(doctype, "Approved", "Approved"), [])

    def test_beneficiary_suspended(self):
        self.assertEqual(
            resolve_status_templates("Beneficiary", "Approved", "Suspended"),
            ["Beneficiary Access Suspended"],
        )

    def test_beneficiary_first_approval_sends_activation(self):
        self.assertEqual(
            resolve_status_templates("Beneficiary", "Pending", "Approved", activation_pending=True),
            ["Beneficiary Activation"],
        )

    def test_beneficiary_restored_after_suspension(self):
        self.assertEqual(
            resolve_status_templates("Beneficiary", "Suspended", "Approved"),
            ["Beneficiary Access Restored"],
        )

    def test_beneficiary_reapproved_from_pending_without_activation(self):
        self.assertEqual(resolve_status_templates("Beneficiary", "Pending", "Approved"), [])

    def test_vendor_verified_first_time(self):
        self.assertEqual(
            resolve_status_templates("Relief Vendor", "Pending", "Verified", activation_pending=True),
            ["Vendor Activation"],
        )

    def test_vendor_restored_and_activated(self):
        self.assertEqual(
            resolve_status_templates("Relief Vendor", "Suspended", "Approved", activation_pending=True),
            ["Vendor Activation", "Vendor Access Restored"],
        )

    def test_vendor_flagged_sends_nothing(self):
        self.assertEqual(resolve_status_templates("Relief Vendor", "Approved", "Flagged"), [])

    def test_campaign_status_change(self):
        self.assertEqual(
            resolve_status_templates("Campaign", "Active", "Paused"),
            ["Campaign Status Update"],
        )

    def test_unknown_doctype(self):
        self.assertEqual(resolve_status_templates("Donation", "Draft", "Paid"), [])
