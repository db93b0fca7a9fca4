import unittest

import frappe

from salvus_relief.api import approve_campaign_request, submit_campaign_request


def make_request(**overrides):
    payload = {
        "organization_name": "_Test Relief Trust",
        "organization_type": "NGO",
        "contact_person": "Test Contact",
        "official_email": "_test_org@example.com",
        "phone": "9000000001",
        "head_office_location": "Kolkata",
        "reason": "Flood response in the north-east",
    }
    payload.update(overrides)
    return frappe.get_doc("Campaign Request", submit_campaign_request(**payload)["name"])


class TestCampaignRequest(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        frappe.flags.ignore_permissions = True
        frappe.set_user("Administrator")

    @classmethod
    def tearDownClass(cls):
        frappe.db.rollback()

    def test_submitted_request_is_pending(self):
        req = make_request(status="Approved")
        self.assertEqual(req.status, "Pending")
        self.assertEqual(req.created_by, "Administrator")
        self.assertEqual(req.get_document_list(), [])

    def test_missing_fields_rejected(self):
        with self.assertRaises(frappe.ValidationError) as ctx:
            make_request(reason="  ", phone="")
        self.assertIn("phone", str(ctx.exception))
        self.assertIn("reason", str(ctx.exception))

    def test_approve_issues_invite(self):
        req = make_request()
        result = approve_campaign_request(req.name)
        self.assertEqual(result["status"], "Approved")

        req.reload()
        self.assertTrue(req.invite_token)
        self.assertTrue(req.invite_expires_on)

    def test_approve_twice_rejected(self):
        req = make_request()
        req.approve()
        with self.assertRaises(frappe.ValidationError):
            req.approve()

    def test_reject_after_approve_rejected(self):
        req = make_request()
        req.approve()
        with self.assertRaises(frappe.ValidationError):
            req.reject()

    def test_reject(self):
        req = make_request()
        req.reject()
        self.assertEqual(frappe.db.get_value("Campaign Request", req.name, "status"), "Rejected")
