import json
import unittest

import frappe
from frappe.utils import flt

from salvus_relief.relief_core.doctype.beneficiary.test_beneficiary import make_beneficiary
from salvus_relief.relief_core.doctype.campaign.test_campaign import make_campaign
from salvus_relief.relief_core.doctype.relief_vendor.test_relief_vendor import make_vendor


def make_transaction(beneficiary, vendor, category, amount, status="Completed"):
    return frappe.get_doc({
        "doctype": "Relief Transaction",
        "beneficiary": beneficiary,
        "vendor": vendor,
        "category": category,
        "amount": amount,
        "status": status,
    }).insert()


class TestReliefTransaction(unittest.TestCase):
    """Redemptions against category limits and the per-beneficiary cap.

    Campaign budget: cap 100, food 60, medical 50.
    """

    @classmethod
    def setUpClass(cls):
        frappe.flags.ignore_permissions = True
        frappe.set_user("Administrator")
        cls.campaign = make_campaign()
        cls.vendor = make_vendor(cls.campaign.name)

    @classmethod
    def tearDownClass(cls):
        frappe.db.rollback()

    def setUp(self):
        self.beneficiary = make_beneficiary(self.campaign.name)
        self.beneficiary.status = "Approved"
        self.beneficiary.save()

    def test_redemption_within_limit(self):
        txn = make_transaction(self.beneficiary.name, self.vendor.name, " FOOD", 40)
        self.assertEqual(txn.category, "food")
        self.assertEqual(txn.campaign, self.campaign.name)
        self.assertTrue(txn.timestamp)

        balances = {b.label: b.remaining for b in self.beneficiary.get_balances().balances}
        self.assertEqual(balances, {"food": 20, "medical": 50})

    def test_category_limit_exceeded(self):
        make_transaction(self.beneficiary.name, self.vendor.name, "food", 40)
        with self.assertRaises(frappe.ValidationError) as ctx:
            make_transaction(self.beneficiary.name, self.vendor.name, "food", 25)
        self.assertIn('Category "food" limit exceeded: 20.00 remaining', str(ctx.exception))

    def test_cap_exceeded_across_categories(self):
        medical_store = make_vendor(self.campaign.name, category="Medical")
        make_transaction(self.beneficiary.name, self.vendor.name, "food", 60)
        with self.assertRaises(frappe.ValidationError) as ctx:
            make_transaction(self.beneficiary.name, medical_store.name, "medical", 45)
        self.assertIn("Per-beneficiary cap exceeded: 40.00 remaining", str(ctx.exception))

    def test_failed_redemption_does_not_count(self):
        make_transaction(self.beneficiary.name, self.vendor.name, "food", 999, status="Failed")
        self.assertEqual(self.beneficiary.get_spent_by_category(), {})
        make_transaction(self.beneficiary.name, self.vendor.name, "food", 60)

    def test_category_outside_campaign_rejected(self):
        with self.assertRaises(frappe.ValidationError):
            make_transaction(self.beneficiary.name, self.vendor.name, "fuel", 10)

    def test_unauthorized_vendor_category_rejected(self):
        store = make_vendor(self.campaign.name, authorized_categories=json.dumps(["Medical"]))
        with self.assertRaises(frappe.ValidationError):
            make_transaction(self.beneficiary.name, store.name, "food", 10)

    def test_pending_beneficiary_cannot_redeem(self):
        pending = make_beneficiary(self.campaign.name)
        with self.assertRaises(frappe.ValidationError):
            make_transaction(pending.name, self.vendor.name, "food", 10)

    def test_suspended_vendor_cannot_redeem(self):
        store = make_vendor(self.campaign.name, status="Suspended")
        with self.assertRaises(frappe.ValidationError):
            make_transaction(self.beneficiary.name, store.name, "food", 10)

    def test_vendor_total_paid_tracks_completed(self):
        store = make_vendor(self.campaign.name)
        txn = make_transaction(self.beneficiary.name, store.name, "food", 30)
        make_transaction(self.beneficiary.name, store.name, "medical", 15, status="Pending")
        self.assertEqual(flt(frappe.db.get_value("Relief Vendor", store.name, "total_paid")), 30)

        txn.delete()
        self.assertEqual(flt(frappe.db.get_value("Relief Vendor", store.name, "total_paid")), 0)
