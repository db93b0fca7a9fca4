import unittest

import frappe

from salvus_relief.relief_core.doctype.campaign.test_campaign import make_campaign


def make_beneficiary(campaign, **overrides):
    ben = frappe.new_doc("Beneficiary")
    ben.update({
        "full_name": "_Test Beneficiary",
        "campaign": campaign,
        "email": f"_test_ben_{frappe.generate_hash(length=8)}@example.com",
        "phone": "9000000000",
        "status": "Pending",
        "age_type": "exact",
        "age": 34,
    })
    ben.update(overrides)
    ben.insert()
    return ben


class TestBeneficiary(unittest.TestCase):
    """Tests for onboarding, status tracking and allowance balances."""

    @classmethod
    def setUpClass(cls):
        frappe.flags.ignore_permissions = True
        frappe.set_user("Administrator")
        cls.campaign = make_campaign()

    @classmethod
    def tearDownClass(cls):
        frappe.db.rollback()

    def test_id_and_user_created_on_insert(self):
        ben = make_beneficiary(self.campaign.name)
        self.assertTrue(ben.beneficiary_id.startswith("BEN-"))
        self.assertEqual(ben.beneficiary_id, ben.name)
        self.assertEqual(frappe.db.get_value("Beneficiary", ben.name, "user"), ben.email)
        self.assertIn("Beneficiary", frappe.get_roles(ben.email))
        self.assertEqual(ben.activity_log[0].action, "Created")

    def test_duplicate_email_rejected(self):
        ben = make_beneficiary(self.campaign.name)
        with self.assertRaises(frappe.ValidationError):
            make_beneficiary(self.campaign.name, email=ben.email)

    def test_range_age_requires_range(self):
        with self.assertRaises(frappe.ValidationError):
            make_beneficiary(self.campaign.name, age_type="range", age=None, age_range=None)

    def test_first_approval_issues_token(self):
        ben = make_beneficiary(self.campaign.name)
        self.assertFalse(ben.activation_token)

        ben.status = "Approved"
        ben.save()
        token = ben.activation_token
        self.assertTrue(token)
        self.assertEqual(ben.activity_log[-1].action, "Approved")

        # Suspend and restore keeps the first token
        ben.status = "Suspended"
        ben.save()
        ben.status = "Approved"
        ben.save()
        self.assertEqual(ben.activation_token, token)
        self.assertEqual([a.action for a in ben.activity_log][-3:], ["Approved", "Suspended", "Approved"])

    def test_balances_for_new_beneficiary(self):
        ben = make_beneficiary(self.campaign.name)
        allowance = ben.get_balances()

        self.assertEqual(allowance.total_limit, 100)
        self.assertEqual(allowance.total_spent, 0)
        self.assertEqual(allowance.categories, ["food", "medical"])
        self.assertEqual(
            [(b.label, b.limit, b.remaining) for b in allowance.balances],
            [("food", 60, 60), ("medical", 50, 50)],
        )
