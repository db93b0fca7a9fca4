import frappe
from frappe.model.document import Document
from frappe.utils import flt, now_datetime

from salvus_relief.budget import check_redemption
from salvus_relief.notifications import ACTIVE_VENDOR_STATUSES


class ReliefTransaction(Document):
    def validate(self):
        if not self.timestamp:
            self.timestamp = now_datetime()

        beneficiary = frappe.get_doc("Beneficiary", self.beneficiary)
        vendor = frappe.get_doc("Relief Vendor", self.vendor)

        self.validate_parties(beneficiary, vendor)
        if self.status != "Failed":
            self.validate_allowance(beneficiary, vendor)

    def validate_parties(self, beneficiary, vendor):
        """Beneficiary and vendor must both be active in the same campaign."""
        if not self.campaign:
            self.campaign = beneficiary.campaign

        if beneficiary.campaign != self.campaign:
            frappe.throw(
                f"Beneficiary {beneficiary.name} is not enrolled in campaign '{self.campaign}'."
            )

        if vendor.campaign != self.campaign:
            frappe.throw(
                f"Vendor {vendor.vendor_name} does not serve campaign '{self.campaign}'."
            )

        if beneficiary.status != "Approved":
            frappe.throw(f"Beneficiary {beneficiary.name} is {beneficiary.status} and cannot redeem.")

        if vendor.status not in ACTIVE_VENDOR_STATUSES:
            frappe.throw(f"Vendor {vendor.vendor_name} is {vendor.status} and cannot accept redemptions.")

    def validate_allowance(self, beneficiary, vendor):
        """Hold the redemption to the campaign's category limit and per-beneficiary cap."""
        if not vendor.is_authorized_for(self.category or ""):
            frappe.throw(f"Vendor {vendor.vendor_name} is not authorized for category '{self.category}'.")

        budget = frappe.get_doc("Campaign", self.campaign).get_budget()
        spent = beneficiary.get_spent_by_category(exclude_transaction=self.name)

        self.category = check_redemption(budget, spent, self.category, self.amount)
        self.amount = flt(self.amount)

    def on_update(self):
        self.update_vendor_total()

    def on_trash(self):
        self.update_vendor_total(exclude_self=True)

    def update_vendor_total(self, exclude_self=False):
        """Keep Relief Vendor.total_paid in step with settled redemptions."""
        filters = {"vendor": self.vendor, "status": ("in", ["Completed", "Paid"])}
        if exclude_self:
            filters["name"] = ("!=", self.name)

        total = frappe.db.get_value("Relief Transaction", filters, "SUM(amount)") or 0
        frappe.db.set_value("Relief Vendor", self.vendor, "total_paid", flt(total))
