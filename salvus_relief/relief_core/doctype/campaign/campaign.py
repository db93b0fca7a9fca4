import json

import frappe
from frappe.model.document import Document
from frappe.utils import flt, getdate

from salvus_relief.budget import (
    CampaignBudget,
    normalize_campaign_budget,
    parse_categories,
    parse_category_limits,
    validate_cap_against_allocation,
)
from salvus_relief.notifications import notify_status_change
from salvus_relief.relief_core.doctype.salvus_settings.salvus_settings import get_settings
from salvus_relief.utils import slugify


class Campaign(Document):
    def before_insert(self):
        if not self.created_by:
            self.created_by = frappe.session.user

    def validate(self):
        self.validate_dates()
        self.normalize_budget()
        self.validate_categories()
        validate_cap_against_allocation(self.beneficiary_cap, self.total_funds_allocated)

    def validate_dates(self):
        if self.end_date and self.start_date and getdate(self.end_date) < getdate(self.start_date):
            frappe.throw("End Date cannot be before Start Date.")

    def normalize_budget(self):
        """Run the stored cap and limits back through the budget normalizer.

        Covers edits made from the desk form or by update_campaign with
        only a partial payload, where the limits were not compared against
        the stored cap yet.
        """
        limits = None
        if self.category_max_limits not in (None, ""):
            limits = parse_category_limits(self.category_max_limits)

        categories = None
        if self.categories not in (None, ""):
            categories = parse_categories(self.categories)

        budget = normalize_campaign_budget(
            beneficiary_cap=self.beneficiary_cap,
            category_max_limits=limits,
            categories=categories,
            require_cap=True,
        )

        self.beneficiary_cap = budget.per_beneficiary_cap
        if budget.category_limits is not None:
            self.category_max_limits = json.dumps(budget.category_limits)
        if budget.categories is not None:
            self.categories = json.dumps(budget.categories)

    def validate_categories(self):
        if self.categories not in (None, "") and not parse_categories(self.categories):
            frappe.throw("Allowed categories are required")

    def before_save(self):
        if self.campaign_name and not self.slug:
            self.slug = slugify(self.campaign_name)

        if not self.managed_by:
            self.managed_by = get_settings().default_managed_by or "Salvus Relief"

    def on_update(self):
        """Email the campaign owner when the status moves."""
        previous = self.get_doc_before_save()
        if not previous or previous.status == self.status:
            return

        frappe.logger("salvus_relief").info(
            f"Campaign {self.name} status changed: {previous.status} -> {self.status}"
        )
        notify_status_change(self, previous.status, self.get_owner_email())

    def get_owner_email(self):
        if not self.created_by:
            return None
        return frappe.db.get_value("User", self.created_by, "email")

    def get_budget(self):
        """The stored budget as a CampaignBudget."""
        return CampaignBudget(
            per_beneficiary_cap=flt(self.beneficiary_cap),
            category_limits=parse_category_limits(self.category_max_limits),
            categories=parse_categories(self.categories),
        )

    def get_stats(self):
        """Beneficiary and vendor counts plus funds spent on completed redemptions."""
        funds_spent = frappe.db.get_value(
            "Relief Transaction",
            {"campaign": self.name, "status": "Completed"},
            "SUM(amount)",
        ) or 0

        return frappe._dict(
            beneficiaries=frappe.db.count("Beneficiary", {"campaign": self.name}),
            vendors=frappe.db.count("Relief Vendor", {"campaign": self.name}),
            funds_spent=flt(funds_spent),
        )
