import frappe
from frappe.model.document import Document
from frappe.model.naming import make_autoname
from frappe.utils import cint, flt, now_datetime

from salvus_relief.budget import compute_category_balances
from salvus_relief.notifications import notify_status_change


class Beneficiary(Document):
    def autoname(self):
        self.name = make_autoname("BEN-.####")
        self.beneficiary_id = self.name

    def validate(self):
        self.validate_email_unique()
        self.validate_age()
        self.track_status_change()

    def validate_email_unique(self):
        """A new beneficiary gets a fresh portal login, so the email must be unused."""
        if self.is_new() and self.email and frappe.db.exists("User", self.email):
            frappe.throw("Email already registered in system")

    def validate_age(self):
        if self.age_type == "exact" and self.age is not None and cint(self.age) < 0:
            frappe.throw("Age cannot be negative.")
        if self.age_type == "range" and not self.age_range:
            frappe.throw("Age Range is required when Age Type is 'range'.")

    def track_status_change(self):
        """Log the transition and issue an activation token on first approval."""
        if self.is_new():
            self.add_activity("Created", f"Beneficiary onboarded by {frappe.session.user}")
            return

        previous = self.get_doc_before_save()
        if not previous or previous.status == self.status:
            return

        self.add_activity(self.status, f"Status changed from {previous.status} by {frappe.session.user}")

        if self.status == "Approved" and not self.activation_token:
            self.activation_token = frappe.generate_hash(length=32)
            self.flags.activation_pending = True

    def add_activity(self, action, details=None):
        self.append("activity_log", {
            "action": action,
            "timestamp": now_datetime(),
            "details": details,
        })

    def after_insert(self):
        self.create_user_account()

    def create_user_account(self):
        """Create the portal login; the password is set from the activation email."""
        if not self.email or self.user:
            return

        user = frappe.get_doc({
            "doctype": "User",
            "email": self.email,
            "first_name": self.full_name,
            "user_type": "Website User",
            "send_welcome_email": 0,
            "roles": [{"role": "Beneficiary"}],
        })
        user.insert(ignore_permissions=True)
        self.db_set("user", user.name)

    def on_update(self):
        previous = self.get_doc_before_save()
        if not previous or previous.status == self.status:
            return

        frappe.logger("salvus_relief").info(
            f"Beneficiary {self.name} status changed: {previous.status} -> {self.status}"
        )
        notify_status_change(
            self,
            previous.status,
            self.email,
            activation_pending=self.flags.activation_pending,
            token=self.activation_token,
        )

    def get_spent_by_category(self, exclude_transaction=None):
        """Amounts already drawn per category; failed redemptions don't count."""
        rows = frappe.db.sql("""
            SELECT category, SUM(amount) AS total
            FROM `tabRelief Transaction`
            WHERE beneficiary = %s
              AND status != 'Failed'
              AND name != %s
            GROUP BY category
        """, (self.name, exclude_transaction or ""), as_dict=True)

        return {row.category: flt(row.total) for row in rows}

    def get_balances(self):
        """Remaining allowance per campaign category for this beneficiary."""
        campaign = frappe.get_doc("Campaign", self.campaign)
        budget = campaign.get_budget()
        spent = self.get_spent_by_category()

        return frappe._dict(
            total_limit=budget.per_beneficiary_cap,
            total_spent=sum(spent.values()),
            categories=budget.categories,
            balances=compute_category_balances(budget.category_limits, spent),
        )


def get_beneficiary_for_user(user=None):
    """Beneficiary record linked to a portal user, or None."""
    return frappe.db.get_value("Beneficiary", {"user": user or frappe.session.user}, "name")
