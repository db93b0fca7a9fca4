import json

import frappe
from frappe.model.document import Document
from frappe.model.naming import make_autoname

from salvus_relief.budget import normalize_category, parse_categories
from salvus_relief.notifications import ACTIVE_VENDOR_STATUSES, notify_status_change


class ReliefVendor(Document):
    def before_insert(self):
        if not self.store_id:
            self.store_id = make_autoname("STORE-.####")

    def validate(self):
        self.normalize_categories()
        self.prepare_activation()

    def normalize_categories(self):
        """Store categories the same way campaign limits key them."""
        if self.category:
            self.category = normalize_category(self.category)

        if self.authorized_categories not in (None, ""):
            self.authorized_categories = json.dumps(
                [normalize_category(c) for c in parse_categories(self.authorized_categories)]
            )

    def prepare_activation(self):
        """Issue an activation token the first time the vendor goes active."""
        if self.is_new() or self.status not in ACTIVE_VENDOR_STATUSES:
            return

        previous = self.get_doc_before_save()
        if not previous or previous.status == self.status:
            return

        if self.email and not self.activation_token:
            self.ensure_user_account()
            self.activation_token = frappe.generate_hash(length=32)
            self.flags.activation_pending = True

    def ensure_user_account(self):
        if frappe.db.exists("User", self.email):
            user = frappe.get_doc("User", self.email)
            if "Relief Vendor" not in frappe.get_roles(user.name):
                user.add_roles("Relief Vendor")
            return

        frappe.get_doc({
            "doctype": "User",
            "email": self.email,
            "first_name": self.vendor_name,
            "user_type": "Website User",
            "send_welcome_email": 0,
            "roles": [{"role": "Relief Vendor"}],
        }).insert(ignore_permissions=True)

    def on_update(self):
        previous = self.get_doc_before_save()
        if not previous or previous.status == self.status:
            return

        frappe.logger("salvus_relief").info(
            f"Vendor {self.name} status changed: {previous.status} -> {self.status}"
        )
        notify_status_change(
            self,
            previous.status,
            self.email,
            activation_pending=self.flags.activation_pending,
            token=self.activation_token,
        )

    def is_authorized_for(self, category):
        """Vendors with no explicit list may redeem in any campaign category."""
        authorized = parse_categories(self.authorized_categories)
        return not authorized or normalize_category(category) in authorized
