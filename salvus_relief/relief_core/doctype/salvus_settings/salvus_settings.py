import frappe
from frappe.model.document import Document
from frappe.utils import cint


class SalvusSettings(Document):
    def validate(self):
        if cint(self.invite_expiry_days) < 1:
            frappe.throw("Invite Expiry (Days) must be at least 1.")

        if self.app_url:
            self.app_url = self.app_url.rstrip("/")


def get_settings():
    """Utility to get Salvus Settings singleton."""
    return frappe.get_cached_doc("Salvus Settings")
