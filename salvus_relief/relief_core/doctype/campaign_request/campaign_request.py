import frappe
from frappe.model.document import Document
from frappe.utils import add_days, cint, nowdate, validate_email_address

from salvus_relief.notifications import build_link, send_template_email
from salvus_relief.relief_core.doctype.salvus_settings.salvus_settings import get_settings


REQUIRED_FIELDS = (
    "organization_name",
    "organization_type",
    "contact_person",
    "official_email",
    "phone",
    "head_office_location",
    "reason",
)


class CampaignRequest(Document):
    def before_insert(self):
        self.status = "Pending"
        if not self.created_by:
            self.created_by = frappe.session.user

    def validate(self):
        missing = [f for f in REQUIRED_FIELDS if not (self.get(f) or "").strip()]
        if missing:
            frappe.throw(f"Missing required fields: {', '.join(missing)}")

        validate_email_address(self.official_email, throw=True)

    def approve(self):
        """Approve the organisation and email it an admin invite."""
        if self.status == "Approved":
            frappe.throw(f"Campaign Request {self.name} is already approved.")

        expiry_days = cint(get_settings().invite_expiry_days) or 7

        self.status = "Approved"
        self.invite_token = frappe.generate_hash(length=32)
        self.invite_expires_on = add_days(nowdate(), expiry_days)
        self.save()

        frappe.logger("salvus_relief").info(
            f"Campaign Request {self.name} approved for {self.organization_name}"
        )
        return send_template_email(
            "Admin Invite",
            self.official_email,
            doc=self,
            link=build_link("signup", self.invite_token, param="invite"),
            expiry_days=expiry_days,
        )

    def reject(self):
        if self.status == "Approved":
            frappe.throw(f"Campaign Request {self.name} is already approved and cannot be rejected.")

        self.status = "Rejected"
        self.save()
        frappe.logger("salvus_relief").info(f"Campaign Request {self.name} rejected")

    def get_document_list(self):
        """Attachment metadata only; file contents stay behind File permissions."""
        return frappe.get_all(
            "File",
            filters={"attached_to_doctype": self.doctype, "attached_to_name": self.name},
            fields=["file_name", "file_url", "file_size"],
            order_by="creation asc",
        )
