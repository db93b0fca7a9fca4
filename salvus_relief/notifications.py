import frappe
from frappe.utils import cint, get_url

from salvus_relief.relief_core.doctype.salvus_settings.salvus_settings import get_settings


ACTIVE_VENDOR_STATUSES = ("Approved", "Verified")


def resolve_status_templates(doctype, previous_status, new_status, activation_pending=False):
    """Return the Email Template names a status change should send.

    Beneficiary:
      -> Suspended                     "Beneficiary Access Suspended"
      -> Approved, never activated     "Beneficiary Activation"
      Suspended -> Approved            "Beneficiary Access Restored"

    Relief Vendor:
      -> Approved/Verified, never activated    "Vendor Activation"
      Suspended -> Approved/Verified           "Vendor Access Restored"

    Campaign: any change sends "Campaign Status Update".
    """
    if not new_status or previous_status == new_status:
        return []

    if doctype == "Beneficiary":
        if new_status == "Suspended":
            return ["Beneficiary Access Suspended"]
        if new_status == "Approved":
            if activation_pending:
                return ["Beneficiary Activation"]
            if previous_status == "Suspended":
                return ["Beneficiary Access Restored"]
        return []

    if doctype == "Relief Vendor":
        templates = []
        if new_status in ACTIVE_VENDOR_STATUSES:
            if activation_pending:
                templates.append("Vendor Activation")
            if previous_status == "Suspended":
                templates.append("Vendor Access Restored")
        return templates

    if doctype == "Campaign":
        return ["Campaign Status Update"]

    return []


def build_link(path, token=None, param="token"):
    """Absolute portal link using the configured app URL."""
    base = (get_settings().app_url or get_url()).rstrip("/")
    link = f"{base}/{path.lstrip('/')}"
    if token:
        link += f"?{param}={token}"
    return link


def send_template_email(template, recipients, doc=None, **context):
    """Render an Email Template and queue it.

    Failures are recorded in the Error Log and reported by returning False;
    a status change that triggered the email is never rolled back for it.
    """
    if not recipients:
        return False

    if not cint(get_settings().send_status_emails):
        frappe.logger("salvus_relief").info(f"Status emails disabled, skipping '{template}' for {recipients}")
        return False

    try:
        email_template = frappe.get_doc("Email Template", template)
        args = {"doc": doc, **context}
        formatted = email_template.get_formatted_email(args)

        frappe.sendmail(
            recipients=recipients,
            subject=formatted["subject"],
            message=formatted["message"],
            reference_doctype=doc.doctype if doc else None,
            reference_name=doc.name if doc else None,
        )
    except Exception:
        frappe.log_error(
            title=f"Failed to send '{template}' email",
            message=frappe.get_traceback(),
        )
        return False

    frappe.logger("salvus_relief").info(f"Queued '{template}' email to {recipients}")
    return True


def notify_status_change(doc, previous_status, recipient, activation_pending=False, token=None):
    """Send every template the transition calls for. Returns the templates sent."""
    sent = []
    for template in resolve_status_templates(doc.doctype, previous_status, doc.status, activation_pending):
        link = None
        if template in ("Beneficiary Activation", "Vendor Activation"):
            link = build_link("set-password", token)
        elif template in ("Beneficiary Access Restored", "Vendor Access Restored"):
            link = build_link("login")

        if send_template_email(template, recipient, doc=doc, link=link, previous_status=previous_status):
            sent.append(template)
    return sent
