import frappe


def get_campaign_permission_query(user):
    """Relief Admins can only see the campaigns they created."""
    if is_relief_admin(user):
        return "`tabCampaign`.created_by = {0}".format(frappe.db.escape(user))
    return ""


def get_beneficiary_permission_query(user):
    """Relief Admins can only see beneficiaries they onboarded."""
    if is_relief_admin(user):
        return "`tabBeneficiary`.owner = {0}".format(frappe.db.escape(user))
    return ""


def get_relief_vendor_permission_query(user):
    """Relief Admins can only see vendors they onboarded."""
    if is_relief_admin(user):
        return "`tabRelief Vendor`.owner = {0}".format(frappe.db.escape(user))
    return ""


def has_campaign_permission(doc, ptype, user):
    if is_relief_admin(user) and doc.created_by and doc.created_by != user:
        return False
    return True


def has_beneficiary_permission(doc, ptype, user):
    if is_relief_admin(user) and doc.owner != user:
        return False
    return True


def has_relief_vendor_permission(doc, ptype, user):
    if is_relief_admin(user) and doc.owner != user:
        return False
    return True


def is_relief_admin(user=None):
    """Check if the user is a Relief Admin scoped to their own organisation.

    Returns False for Administrator and System Managers to preserve
    god-mode access.
    """
    if not user:
        user = frappe.session.user
    if user == "Administrator":
        return False
    roles = frappe.get_roles(user)
    return "Relief Admin" in roles and "System Manager" not in roles


def has_any_role(*roles, user=None):
    return bool(set(roles) & set(frappe.get_roles(user or frappe.session.user)))
