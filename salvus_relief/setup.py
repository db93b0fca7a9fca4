import frappe


ROLES = [
    {"role_name": "Relief Admin", "desk_access": 1},
    {"role_name": "Headquarters", "desk_access": 1},
    {"role_name": "Relief Vendor", "desk_access": 0},
    {"role_name": "Beneficiary", "desk_access": 0},
    {"role_name": "Donor", "desk_access": 0},
]

DEFAULT_SETTINGS = {
    "invite_expiry_days": 7,
    "send_status_emails": 1,
    "default_managed_by": "Salvus Relief",
}


def after_install():
    """Run after app installation to set up roles and defaults."""
    create_roles()
    create_default_settings()
    create_email_templates()
    setup_dashboard()
    frappe.db.commit()
    print("Salvus Relief setup complete.")


def create_email_templates():
    """Create standard email templates."""
    from salvus_relief.email_templates import create_email_templates as _create
    _create()


def setup_dashboard():
    """Create dashboard number cards and charts."""
    from salvus_relief.setup_dashboard import create_dashboard_elements
    create_dashboard_elements()


def create_roles():
    """Create custom roles for the Salvus Relief app."""
    for role_data in ROLES:
        if not frappe.db.exists("Role", role_data["role_name"]):
            role = frappe.get_doc({
                "doctype": "Role",
                "role_name": role_data["role_name"],
                "desk_access": role_data["desk_access"],
                "is_custom": 1,
            })
            role.insert(ignore_permissions=True)
            print(f"  Created role: {role_data['role_name']}")


def create_default_settings():
    """Fill Salvus Settings defaults that are still blank."""
    settings = frappe.get_single("Salvus Settings")
    changed = False
    for fieldname, value in DEFAULT_SETTINGS.items():
        if not settings.get(fieldname):
            settings.set(fieldname, value)
            changed = True

    if changed:
        settings.save(ignore_permissions=True)
        print("  Initialized Salvus Settings defaults")
