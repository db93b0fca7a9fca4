app_name = "salvus_relief"
app_title = "Salvus Relief"
app_publisher = "Salvus Relief"
app_description = "Relief fund platform: campaigns, vetted beneficiaries, capped category spend and vendor redemption"
app_email = "admin@salvusrelief.org"
app_license = "MIT"
app_version = "0.1.0"

# Required apps
required_apps = ["frappe"]

# Document lifecycle logic (budget normalization, status-change emails,
# redemption checks) lives in the doctype controllers, so no doc_events.

# Install
# --------------------------------------------------------------------------
after_install = "salvus_relief.setup.after_install"

# Jinja template filters
# --------------------------------------------------------------------------
jinja = {
    "methods": [
        "salvus_relief.utils.format_currency_short",
    ],
}

# Fixtures - export these doctypes as JSON for version control
# --------------------------------------------------------------------------
fixtures = [
    {
        "dt": "Role",
        "filters": [["name", "in", [
            "Relief Admin",
            "Headquarters",
            "Relief Vendor",
            "Beneficiary",
            "Donor",
        ]]],
    },
    {
        "dt": "Email Template",
        "filters": [["name", "in", [
            "Admin Invite",
            "Beneficiary Activation",
            "Beneficiary Access Suspended",
            "Beneficiary Access Restored",
            "Vendor Activation",
            "Vendor Access Restored",
            "Campaign Status Update",
        ]]],
    },
]

# Permission Query Conditions: Relief Admins only see their own records
# --------------------------------------------------------------------------
permission_query_conditions = {
    "Campaign": "salvus_relief.permissions.get_campaign_permission_query",
    "Beneficiary": "salvus_relief.permissions.get_beneficiary_permission_query",
    "Relief Vendor": "salvus_relief.permissions.get_relief_vendor_permission_query",
}

# Has Permission: per-document checks for Relief Admins
# --------------------------------------------------------------------------
has_permission = {
    "Campaign": "salvus_relief.permissions.has_campaign_permission",
    "Beneficiary": "salvus_relief.permissions.has_beneficiary_permission",
    "Relief Vendor": "salvus_relief.permissions.has_relief_vendor_permission",
}
