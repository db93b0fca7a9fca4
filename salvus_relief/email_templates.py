import frappe


WRAPPER = """<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
{body}
</div>"""

BUTTON = """<a href="{{{{ link }}}}" style="display: inline-block; background-color: #0d9488; color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px; margin-top: 16px;">{label}</a>
<p style="margin-top: 24px; font-size: 14px; color: #666;">Or copy and paste this link in your browser:</p>
<p style="font-size: 12px; color: #666;">{{{{ link }}}}</p>"""


def get_templates():
    """Standard email templates, rendered with ``doc`` and ``link`` in context."""
    return [
        {
            "name": "Admin Invite",
            "subject": "Admin Invite – Activate Your SALVUS Admin Access",
            "body": """<h2 style="color: #0d9488; margin-bottom: 8px;">Admin Invite</h2>
<p>Your request to run relief campaigns for <strong>{{ doc.organization_name }}</strong> has been approved.</p>
<p>Use the button below to create your admin account. This invite expires in {{ expiry_days }} days.</p>
""" + BUTTON.format(label="Accept Invite"),
        },
        {
            "name": "Beneficiary Activation",
            "subject": "Activate your SALVUS Relief Account",
            "body": """<h1 style="color: #0d9488;">Welcome to SALVUS</h1>
<p>Dear {{ doc.full_name }},</p>
<p>Your relief account ({{ doc.beneficiary_id }}) has been approved.</p>
<p>Click the button below to set your password and access your account.</p>
""" + BUTTON.format(label="Set Password &amp; Login"),
        },
        {
            "name": "Beneficiary Access Suspended",
            "subject": "Beneficiary Access Suspended",
            "body": """<h2 style="color: #ef4444;">Access Temporarily Suspended</h2>
<p>Dear {{ doc.full_name }},</p>
<p>Your beneficiary access is temporarily on hold due to an administrative review.</p>
<p>Your account remains safe and unchanged. You will be notified once access is restored.</p>""",
        },
        {
            "name": "Beneficiary Access Restored",
            "subject": "Beneficiary Access Restored",
            "body": """<h2 style="color: #10b981;">Access Restored</h2>
<p>Dear {{ doc.full_name }},</p>
<p>Your beneficiary access has been restored. You can now <a href="{{ link }}">log in</a> and continue using beneficiary services.</p>
<p>No further action is required.</p>""",
        },
        {
            "name": "Vendor Activation",
            "subject": "Activate Your SALVUS Vendor Account",
            "body": """<h1 style="color: #0d9488;">Welcome to SALVUS</h1>
<p>Your vendor account for <strong>{{ doc.vendor_name }}</strong> has been reviewed and approved by the admin team.</p>
<p>You can now accept verified relief payments from beneficiaries.</p>
<p>Click the button below to set your password and activate your account.</p>
""" + BUTTON.format(label="Activate Account"),
        },
        {
            "name": "Vendor Access Restored",
            "subject": "Vendor Access Restored",
            "body": """<h2 style="color: #10b981;">Access Restored</h2>
<p>Your vendor access for <strong>{{ doc.vendor_name }}</strong> has been restored. You can now <a href="{{ link }}">log in</a> and continue using your vendor dashboard.</p>
<p>No further action is required.</p>""",
        },
        {
            "name": "Campaign Status Update",
            "subject": "{{ doc.campaign_name }} is now {{ doc.status }}",
            "body": """<h2 style="color: #0d9488;">Campaign Status Update</h2>
<p><strong>{{ doc.campaign_name }}</strong> moved from {{ previous_status }} to <strong>{{ doc.status }}</strong>.</p>
<table style="width: 100%; border-collapse: collapse; margin: 10px 0;">
<tr><td style="padding: 5px 0; color: #666;">Location:</td><td style="padding: 5px 0;">{{ doc.state_region or doc.location }}</td></tr>
<tr><td style="padding: 5px 0; color: #666;">Funds Allocated:</td><td style="padding: 5px 0;">{{ format_currency_short(doc.total_funds_allocated) }}</td></tr>
<tr><td style="padding: 5px 0; color: #666;">Per-Beneficiary Cap:</td><td style="padding: 5px 0;">{{ frappe.utils.fmt_money(doc.beneficiary_cap) }}</td></tr>
</table>""",
        },
    ]


def create_email_templates():
    """Create standard email templates for the Salvus Relief app."""
    for tmpl_data in get_templates():
        if frappe.db.exists("Email Template", tmpl_data["name"]):
            print(f"  Email template '{tmpl_data['name']}' already exists, skipping")
            continue

        doc = frappe.get_doc({
            "doctype": "Email Template",
            "name": tmpl_data["name"],
            "subject": tmpl_data["subject"],
            "response_html": WRAPPER.format(body=tmpl_data["body"]),
            "use_html": 1,
        })
        doc.insert(ignore_permissions=True)
        print(f"  Created email template: {tmpl_data['name']}")

    frappe.db.commit()
