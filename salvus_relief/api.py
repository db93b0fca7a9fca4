import json

import frappe
from frappe.utils import flt

from salvus_relief.budget import normalize_campaign_budget, parse_categories, parse_category_limits
from salvus_relief.permissions import has_any_role
from salvus_relief.relief_core.doctype.beneficiary.beneficiary import get_beneficiary_for_user
from salvus_relief.utils import get_payload, parse_json_arg


ADMIN_ROLES = ("Relief Admin", "System Manager")
HQ_ROLES = ("Headquarters", "System Manager")

CAMPAIGN_FIELDS = (
    "campaign_name", "location", "state_region", "district", "managed_by",
    "disaster_type", "status", "start_date", "end_date", "funds_raised",
    "description", "urgency",
)

BENEFICIARY_FIELDS = (
    "full_name", "campaign", "email", "phone", "district", "locality",
    "gender", "age_type", "age", "age_range", "id_type", "id_number",
    "risk_level", "internal_notes",
)

VENDOR_FIELDS = (
    "vendor_name", "store_id", "campaign", "category", "authorized_categories",
    "email", "phone", "contact_person", "district", "area", "risk_level", "notes",
)

CAMPAIGN_REQUEST_FIELDS = (
    "organization_name", "organization_type", "contact_person", "official_email",
    "phone", "website", "reg_number", "head_office_location", "reason",
)


def require_roles(*roles):
    if not has_any_role(*roles):
        frappe.throw("You are not permitted to perform this action.", frappe.PermissionError)


def _pick(payload, fields):
    return {f: payload[f] for f in fields if f in payload}


def _budget_from_payload(payload, require_cap):
    """Run the budget normalizer over a create/update body.

    Accepts both fieldnames and the camelCase names the portal sends.
    """
    return normalize_campaign_budget(
        beneficiary_cap=get_payload(payload, "beneficiary_cap", "beneficiaryCap"),
        category_max_limits=parse_json_arg(
            get_payload(payload, "category_max_limits", "categoryMaxLimits")
        ),
        categories=parse_json_arg(payload.get("categories")),
        require_cap=require_cap,
    )


def _apply_budget(doc, budget):
    if budget.per_beneficiary_cap is not None:
        doc.beneficiary_cap = budget.per_beneficiary_cap
    if budget.category_limits is not None:
        doc.category_max_limits = json.dumps(budget.category_limits)
    if budget.categories is not None:
        doc.categories = json.dumps(budget.categories)


def _apply_allocation(doc, payload):
    total = get_payload(payload, "total_funds_allocated", "totalFundsAllocated")
    if total is not None:
        doc.total_funds_allocated = flt(total)


def _serialize_campaign(doc):
    data = doc.as_dict()
    data["category_max_limits"] = parse_category_limits(doc.category_max_limits)
    data["categories"] = parse_categories(doc.categories)
    return data


@frappe.whitelist(allow_guest=False)
def create_campaign(**payload):
    """Create a campaign owned by the calling Relief Admin.

    POST /api/method/salvus_relief.api.create_campaign
    Body (JSON):
    {
        "campaign_name": "Assam Flood Relief",
        "location": "Guwahati",
        "state_region": "Assam",
        "disaster_type": "Flood",
        "description": "...",
        "start_date": "2026-07-01",
        "end_date": "2026-12-31",
        "totalFundsAllocated": 500000,
        "beneficiaryCap": 100,
        "categoryMaxLimits": {"Food": 50, "medical ": 80}
    }
    """
    require_roles(*ADMIN_ROLES)
    budget = _budget_from_payload(payload, require_cap=True)

    campaign = frappe.new_doc("Campaign")
    campaign.update(_pick(payload, CAMPAIGN_FIELDS))
    _apply_allocation(campaign, payload)
    _apply_budget(campaign, budget)
    campaign.created_by = frappe.session.user
    campaign.insert()

    frappe.logger("salvus_relief").info(
        f"Campaign {campaign.name} created by {frappe.session.user} "
        f"(cap {budget.per_beneficiary_cap:,.2f}, {len(budget.categories or [])} categories)"
    )
    return _serialize_campaign(campaign)


@frappe.whitelist(allow_guest=False)
def update_campaign(name, **payload):
    """Apply a partial update to a campaign.

    PUT /api/method/salvus_relief.api.update_campaign
    Body: {"name": "CAMP-0001", "categoryMaxLimits": {"food": 40}}

    Only the fields present are changed. Limits sent without a cap are
    checked against the stored cap when the campaign validates.
    """
    require_roles(*ADMIN_ROLES)
    if not frappe.db.exists("Campaign", name):
        raise frappe.DoesNotExistError(f"Campaign {name} not found")

    budget = _budget_from_payload(payload, require_cap=False)

    campaign = frappe.get_doc("Campaign", name)
    campaign.check_permission("write")
    campaign.update(_pick(payload, CAMPAIGN_FIELDS))
    _apply_allocation(campaign, payload)
    _apply_budget(campaign, budget)
    campaign.save()

    frappe.logger("salvus_relief").info(f"Campaign {campaign.name} updated by {frappe.session.user}")
    return _serialize_campaign(campaign)


@frappe.whitelist(allow_guest=False)
def get_campaigns():
    """Relief Admins get their own campaigns; everyone else gets the active ones.

    GET /api/method/salvus_relief.api.get_campaigns
    """
    filters = {"created_by": frappe.session.user} if has_any_role("Relief Admin") else {"status": "Active"}

    campaigns = frappe.get_all(
        "Campaign",
        filters=filters,
        fields=[
            "name", "campaign_name", "slug", "location", "state_region",
            "disaster_type", "status", "urgency", "total_funds_allocated",
            "funds_raised", "beneficiary_cap", "categories", "category_max_limits",
            "start_date", "end_date", "creation",
        ],
        order_by="creation desc",
    )

    for camp in campaigns:
        camp["categories"] = parse_categories(camp["categories"])
        camp["category_max_limits"] = parse_category_limits(camp["category_max_limits"])

    return campaigns


@frappe.whitelist(allow_guest=False)
def get_campaign_detail(name):
    """Campaign with stats and its 50 most recent beneficiaries and vendors.

    GET /api/method/salvus_relief.api.get_campaign_detail?name=CAMP-0001
    """
    campaign = frappe.get_doc("Campaign", name)
    campaign.check_permission("read")

    data = _serialize_campaign(campaign)
    data["stats"] = campaign.get_stats()
    data["beneficiaries"] = frappe.get_all(
        "Beneficiary",
        filters={"campaign": name},
        fields=["name", "beneficiary_id", "full_name", "status", "risk_level", "creation"],
        order_by="creation desc",
        limit_page_length=50,
    )
    data["vendors"] = frappe.get_all(
        "Relief Vendor",
        filters={"campaign": name},
        fields=["name", "store_id", "vendor_name", "category", "status", "total_paid", "creation"],
        order_by="creation desc",
        limit_page_length=50,
    )
    return data


@frappe.whitelist(allow_guest=False)
def get_beneficiary_dashboard():
    """Allowance overview for the logged-in beneficiary.

    GET /api/method/salvus_relief.api.get_beneficiary_dashboard
    """
    beneficiary_name = get_beneficiary_for_user()
    if not beneficiary_name:
        raise frappe.DoesNotExistError("No beneficiary record is linked to this account.")

    beneficiary = frappe.get_doc("Beneficiary", beneficiary_name)
    campaign = frappe.get_doc("Campaign", beneficiary.campaign)
    allowance = beneficiary.get_balances()

    history = frappe.get_all(
        "Relief Transaction",
        filters={"beneficiary": beneficiary.name},
        fields=["vendor", "category", "amount", "timestamp", "status"],
        order_by="timestamp desc",
        limit_page_length=10,
    )
    for txn in history:
        txn["store"] = frappe.get_cached_value("Relief Vendor", txn.vendor, "vendor_name") or "Store"

    approvals = [a for a in beneficiary.activity_log if a.action == "Approved"]
    approval_date = None
    if beneficiary.status == "Approved":
        approval_date = approvals[-1].timestamp if approvals else beneficiary.creation

    return {
        "beneficiary": {
            "name": beneficiary.name,
            "beneficiary_id": beneficiary.beneficiary_id,
            "full_name": beneficiary.full_name,
            "status": beneficiary.status,
        },
        "campaign": {
            "name": campaign.name,
            "campaign_name": campaign.campaign_name,
            "location": campaign.state_region or campaign.location or "",
            "status": campaign.status,
        },
        "approval_date": approval_date,
        "categories": allowance.categories,
        "stores": frappe.get_all(
            "Relief Vendor",
            filters={"campaign": campaign.name, "status": "Approved"},
            pluck="vendor_name",
        ),
        "total_limit": allowance.total_limit,
        "total_spent": allowance.total_spent,
        "balances": allowance.balances,
        "history": history,
    }


@frappe.whitelist(allow_guest=False)
def onboard_beneficiary(**payload):
    """Register a beneficiary against one of the caller's campaigns.

    POST /api/method/salvus_relief.api.onboard_beneficiary
    """
    require_roles(*ADMIN_ROLES)
    frappe.get_doc("Campaign", payload.get("campaign")).check_permission("write")

    beneficiary = frappe.new_doc("Beneficiary")
    beneficiary.update(_pick(payload, BENEFICIARY_FIELDS))
    beneficiary.insert()

    return {"name": beneficiary.name, "beneficiary_id": beneficiary.beneficiary_id}


@frappe.whitelist(allow_guest=False)
def set_beneficiary_status(name, status):
    """PATCH-style status change; emails go out from Beneficiary.on_update."""
    require_roles(*ADMIN_ROLES)
    beneficiary = frappe.get_doc("Beneficiary", name)
    beneficiary.check_permission("write")
    beneficiary.status = status
    beneficiary.save()
    return {"name": beneficiary.name, "status": beneficiary.status}


@frappe.whitelist(allow_guest=False)
def onboard_vendor(**payload):
    """Register a store that may redeem beneficiary allowances in a campaign."""
    require_roles(*ADMIN_ROLES)
    frappe.get_doc("Campaign", payload.get("campaign")).check_permission("write")

    vendor = frappe.new_doc("Relief Vendor")
    vendor.update(_pick(payload, VENDOR_FIELDS))
    vendor.insert()

    return {"name": vendor.name, "store_id": vendor.store_id}


@frappe.whitelist(allow_guest=False)
def set_vendor_status(name, status):
    require_roles(*ADMIN_ROLES)
    vendor = frappe.get_doc("Relief Vendor", name)
    vendor.check_permission("write")
    vendor.status = status
    vendor.save()
    return {"name": vendor.name, "status": vendor.status}


@frappe.whitelist(allow_guest=False)
def record_redemption(beneficiary, vendor, category, amount):
    """Vendor redeems part of a beneficiary's allowance.

    POST /api/method/salvus_relief.api.record_redemption
    Body: {"beneficiary": "BEN-0001", "vendor": "STORE-0001", "category": "food", "amount": 20}
    """
    vendor_email = frappe.db.get_value("Relief Vendor", vendor, "email")
    if vendor_email != frappe.session.user:
        require_roles(*ADMIN_ROLES)

    txn = frappe.get_doc({
        "doctype": "Relief Transaction",
        "beneficiary": beneficiary,
        "vendor": vendor,
        "category": category,
        "amount": flt(amount),
        "status": "Completed",
    })
    txn.insert(ignore_permissions=True)

    balances = frappe.get_doc("Beneficiary", beneficiary).get_balances()
    return {
        "transaction": txn.name,
        "category": txn.category,
        "amount": txn.amount,
        "total_spent": balances.total_spent,
        "balances": balances.balances,
    }


@frappe.whitelist(allow_guest=False)
def submit_campaign_request(**payload):
    """Organisation asks headquarters for permission to run campaigns.

    Supporting documents are attached afterwards with
    /api/method/upload_file (doctype=Campaign Request, docname=<name>).
    """
    request = frappe.new_doc("Campaign Request")
    request.update(_pick(payload, CAMPAIGN_REQUEST_FIELDS))
    request.created_by = frappe.session.user
    request.insert(ignore_permissions=True)
    return {"name": request.name}


@frappe.whitelist(allow_guest=False)
def get_campaign_requests(status=None):
    require_roles(*HQ_ROLES)
    filters = {"status": status} if status else {}

    requests = frappe.get_all(
        "Campaign Request",
        filters=filters,
        fields=["name"] + list(CAMPAIGN_REQUEST_FIELDS) + ["status", "creation"],
        order_by="creation desc",
    )
    for req in requests:
        req["documents"] = frappe.get_doc("Campaign Request", req.name).get_document_list()
    return requests


@frappe.whitelist(allow_guest=False)
def approve_campaign_request(name):
    require_roles(*HQ_ROLES)
    request = frappe.get_doc("Campaign Request", name)
    email_sent = request.approve()
    message = "Approved and invite sent" if email_sent else "Approved; invite email could not be sent"
    return {"name": request.name, "status": request.status, "message": message}


@frappe.whitelist(allow_guest=False)
def reject_campaign_request(name):
    require_roles(*HQ_ROLES)
    request = frappe.get_doc("Campaign Request", name)
    request.reject()
    return {"name": request.name, "status": request.status}
