import frappe
from frappe.utils import flt

from salvus_relief.permissions import is_relief_admin


def execute(filters=None):
    columns = get_columns()
    data = get_data(filters)
    chart = get_chart(data)
    summary = get_summary(data)
    return columns, data, None, chart, summary


def get_columns():
    return [
        {"fieldname": "campaign", "label": "Campaign", "fieldtype": "Link", "options": "Campaign", "width": 220},
        {"fieldname": "status", "label": "Status", "fieldtype": "Data", "width": 80},
        {"fieldname": "total_funds_allocated", "label": "Allocated", "fieldtype": "Currency", "width": 130},
        {"fieldname": "beneficiary_cap", "label": "Cap / Beneficiary", "fieldtype": "Currency", "width": 130},
        {"fieldname": "beneficiaries", "label": "Beneficiaries", "fieldtype": "Int", "width": 100},
        {"fieldname": "vendors", "label": "Vendors", "fieldtype": "Int", "width": 80},
        {"fieldname": "funds_spent", "label": "Funds Spent", "fieldtype": "Currency", "width": 130},
        {"fieldname": "remaining", "label": "Remaining", "fieldtype": "Currency", "width": 130},
        {"fieldname": "utilization", "label": "Utilization %", "fieldtype": "Percent", "width": 100},
    ]


def get_data(filters):
    conditions = "1 = 1"
    values = {}

    if filters and filters.get("status"):
        conditions += " AND c.status = %(status)s"
        values["status"] = filters["status"]

    created_by = filters.get("created_by") if filters else None
    if is_relief_admin():
        created_by = frappe.session.user
    if created_by:
        conditions += " AND c.created_by = %(created_by)s"
        values["created_by"] = created_by

    data = frappe.db.sql(f"""
        SELECT
            c.name AS campaign,
            c.campaign_name,
            c.status,
            c.total_funds_allocated,
            c.beneficiary_cap,
            (SELECT COUNT(*) FROM `tabBeneficiary` b WHERE b.campaign = c.name) AS beneficiaries,
            (SELECT COUNT(*) FROM `tabRelief Vendor` v WHERE v.campaign = c.name) AS vendors,
            (SELECT COALESCE(SUM(t.amount), 0) FROM `tabRelief Transaction` t
                WHERE t.campaign = c.name AND t.status = 'Completed') AS funds_spent
        FROM `tabCampaign` c
        WHERE {conditions}
        ORDER BY c.creation DESC
    """, values, as_dict=True)

    for row in data:
        row.remaining = flt(row.total_funds_allocated) - flt(row.funds_spent)
        row.utilization = (
            flt(row.funds_spent) / flt(row.total_funds_allocated) * 100
            if row.total_funds_allocated else 0
        )

    return data


def get_chart(data):
    if not data:
        return None

    labels = [(d.get("campaign_name") or d.get("campaign", ""))[:15] for d in data[:10]]

    return {
        "data": {
            "labels": labels,
            "datasets": [
                {"name": "Allocated", "values": [d.get("total_funds_allocated", 0) for d in data[:10]]},
                {"name": "Spent", "values": [d.get("funds_spent", 0) for d in data[:10]]},
            ],
        },
        "type": "bar",
        "colors": ["#5B8FF9", "#5AD8A6"],
    }


def get_summary(data):
    total_allocated = sum(flt(d.get("total_funds_allocated")) for d in data)
    total_spent = sum(flt(d.get("funds_spent")) for d in data)
    total_beneficiaries = sum(d.get("beneficiaries", 0) for d in data)

    return [
        {"value": total_allocated, "label": "Total Allocated", "datatype": "Currency", "indicator": "blue"},
        {"value": total_spent, "label": "Total Spent", "datatype": "Currency", "indicator": "green"},
        {"value": total_allocated - total_spent, "label": "Remaining", "datatype": "Currency", "indicator": "orange"},
        {"value": total_beneficiaries, "label": "Beneficiaries", "datatype": "Int", "indicator": "blue"},
        {
            "value": (total_spent / total_allocated * 100) if total_allocated else 0,
            "label": "Utilization",
            "datatype": "Percent",
            "indicator": "red" if total_allocated and (total_spent / total_allocated) > 0.9 else "green",
        },
    ]
