import frappe


CARD_DEFAULTS = {
    "filters_json": "{}",
    "show_percentage_stats": 0,
    "stats_time_interval": "Daily",
    "is_standard": 0,
}

CHART_DEFAULTS = {
    "filters_json": "{}",
    "type": "Line",
    "timeseries": 0,
    "is_standard": 0,
}


def create_dashboard_elements():
    """Create the Number Cards and Dashboard Charts shown on the Relief Core workspace.

    Safe to re-run; records that already exist are left alone.

        bench --site relief.localhost execute salvus_relief.setup_dashboard.create_dashboard_elements
    """
    insert_missing("Number Card", get_number_cards(), CARD_DEFAULTS)
    insert_missing("Dashboard Chart", get_dashboard_charts(), CHART_DEFAULTS)
    frappe.db.commit()
    print("Dashboard elements created successfully.")


def insert_missing(doctype, records, defaults):
    for record in records:
        if frappe.db.exists(doctype, record["name"]):
            print(f"  {doctype} '{record['name']}' already exists, skipping")
            continue

        frappe.get_doc({"doctype": doctype, **defaults, **record}).insert(ignore_permissions=True)
        print(f"  Created {doctype}: {record['name']}")


def get_number_cards():
    return [
        {
            "name": "Active Campaigns",
            "label": "Active Campaigns",
            "document_type": "Campaign",
            "function": "Count",
            "filters_json": '{"status": "Active"}',
            "color": "#0D9488",
        },
        {
            "name": "Funds Allocated",
            "label": "Funds Allocated",
            "document_type": "Campaign",
            "function": "Sum",
            "aggregate_function_based_on": "total_funds_allocated",
            "filters_json": '{"status": ["!=", "Closed"]}',
            "color": "#5B8FF9",
        },
        {
            "name": "Funds Spent",
            "label": "Funds Spent",
            "document_type": "Relief Transaction",
            "function": "Sum",
            "aggregate_function_based_on": "amount",
            "filters_json": '{"status": "Completed"}',
            "show_percentage_stats": 1,
            "stats_time_interval": "Monthly",
            "color": "#5AD8A6",
        },
        {
            "name": "Pending Beneficiaries",
            "label": "Pending Beneficiaries",
            "document_type": "Beneficiary",
            "function": "Count",
            "filters_json": '{"status": "Pending"}',
            "color": "#F6BD16",
        },
        {
            "name": "High Risk Alerts",
            "label": "High Risk Beneficiaries",
            "document_type": "Beneficiary",
            "function": "Count",
            "filters_json": '{"risk_level": "High"}',
            "color": "#EF4444",
        },
        {
            "name": "Flagged Vendors",
            "label": "Flagged Vendors",
            "document_type": "Relief Vendor",
            "function": "Count",
            "filters_json": '{"status": "Flagged"}',
            "color": "#E8684A",
        },
    ]


def get_dashboard_charts():
    return [
        {
            "name": "Monthly Redemptions",
            "chart_name": "Monthly Redemptions",
            "chart_type": "Sum",
            "document_type": "Relief Transaction",
            "based_on": "timestamp",
            "value_based_on": "amount",
            "time_interval": "Monthly",
            "timespan": "Last Year",
            "timeseries": 1,
            "filters_json": '{"status": "Completed"}',
            "type": "Line",
            "color": "#5AD8A6",
        },
        {
            "name": "Spend by Category",
            "chart_name": "Spend by Category",
            "chart_type": "Group By",
            "document_type": "Relief Transaction",
            "group_by_based_on": "category",
            "aggregate_function_based_on": "amount",
            "group_by_type": "Sum",
            "filters_json": '{"status": "Completed"}',
            "type": "Bar",
            "color": "#5B8FF9",
        },
        {
            "name": "Beneficiary Status",
            "chart_name": "Beneficiary Status",
            "chart_type": "Group By",
            "document_type": "Beneficiary",
            "group_by_based_on": "status",
            "group_by_type": "Count",
            "type": "Pie",
            "color": "#F6BD16",
        },
    ]
