import re

import frappe


def format_currency_short(value):
    """Format currency in short form for dashboards. e.g., $1.2M, $45K"""
    if not value:
        return "$0"
    value = float(value)
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    elif value >= 1_000:
        return f"${value / 1_000:.1f}K"
    else:
        return f"${value:,.0f}"


def slugify(text):
    """URL slug for a campaign name: "Flood Relief 2024!" -> "flood-relief-2024"."""
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower())
    return slug.strip("-")


def get_payload(payload, *fieldnames):
    """First non-missing value among a fieldname and its wire-name aliases."""
    for fieldname in fieldnames:
        if fieldname in payload:
            return payload[fieldname]
    return None


def parse_json_arg(value):
    """Whitelisted methods receive JSON bodies as strings when form-encoded."""
    if isinstance(value, str):
        try:
            return frappe.parse_json(value)
        except ValueError:
            return value
    return value
