"""Campaign budget rules.

Normalizes the per-beneficiary cap and the per-category spending limits that
campaign create/update requests carry, and holds the arithmetic the doctypes
use to enforce those limits once the campaign is stored.

Everything here is pure: no database access, no frappe.local, so the same
functions back the API handlers, the Campaign doctype hooks and the
redemption checks on Relief Transaction.
"""

import json
import math
import re
from decimal import Decimal

import frappe


CAP_MESSAGE = "perBeneficiaryCap must be a number greater than 0"
EMPTY_CATEGORY_MESSAGE = "Category names must be non-empty after trimming"

RADIX_LITERAL = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)\Z")


class BudgetValidationError(frappe.ValidationError):
    pass


class CampaignBudget(frappe._dict):
    """Normalized budget: per_beneficiary_cap, category_limits, categories."""


def to_number(value):
    """Coerce request input to a float the way a loose JSON client would.

    None and blank strings count as 0, booleans as 0/1. Strings accept
    decimal and exponent notation plus 0x/0o/0b integer literals, but not
    digit separators. Magnitudes past float range become infinity; anything
    that cannot be read as a number comes back as NaN. Callers reject both
    as non-finite.
    """
    if value is None:
        return 0.0
    if isinstance(value, (bool, int, float, Decimal)):
        return _to_float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if RADIX_LITERAL.match(text):
            return _to_float(int(text, 0))
        if "_" in text:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _to_float(value):
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def normalize_category(name):
    return str(name).strip().lower()


def normalize_campaign_budget(beneficiary_cap=None, category_max_limits=None,
                              categories=None, require_cap=False):
    """Validate and normalize a campaign budget payload.

    Checks run in a fixed order and the first violation raises
    BudgetValidationError: the cap, then each limit entry in insertion order
    (empty key, bad value, value above the cap). Keys that collapse to the
    same category after trimming/lower-casing overwrite earlier ones.

    A limits mapping that is absent leaves ``category_limits`` as None so a
    partial update does not clear the stored mapping.
    """
    per_cap = None
    if require_cap or beneficiary_cap is not None:
        per_cap = to_number(beneficiary_cap)
        if not math.isfinite(per_cap) or per_cap <= 0:
            raise BudgetValidationError(CAP_MESSAGE)

    budget = CampaignBudget(
        per_beneficiary_cap=per_cap,
        category_limits=None,
        categories=_normalize_category_list(categories),
    )

    if not isinstance(category_max_limits, dict):
        return budget

    normalized = {}
    for raw_key, raw_val in category_max_limits.items():
        key = normalize_category(raw_key)
        if not key:
            raise BudgetValidationError(EMPTY_CATEGORY_MESSAGE)

        val = to_number(raw_val)
        if not math.isfinite(val) or val < 0:
            raise BudgetValidationError(f'Category "{raw_key}" MAX must be a number ≥ 0')

        if per_cap is not None and val > per_cap:
            raise BudgetValidationError(f'Category "{raw_key}" MAX cannot exceed perBeneficiaryCap')

        normalized[key] = val

    budget.category_limits = normalized
    if budget.categories is None:
        budget.categories = list(normalized)

    return budget


def _normalize_category_list(categories):
    if isinstance(categories, (list, tuple)):
        return [normalize_category(c) for c in categories]
    return None


def parse_category_limits(value):
    """Read a stored category limit mapping (JSON text or dict)."""
    if not value:
        return {}
    if isinstance(value, str):
        value = json.loads(value)
    return dict(value)


def parse_categories(value):
    """Read a stored category list (JSON text or list)."""
    if not value:
        return []
    if isinstance(value, str):
        value = json.loads(value)
    return list(value)


def validate_cap_against_allocation(beneficiary_cap, total_funds_allocated):
    """Cross-field check run when a campaign is saved.

    The cap must be positive and strictly below the campaign's total
    allocation. Only the stored document knows the allocation, so this runs
    at the doctype stage rather than inside normalize_campaign_budget.
    """
    cap = to_number(beneficiary_cap)
    if not math.isfinite(cap) or cap <= 0:
        raise BudgetValidationError("Per-beneficiary cap must be greater than 0")

    total = to_number(total_funds_allocated)
    if not cap < total:
        raise BudgetValidationError("Per-beneficiary cap must be less than total campaign budget")


def compute_category_balances(category_limits, spent_by_category):
    """Remaining allowance per category, in limit order, never below zero."""
    spent_by_category = spent_by_category or {}
    balances = []
    for category, limit in (category_limits or {}).items():
        spent = spent_by_category.get(category, 0)
        balances.append(frappe._dict(
            label=category,
            limit=limit,
            spent=spent,
            remaining=max(0, limit - spent),
        ))
    return balances


def check_redemption(budget, spent_by_category, category, amount):
    """Check a vendor redemption against a beneficiary's allowance.

    ``spent_by_category`` holds what the beneficiary has already drawn from
    this campaign. Returns the normalized category on success.
    """
    value = to_number(amount)
    if not math.isfinite(value) or value <= 0:
        raise BudgetValidationError("Redemption amount must be greater than 0")

    key = normalize_category(category or "")
    if not key:
        raise BudgetValidationError("Redemption category is required")

    if budget.categories and key not in budget.categories:
        raise BudgetValidationError(f'Category "{category}" is not allowed for this campaign')

    spent_by_category = spent_by_category or {}

    limit = (budget.category_limits or {}).get(key)
    if limit is not None:
        remaining = limit - spent_by_category.get(key, 0)
        if value > remaining:
            raise BudgetValidationError(
                f'Category "{key}" limit exceeded: {max(0, remaining):,.2f} remaining'
            )

    if budget.per_beneficiary_cap is not None:
        remaining = budget.per_beneficiary_cap - sum(spent_by_category.values())
        if value > remaining:
            raise BudgetValidationError(
                f"Per-beneficiary cap exceeded: {max(0, remaining):,.2f} remaining"
            )

    return key
