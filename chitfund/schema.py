from __future__ import annotations
from typing import Dict, Any

from .types import CommissionType

# Parameter schema: units, type, default and description.
# Types are used for coercion only; value ranges are not enforced.
SCHEMA: Dict[str, Dict[str, Any]] = {
    "total_members":          {"unit": "members",  "type": "int",   "default": 20,      "desc": "Members in the group (= maximum number of periods)"},
    "monthly_contribution":   {"unit": "currency", "type": "float", "default": 5000.0,  "desc": "Contribution per member per period"},
    "first_withdrawal":       {"unit": "currency", "type": "float", "default": 80000.0, "desc": "Payout in the first period"},
    "monthly_increment":      {"unit": "currency", "type": "float", "default": 1000.0,  "desc": "Payout increase per period"},
    "commission_type":        {"unit": "enum",     "type": "str",   "default": CommissionType.PER_PERIOD_RATE.value,
                               "choices": [c.value for c in CommissionType],
                               "desc": "'monthly' (% of pool each period) or 'onetime' (fixed total)"},
    "commission_rate":        {"unit": "percent",  "type": "float", "default": 5.0,     "desc": "Commission % of the pool per period"},
    "fixed_commission_total": {"unit": "currency", "type": "float", "default": 10000.0, "desc": "One-time commission, amortized over the term"},
    "loan_interest_rate_pct": {"unit": "percent",  "type": "float", "default": 2.0,     "desc": "Interest on idle-pool loans per period"},
    "loan_utilization_pct":   {"unit": "percent",  "type": "float", "default": 50.0,    "desc": "Share of the leftover pool lent out"},
}

# Config groups flattened by config.load_scheme_config
GROUPS = ("scheme", "commission", "loans")

# Legacy / short aliases accepted in configs
ALIASES: Dict[str, str] = {
    "members": "total_members",
    "contribution": "monthly_contribution",
    "increment": "monthly_increment",
    "one_time_commission": "fixed_commission_total",
    "loan_interest_rate": "loan_interest_rate_pct",
    "loan_utilization": "loan_utilization_pct",
}


def defaults() -> Dict[str, Any]:
    return {k: entry["default"] for k, entry in SCHEMA.items()}
