# chitfund/adapters.py
from __future__ import annotations

from typing import Any, Dict, Optional

from chitfund.finance.returns import simulate_with_returns
from chitfund.schema import defaults
from chitfund.types import CommissionType, SchemeParameters
from chitfund.validate import validate_params_dict


# ------------------------------
# Small helpers (no policy here)
# ------------------------------
def build_parameters(config: Dict[str, Any], *, mode: str = "relaxed") -> SchemeParameters:
    """
    Config mapping (grouped or flat, aliases allowed) -> SchemeParameters.
    Keys the config omits take the schema defaults.
    """
    values = defaults()
    values.update(validate_params_dict(config, mode=mode))
    values["commission_type"] = CommissionType(values["commission_type"])
    return SchemeParameters(**values)


def _mean(values) -> Optional[float]:
    vals = [v for v in values if v is not None]
    return sum(vals) / len(vals) if vals else None


# ------------------------------
# Public adapter(s)
# ------------------------------
def run_scheme(
    config: Dict[str, Any],
    *,
    loan_utilization_pct: Optional[float] = None,
    mode: str = "relaxed",
) -> Dict[str, Any]:
    """
    High-level adapter:
      1) Read scheme parameters from the config mapping.
      2) Simulate the schedule and the per-member returns.
      3) Flatten everything into plain dicts/lists for JSON/CSV writers.

    Returns:
      {
        'duration': int, 'total_pool': float, ..., 'total_interest_earned': float,
        'loan_utilization_pct': float,
        'mean_annualized_irr': float|None,
        'months':  [{'month': 1, 'withdrawal_amount': ..., ...}, ...],
        'loans':   [{'month': 1, 'loan_amount': ..., ...}, ...],
        'members': [{'member_id': 1, 'annualized_irr': float|None, ...}, ...],
      }
    """
    params = build_parameters(config, mode=mode)
    utilization = params.loan_utilization_pct if loan_utilization_pct is None else float(loan_utilization_pct)
    result = simulate_with_returns(params, utilization)

    out = result.to_dict()
    out["loan_utilization_pct"] = utilization
    out["mean_annualized_irr"] = _mean(r.annualized_irr for r in result.member_returns)
    return out


__all__ = ["build_parameters", "run_scheme"]
