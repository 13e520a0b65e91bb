"""
Loan-utilization sensitivity for a chit fund scheme.

Re-runs the full schedule + return analysis for a grid of utilization
percentages and tabulates the pool-level outcomes, so the effect of lending
out more (or less) of the idle pool can be compared side by side.
"""
from __future__ import annotations

from typing import Iterable, Optional
import warnings

import numpy as np
import pandas as pd

from .finance.returns import simulate_with_returns
from .types import SchemeParameters

DEFAULT_GRID = np.linspace(0.0, 100.0, 11)


def run_utilization_sweep(
    params: SchemeParameters,
    utilizations: Optional[Iterable[float]] = None,
) -> pd.DataFrame:
    """
    Simulate the scheme once per utilization percentage.

    Args:
        params: Scheme parameters; their own loan_utilization_pct is ignored
        utilizations: Percentages to evaluate (default 0, 10, ..., 100)

    Returns:
        DataFrame with one row per utilization, summary stats in df.attrs
    """
    grid = DEFAULT_GRID if utilizations is None else np.asarray(list(utilizations), dtype=float)
    out_data = []
    failed_count = 0

    for u in grid:
        try:
            result = simulate_with_returns(params, float(u))
        except (ArithmeticError, ValueError) as e:
            failed_count += 1
            warnings.warn(f"Utilization {u:g}% failed: {e}")
            continue

        irrs = [r.annualized_irr for r in result.member_returns if r.annualized_irr is not None]
        out_data.append({
            'loan_utilization_pct': float(u),
            'duration': result.duration,
            'total_members_served': result.total_members_served,
            'total_loan_amount': result.total_loan_amount,
            'total_interest_earned': result.total_interest_earned,
            'final_carry_over': result.final_carry_over,
            'mean_annualized_irr': float(np.mean(irrs)) if irrs else np.nan,
            'irr_converged': len(irrs),
        })

    if failed_count > 0:
        warnings.warn(f"Utilization sweep: {failed_count}/{len(grid)} points failed")

    df = pd.DataFrame(out_data)

    if len(df) > 0:
        best = df.loc[df['total_interest_earned'].idxmax()]
        df.attrs['best_utilization_pct'] = float(best['loan_utilization_pct'])
        df.attrs['max_interest_earned'] = float(best['total_interest_earned'])
        df.attrs['min_duration'] = int(df['duration'].min())
        df.attrs['success_rate'] = len(df) / len(grid)

    return df
