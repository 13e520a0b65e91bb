import math

import pytest

from chitfund.sensitivity import run_utilization_sweep
from chitfund.types import SchemeParameters

REFERENCE = SchemeParameters()


def test_default_grid():
    df = run_utilization_sweep(REFERENCE)
    assert list(df["loan_utilization_pct"]) == [float(u) for u in range(0, 101, 10)]
    assert df.attrs["success_rate"] == 1.0
    zero = df.iloc[0]
    assert zero["total_loan_amount"] == 0
    assert zero["total_interest_earned"] == 0
    # full utilization lends out every leftover pool
    assert df["total_interest_earned"].iloc[-1] > 0
    assert df.attrs["max_interest_earned"] == df["total_interest_earned"].max()


def test_sweep_matches_single_runs():
    from chitfund.finance.returns import simulate_with_returns

    df = run_utilization_sweep(REFERENCE, [25, 75])
    for _, row in df.iterrows():
        res = simulate_with_returns(REFERENCE, row["loan_utilization_pct"])
        assert row["duration"] == res.duration
        assert row["total_loan_amount"] == res.total_loan_amount
        assert row["final_carry_over"] == res.final_carry_over


def test_sweep_without_members():
    df = run_utilization_sweep(SchemeParameters(total_members=0), [50])
    assert len(df) == 1
    assert df.iloc[0]["duration"] == 0
    assert math.isnan(df.iloc[0]["mean_annualized_irr"])


def test_empty_grid():
    df = run_utilization_sweep(REFERENCE, [])
    assert df.empty
    assert df.attrs == {}
