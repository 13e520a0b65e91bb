"""
Per-member return analysis on top of a simulated schedule.

Every member pays every period's contribution for the whole scheme; a member
who withdraws in month m also receives that month's withdrawal amount. Member
ids are handed out in payout order.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional

from chitfund.finance.irr import irr
from chitfund.finance.schedule import simulate
from chitfund.types import MemberReturn, ScheduleResult, SchemeParameters

logger = logging.getLogger(__name__)


def annualize(monthly_rate: float) -> float:
    """Compound a periodic decimal rate over 12 periods, as a percentage."""
    return ((1.0 + monthly_rate) ** 12 - 1.0) * 100.0


def member_cashflows(schedule: ScheduleResult, withdrawal_index: int) -> List[float]:
    """Cash flows of a member paid out in schedule.months[withdrawal_index]."""
    out: List[float] = []
    for idx, m in enumerate(schedule.months):
        cf = -m.contribution_per_member
        if idx == withdrawal_index:
            cf += m.withdrawal_amount
        out.append(cf)
    return out


def analyze(schedule: ScheduleResult) -> List[MemberReturn]:
    total_contribution = sum(m.contribution_per_member for m in schedule.months)

    results: List[MemberReturn] = []
    member_id = 0
    for idx, m in enumerate(schedule.months):
        if m.actual_withdrawal_count <= 0:
            continue
        # members paid in the same month are interchangeable
        cashflows = member_cashflows(schedule, idx)
        rate: Optional[float] = irr(cashflows)
        if rate is None:
            logger.debug("no IRR for members paid in month %d", m.month)

        net_return = m.withdrawal_amount - total_contribution
        pct = net_return / total_contribution * 100.0 if total_contribution else 0.0
        for _ in range(m.actual_withdrawal_count):
            member_id += 1
            results.append(MemberReturn(
                member_id=member_id,
                withdrawal_month=m.month,
                total_contribution=total_contribution,
                withdrawal_amount=m.withdrawal_amount,
                net_return=net_return,
                return_percentage=pct,
                monthly_irr=rate * 100.0 if rate is not None else None,
                annualized_irr=annualize(rate) if rate is not None else None,
            ))
    return results


def simulate_with_returns(
    p: SchemeParameters, loan_utilization_pct: Optional[float] = None
) -> ScheduleResult:
    """Simulate the scheme and attach the per-member returns."""
    schedule = simulate(p, loan_utilization_pct)
    return dataclasses.replace(schedule, member_returns=tuple(analyze(schedule)))


__all__ = ["analyze", "annualize", "member_cashflows", "simulate_with_returns"]
