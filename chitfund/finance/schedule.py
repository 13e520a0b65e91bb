"""
Month-by-month simulation of a chit fund pool.

Each period every member pays in, the organiser takes a commission, and the
pool pays out the period's withdrawal amount to as many waiting members as it
can cover. Whatever is left is partly lent out; principal plus interest comes
back into the next period's pool. Once the pool can cover every remaining
member, contributions for that final period are cut back to exactly what the
payouts need.

Running state is kept at full precision; only the reported records are
rounded to whole currency units.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from chitfund.types import (
    CommissionType,
    LoanRecord,
    MonthRecord,
    ScheduleResult,
    SchemeParameters,
)

logger = logging.getLogger(__name__)


def round_unit(x: float) -> float:
    """
    Round half away from zero to a whole currency unit.

    Negative halves go down: -2.5 -> -3. A JavaScript-style Math.round
    (half toward +inf) would give -2. Positive values agree.
    """
    return math.copysign(math.floor(abs(x) + 0.5), x) + 0.0


def commission_terms(p: SchemeParameters) -> Tuple[float, float]:
    """(commission_per_month, total_commission), both unrounded."""
    if p.commission_type == CommissionType.PER_PERIOD_RATE:
        per_month = p.total_pool * p.commission_rate / 100.0
        return per_month, per_month * p.total_members
    return p.fixed_commission_total / p.total_members, p.fixed_commission_total


PAYOUT_EPS = 1e-9


def _payout_count(available: float, withdrawal: float, remaining: int) -> int:
    if withdrawal == 0:
        return remaining
    # settlement pools are x / n * n and may fall just short of an exact multiple
    return min(math.floor(available / withdrawal + PAYOUT_EPS), remaining)


def simulate(p: SchemeParameters, loan_utilization_pct: Optional[float] = None) -> ScheduleResult:
    """
    Run the scheme to completion (at most total_members periods).
    `loan_utilization_pct` overrides p.loan_utilization_pct when given.
    """
    if p.total_members <= 0:
        return ScheduleResult.empty()

    utilization = p.loan_utilization_pct if loan_utilization_pct is None else float(loan_utilization_pct)
    n = p.total_members
    total_pool = p.total_pool
    commission_per_month, total_commission = commission_terms(p)
    net_pool_per_month = total_pool - commission_per_month

    months: List[MonthRecord] = []
    loans: List[LoanRecord] = []
    total_loan_amount = 0.0
    total_interest_earned = 0.0

    remaining_members = n
    carry_over = 0.0
    repayment_due = 0.0

    for i in range(n):
        if remaining_members <= 0:
            break
        withdrawal = p.first_withdrawal + p.monthly_increment * i
        effective_carry = carry_over + repayment_due

        contribution = p.monthly_contribution
        gross = net_pool_per_month
        available = gross + effective_carry

        settlement = remaining_members * withdrawal < available
        if settlement:
            required_net = remaining_members * withdrawal - effective_carry
            if required_net <= 0:
                contribution = 0.0
                gross = 0.0
                available = effective_carry
            else:
                contribution = (required_net + commission_per_month) / n
                gross = contribution * n - commission_per_month
                available = gross + effective_carry

        paid = _payout_count(available, withdrawal, remaining_members)
        total_withdrawn = withdrawal * paid
        remaining_pool = available - total_withdrawn

        loan = 0.0
        repayment_next = 0.0
        if not settlement and remaining_pool > 0:
            loan = remaining_pool * utilization / 100.0
            interest = loan * p.loan_interest_rate_pct / 100.0
            repayment_next = loan + interest
            total_loan_amount += loan
            total_interest_earned += interest
            loans.append(LoanRecord(
                month=i + 1,
                pool_available_for_loan=round_unit(remaining_pool),
                loan_amount=round_unit(loan),
                interest_rate_pct=p.loan_interest_rate_pct,
                interest_earned=round_unit(interest),
                repayment_due_next_period=round_unit(repayment_next),
            ))

        carry_over = remaining_pool - loan
        repayment_due = repayment_next
        remaining_members -= paid

        months.append(MonthRecord(
            month=i + 1,
            withdrawal_amount=round_unit(withdrawal),
            contribution_per_member=round_unit(contribution),
            gross_new_contributions=round_unit(gross),
            carry_over_from_previous=round_unit(effective_carry),
            available_pool=round_unit(available),
            actual_withdrawal_count=paid,
            total_withdrawn=round_unit(total_withdrawn),
            remaining_pool=round_unit(remaining_pool),
            remaining_members_after=remaining_members,
            is_settlement_month=settlement,
        ))
        logger.debug(
            "month %d: withdrawal=%.2f paid=%d pool_left=%.2f loan=%.2f%s",
            i + 1, withdrawal, paid, remaining_pool, loan, " (settlement)" if settlement else "",
        )

    last = months[-1]
    return ScheduleResult(
        duration=len(months),
        total_pool=total_pool,
        commission_per_month=round_unit(commission_per_month),
        total_commission=round_unit(total_commission),
        net_pool_per_month=net_pool_per_month,
        months=tuple(months),
        total_members_served=n - last.remaining_members_after,
        final_carry_over=last.remaining_pool,
        loans=tuple(loans),
        total_loan_amount=round_unit(total_loan_amount),
        total_interest_earned=round_unit(total_interest_earned),
    )


__all__ = ["simulate", "commission_terms", "round_unit"]
