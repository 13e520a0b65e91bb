"""
Value objects passed between the simulator, the return analysis and the
presentation/output layers. All of them are frozen; a run hands the caller a
fresh ScheduleResult that shares nothing with later runs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd


class CommissionType(str, Enum):
    PER_PERIOD_RATE = "monthly"
    FIXED_TOTAL = "onetime"


@dataclass(frozen=True)
class SchemeParameters:
    total_members: int = 20
    monthly_contribution: float = 5000.0
    first_withdrawal: float = 80000.0
    monthly_increment: float = 1000.0
    commission_type: CommissionType = CommissionType.PER_PERIOD_RATE
    commission_rate: float = 5.0            # % of the pool, per period
    fixed_commission_total: float = 10000.0  # currency, whole scheme
    loan_interest_rate_pct: float = 2.0     # per period
    loan_utilization_pct: float = 50.0      # 0..100

    @property
    def total_pool(self) -> float:
        return self.total_members * self.monthly_contribution


@dataclass(frozen=True)
class MonthRecord:
    month: int
    withdrawal_amount: float
    contribution_per_member: float
    gross_new_contributions: float
    carry_over_from_previous: float
    available_pool: float
    actual_withdrawal_count: int
    total_withdrawn: float
    remaining_pool: float
    remaining_members_after: int
    is_settlement_month: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LoanRecord:
    month: int
    pool_available_for_loan: float
    loan_amount: float
    interest_rate_pct: float
    interest_earned: float
    repayment_due_next_period: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MemberReturn:
    member_id: int
    withdrawal_month: int
    total_contribution: float
    withdrawal_amount: float
    net_return: float
    return_percentage: float
    monthly_irr: Optional[float] = None     # percent
    annualized_irr: Optional[float] = None  # percent

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SUMMARY_KEYS = (
    "duration",
    "total_pool",
    "commission_per_month",
    "total_commission",
    "net_pool_per_month",
    "total_members_served",
    "final_carry_over",
    "total_loan_amount",
    "total_interest_earned",
)


@dataclass(frozen=True)
class ScheduleResult:
    duration: int
    total_pool: float
    commission_per_month: float
    total_commission: float
    net_pool_per_month: float
    months: Tuple[MonthRecord, ...]
    total_members_served: int
    final_carry_over: float
    loans: Tuple[LoanRecord, ...]
    total_loan_amount: float
    total_interest_earned: float
    member_returns: Tuple[MemberReturn, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "ScheduleResult":
        """All-zero result returned for schemes without members."""
        return cls(
            duration=0,
            total_pool=0.0,
            commission_per_month=0.0,
            total_commission=0.0,
            net_pool_per_month=0.0,
            months=(),
            total_members_served=0,
            final_carry_over=0.0,
            loans=(),
            total_loan_amount=0.0,
            total_interest_earned=0.0,
        )

    def summary(self) -> Dict[str, Any]:
        return {k: getattr(self, k) for k in SUMMARY_KEYS}

    def to_dict(self) -> Dict[str, Any]:
        out = self.summary()
        out["months"] = [m.to_dict() for m in self.months]
        out["loans"] = [loan.to_dict() for loan in self.loans]
        out["members"] = [r.to_dict() for r in self.member_returns]
        return out

    def to_frames(self) -> Dict[str, pd.DataFrame]:
        """
        Tables for charts and exports. Column sets are fixed so that an empty
        schedule still yields frames with the expected headers.
        """
        return {
            "months": _frame(self.months, MonthRecord),
            "loans": _frame(self.loans, LoanRecord),
            "members": _frame(self.member_returns, MemberReturn),
        }


def _frame(rows, record_type) -> pd.DataFrame:
    columns: List[str] = list(record_type.__dataclass_fields__)
    return pd.DataFrame([r.to_dict() for r in rows], columns=columns)
