"""
Chit fund (rotating savings scheme) simulator: withdrawal schedule, idle-pool
lending and per-member returns.
"""

from .types import (
    CommissionType,
    LoanRecord,
    MemberReturn,
    MonthRecord,
    ScheduleResult,
    SchemeParameters,
)

__version__ = "0.1.0"

__all__ = [
    "CommissionType",
    "LoanRecord",
    "MemberReturn",
    "MonthRecord",
    "ScheduleResult",
    "SchemeParameters",
]
