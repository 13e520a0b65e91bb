# chitfund/finance/irr.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np
import numpy_financial as npf

logger = logging.getLogger(__name__)

INITIAL_GUESS = 0.01
# Newton steps outside (LOWER_LIMIT, UPPER_LIMIT) are reset to fixed rates
LOWER_LIMIT, LOWER_RESET = -0.99, -0.5
UPPER_LIMIT, UPPER_RESET = 10.0, 1.0
# Bisection bracket
BRACKET = (-0.99, 10.0)


# ---------- NPV ----------
def npv(rate: float, cashflows: Iterable[float]) -> float:
    """
    Classic discounted cash flow, period 0 undiscounted:
        NPV(r) = sum_{t=0..N} CF[t] / (1+r)^t

    Long series underflow (1+r)^t near r = -0.99; the result is then +-inf
    or nan, which the solvers treat as a sign only.
    """
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return float(npf.npv(float(rate), [float(cf) for cf in cashflows]))


def npv_derivative(rate: float, cashflows: Sequence[float]) -> float:
    """
    dNPV/dr = -sum_{t=0..N} t * CF[t] / (1+r)^(t+1)
    """
    cfs = np.asarray(cashflows, dtype=float)
    t = np.arange(cfs.size, dtype=float)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return float(-np.sum(t * cfs / (1.0 + float(rate)) ** (t + 1.0)))


# ---------- IRR (periodic) ----------
def _irr_newton(cashflows: List[float], max_iterations: int, tolerance: float) -> Optional[float]:
    """
    Newton-Raphson from INITIAL_GUESS. Returns None when the derivative
    vanishes or the iterations run out, so the caller can bisect.
    """
    r = INITIAL_GUESS
    for _ in range(max_iterations):
        f = npv(r, cashflows)
        if abs(f) < tolerance:
            return r
        df = npv_derivative(r, cashflows)
        if abs(df) < tolerance:
            return None
        candidate = r - f / df
        if candidate < LOWER_LIMIT:
            r = LOWER_RESET
        elif candidate > UPPER_LIMIT:
            r = UPPER_RESET
        else:
            r = candidate
    return None


def _irr_bisection(cashflows: List[float], max_iterations: int, tolerance: float) -> Optional[float]:
    """
    Bisection on NPV(r)=0 over BRACKET. Returns None if no midpoint gets
    within tolerance, e.g. when the cash flows never change sign.
    """
    lo, hi = BRACKET
    for _ in range(max_iterations):
        mid = (lo + hi) / 2.0
        f_mid = npv(mid, cashflows)
        if abs(f_mid) < tolerance:
            return mid
        f_lo = npv(lo, cashflows)
        # keep the sub-interval where the sign changes
        if (f_lo < 0) == (f_mid < 0):
            lo = mid
        else:
            hi = mid
    return None


def irr(
    cashflows: Iterable[float],
    max_iterations: int = 100,
    tolerance: float = 1e-7,
) -> Optional[float]:
    """
    Periodic IRR as a decimal rate (0.02 = 2% per period), or None when
    neither Newton-Raphson nor the bisection fallback converges.

    Negative entries are amounts paid in, positive entries amounts received.
    """
    cfs = [float(x) for x in cashflows]
    if not cfs:
        return None

    rate = _irr_newton(cfs, max_iterations, tolerance)
    if rate is not None:
        return rate

    logger.debug("newton did not converge for %d cash flows; bisecting", len(cfs))
    rate = _irr_bisection(cfs, max_iterations, tolerance)
    if rate is None:
        logger.debug("bisection did not converge; no IRR")
    return rate


__all__ = ["npv", "npv_derivative", "irr"]
