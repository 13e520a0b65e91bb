"""
Pure pipeline: schedule simulation -> per-member cash flows -> IRR.
"""

from .schedule import simulate
from .returns import analyze, simulate_with_returns

__all__ = ["simulate", "analyze", "simulate_with_returns"]
