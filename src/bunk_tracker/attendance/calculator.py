"""Attendance arithmetic.

Pure functions over (attended, total) lecture counters. A bunk adds one lecture
to the total without adding to attended; attending adds one to both.

Percentages are floats for display. Threshold decisions compare exactly:
attended/total*100 >= p  <=>  100*attended >= p*total, with p taken as the
exact rational value of the float minimum.
"""

from __future__ import annotations

import math
from fractions import Fraction

from ..core.constants import RISK_FLOOR_PERCENT, UNBOUNDED
from ..core.enums import RiskLevel


def percentage(attended: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return attended / total * 100


def attendance_after_bunks(attended: int, total: int, bunks: int = 1) -> float:
    return percentage(attended, total + bunks)


def meets_minimum(attended: int, total: int, minimum_pct: float) -> bool:
    """True when attended/total is at or above the minimum. Zero lectures count as 0%."""
    p = Fraction(minimum_pct)
    if total <= 0:
        return p <= 0
    return 100 * attended >= p * total


def safe_bunks(attended: int, total: int, minimum_pct: float) -> int:
    """Largest k such that every one of the next k bunks keeps attendance >= minimum.

    Attendance only falls as k grows, so k is the largest integer with
    100*attended >= p*(total + k), i.e. floor(100*attended/p) - total.
    """
    p = Fraction(minimum_pct)
    if total <= 0 or 100 * attended <= p * total:
        return 0
    if p <= 0:
        return UNBOUNDED
    return min(math.floor(100 * attended / p) - total, UNBOUNDED)


def recovery_classes_needed(attended: int, total: int, minimum_pct: float, bunks: int = 1) -> int:
    """Smallest m such that attending m classes in a row after `bunks` skips restores the minimum."""
    total += bunks
    if meets_minimum(attended, total, minimum_pct):
        return 0
    p = Fraction(minimum_pct)
    if p >= 100:
        return UNBOUNDED

    # 100*(attended + m) >= p*(total + m)  <=>  m >= (p*total - 100*attended) / (100 - p)
    return min(math.ceil((p * total - 100 * attended) / (100 - p)), UNBOUNDED)


def risk_level(pct: float, minimum_pct: float) -> RiskLevel:
    if pct >= minimum_pct:
        return RiskLevel.SAFE
    if pct >= min(RISK_FLOOR_PERCENT, minimum_pct):
        return RiskLevel.RISK
    return RiskLevel.DANGER
