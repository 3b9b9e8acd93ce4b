from __future__ import annotations

import math
from itertools import combinations
from typing import Sequence

from ..core.enums import RuleType
from .model import DeductionRule


def _bounds(rule: DeductionRule) -> tuple[float, float]:
    lower = rule.min_minutes if rule.min_minutes is not None else 0
    upper = rule.max_minutes if rule.max_minutes is not None else math.inf
    return float(lower), float(upper)


def find_overlapping_rules(rules: Sequence[DeductionRule]) -> list[tuple[DeductionRule, DeductionRule]]:
    """Pairs of same-type, range-based rules whose ``[min, max)`` ranges intersect.

    First-match selection makes an overlapping rule set order-dependent, so
    rule setup should reject whatever this returns. Absence rules carry no
    range and are checked for duplicates instead.
    """

    overlaps: list[tuple[DeductionRule, DeductionRule]] = []
    for a, b in combinations(rules, 2):
        if a.rule_type != b.rule_type:
            continue
        if a.rule_type == RuleType.ABSENCE.value:
            overlaps.append((a, b))
            continue

        a_lo, a_hi = _bounds(a)
        b_lo, b_hi = _bounds(b)
        if a_lo < b_hi and b_lo < a_hi:
            overlaps.append((a, b))
    return overlaps
