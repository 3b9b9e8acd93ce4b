from __future__ import annotations

from decimal import Decimal

from ..model import DeductionRule
from .base import DeductionValueStrategy, SalaryBasis


class PercentageStrategy(DeductionValueStrategy):
    """Fraction of one day's salary (0.25 means a quarter day)."""

    def amount(self, rule: DeductionRule, *, basis: SalaryBasis, minutes: int) -> Decimal:
        return basis.daily * rule.deduction_value
