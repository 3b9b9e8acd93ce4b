from __future__ import annotations

from decimal import Decimal

from ..model import DeductionRule
from .base import DeductionValueStrategy, SalaryBasis


class FixedStrategy(DeductionValueStrategy):
    """Flat amount regardless of salary or minutes."""

    def amount(self, rule: DeductionRule, *, basis: SalaryBasis, minutes: int) -> Decimal:
        return rule.deduction_value
