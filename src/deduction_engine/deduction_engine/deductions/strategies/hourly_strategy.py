from __future__ import annotations

from decimal import Decimal

from ..model import DeductionRule
from .base import DeductionValueStrategy, SalaryBasis


class HourlyStrategy(DeductionValueStrategy):
    """Hourly rate times the minutes involved, scaled by the rule value as a multiplier."""

    def amount(self, rule: DeductionRule, *, basis: SalaryBasis, minutes: int) -> Decimal:
        return basis.hourly * (Decimal(minutes) / Decimal(60)) * rule.deduction_value
