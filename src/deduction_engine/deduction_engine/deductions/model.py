from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional


def as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class DeductionRule:
    """Domain entity: one policy row of the deduction rule table.

    ``rule_type`` and ``deduction_type`` are kept as the raw stored strings so a
    misconfigured row loads fine and simply never contributes an amount.
    ``min_minutes``/``max_minutes`` form a half-open range ``[min, max)``;
    a missing bound is unbounded. Adjacent tiers therefore share their boundary
    (0-30 then 30-60); a rule stored as 0-30 does not cover exactly 30 minutes.
    """

    rule_id: str
    rule_name: str
    rule_type: str
    deduction_type: str
    deduction_value: Decimal
    min_minutes: Optional[int] = None
    max_minutes: Optional[int] = None
    rule_name_ar: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "deduction_value", as_decimal(self.deduction_value))

    def matches(self, minutes: int) -> bool:
        lower = self.min_minutes if self.min_minutes is not None else 0
        if minutes < lower:
            return False
        return self.max_minutes is None or minutes < self.max_minutes

    @property
    def display_name(self) -> str:
        return self.rule_name_ar or self.rule_name


@dataclass(frozen=True)
class DeductionResult:
    amount: Decimal
    rule_id: Optional[str] = None
    # Every rule that contributed to ``amount``; ``rule_id`` is only the primary one.
    rule_ids: tuple[str, ...] = field(default_factory=tuple)


NO_DEDUCTION = DeductionResult(amount=Decimal("0.00"))
