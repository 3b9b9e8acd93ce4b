from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ...core.constants import SALARY_DAYS_PER_MONTH, WORK_HOURS_PER_DAY
from ...core.enums import RuleType
from ..factory import DeductionStrategyFactory
from ..model import NO_DEDUCTION, DeductionResult, DeductionRule, as_decimal
from ..strategies.base import SalaryBasis
from .base import DeductionCalculator

CENT = Decimal("0.01")


def _salary_basis(basic_salary: Decimal) -> SalaryBasis:
    daily = basic_salary / SALARY_DAYS_PER_MONTH
    return SalaryBasis(daily=daily, hourly=daily / WORK_HOURS_PER_DAY)


def first_matching_rule(rules: Sequence[DeductionRule], rule_type: RuleType, minutes: int) -> Optional[DeductionRule]:
    """Ordered rule list: the first rule of ``rule_type`` whose range holds ``minutes`` wins."""

    for rule in rules:
        if rule.rule_type == rule_type.value and rule.matches(minutes):
            return rule
    return None


class StandardDeductionCalculator(DeductionCalculator):
    """Salary-prorated rule: day = salary / 30, hour = day / 8, cents rounded half-up.

    Absence short-circuits lateness and early exit. Otherwise the late and
    early-exit amounts are summed; the late rule is reported as the primary
    rule when both apply.
    """

    def __init__(self, *, strategy_factory: DeductionStrategyFactory | None = None):
        self._factory = strategy_factory or DeductionStrategyFactory()

    def compute(
        self,
        *,
        late_minutes: int,
        early_exit_minutes: int,
        is_absent: bool,
        basic_salary: Optional[Decimal],
        rules: Sequence[DeductionRule],
    ) -> DeductionResult:
        if basic_salary is None or as_decimal(basic_salary) <= 0:
            return NO_DEDUCTION

        basis = _salary_basis(as_decimal(basic_salary))

        if is_absent:
            rule = next((r for r in rules if r.rule_type == RuleType.ABSENCE.value), None)
            if rule is None:
                return NO_DEDUCTION
            return DeductionResult(
                amount=self._quantize(self._apply(rule, basis, 0)),
                rule_id=rule.rule_id,
                rule_ids=(rule.rule_id,),
            )

        total = Decimal(0)
        applied: list[str] = []

        if late_minutes > 0:
            rule = first_matching_rule(rules, RuleType.LATE_ARRIVAL, late_minutes)
            if rule is not None:
                total += self._apply(rule, basis, late_minutes)
                applied.append(rule.rule_id)

        if early_exit_minutes > 0:
            rule = first_matching_rule(rules, RuleType.EARLY_EXIT, early_exit_minutes)
            if rule is not None:
                total += self._apply(rule, basis, early_exit_minutes)
                applied.append(rule.rule_id)

        return DeductionResult(
            amount=self._quantize(total),
            rule_id=applied[0] if applied else None,
            rule_ids=tuple(applied),
        )

    def _apply(self, rule: DeductionRule, basis: SalaryBasis, minutes: int) -> Decimal:
        strategy = self._factory.for_rule(rule)
        if strategy is None:
            return Decimal(0)
        return strategy.amount(rule, basis=basis, minutes=minutes)

    @staticmethod
    def _quantize(amount: Decimal) -> Decimal:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_deduction(
    late_minutes: int,
    early_exit_minutes: int,
    is_absent: bool,
    basic_salary: Optional[Decimal],
    rules: Sequence[DeductionRule],
) -> DeductionResult:
    return StandardDeductionCalculator().compute(
        late_minutes=late_minutes,
        early_exit_minutes=early_exit_minutes,
        is_absent=is_absent,
        basic_salary=basic_salary,
        rules=rules,
    )
