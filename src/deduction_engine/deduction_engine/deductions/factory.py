from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..core.enums import DeductionType, RuleType
from .model import DeductionRule
from .strategies.base import DeductionValueStrategy
from .strategies.fixed_strategy import FixedStrategy
from .strategies.hourly_strategy import HourlyStrategy
from .strategies.percentage_strategy import PercentageStrategy

# Early exit and absence never had an hourly formula.
SUPPORTED_VALUE_TYPES: Mapping[RuleType, frozenset[DeductionType]] = {
    RuleType.LATE_ARRIVAL: frozenset({DeductionType.FIXED, DeductionType.PERCENTAGE, DeductionType.HOURLY}),
    RuleType.EARLY_EXIT: frozenset({DeductionType.FIXED, DeductionType.PERCENTAGE}),
    RuleType.ABSENCE: frozenset({DeductionType.FIXED, DeductionType.PERCENTAGE}),
    RuleType.OVERTIME: frozenset(),
}


@dataclass
class DeductionStrategyFactory:
    """Factory Pattern: choose the value strategy for a rule, or None when it cannot apply."""

    strategies: dict[DeductionType, DeductionValueStrategy] = field(
        default_factory=lambda: {
            DeductionType.FIXED: FixedStrategy(),
            DeductionType.PERCENTAGE: PercentageStrategy(),
            DeductionType.HOURLY: HourlyStrategy(),
        }
    )

    def for_rule(self, rule: DeductionRule) -> Optional[DeductionValueStrategy]:
        try:
            rule_type = RuleType(rule.rule_type)
            deduction_type = DeductionType(rule.deduction_type)
        except ValueError:
            return None

        if deduction_type not in SUPPORTED_VALUE_TYPES.get(rule_type, frozenset()):
            return None
        return self.strategies.get(deduction_type)
