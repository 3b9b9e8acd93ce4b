from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from ..model import DeductionRule


@dataclass(frozen=True)
class SalaryBasis:
    """Per-day and per-hour rates derived from a monthly basic salary."""

    daily: Decimal
    hourly: Decimal


class DeductionValueStrategy(ABC):
    """Strategy Pattern: encapsulate how a rule's value becomes money."""

    @abstractmethod
    def amount(self, rule: DeductionRule, *, basis: SalaryBasis, minutes: int) -> Decimal:
        raise NotImplementedError
