from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, Sequence

from ..model import DeductionResult, DeductionRule


class DeductionCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll deductions)."""

    @abstractmethod
    def compute(
        self,
        *,
        late_minutes: int,
        early_exit_minutes: int,
        is_absent: bool,
        basic_salary: Optional[Decimal],
        rules: Sequence[DeductionRule],
    ) -> DeductionResult:
        raise NotImplementedError
