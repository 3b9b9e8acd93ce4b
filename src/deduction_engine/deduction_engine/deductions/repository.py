from __future__ import annotations

from typing import Protocol, Sequence

from .model import DeductionRule


class DeductionRuleRepository(Protocol):
    def list_active(self) -> Sequence[DeductionRule]:
        """Active rules in evaluation order (first match wins)."""

        raise NotImplementedError

    def get_by_ids(self, rule_ids: Sequence[str]) -> Sequence[DeductionRule]:
        """Rules by id regardless of active flag (used to name historic deductions)."""

        raise NotImplementedError
