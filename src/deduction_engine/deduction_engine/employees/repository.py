from __future__ import annotations

from typing import Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for the employee directory.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def list_active_with_zk_code(self) -> Sequence[Employee]:
        """Active employees that have a biometric device code, in directory order."""

        raise NotImplementedError

    def list_by_zk_codes(self, codes: Sequence[str]) -> Sequence[Employee]:
        raise NotImplementedError
