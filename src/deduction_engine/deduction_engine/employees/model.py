from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as read from the HR directory.

    The engine never writes employees; HR screens own their lifecycle.
    """

    employee_id: str
    employee_number: str
    first_name: str
    last_name: str
    zk_employee_code: Optional[str] = None
    attendance_type_id: Optional[str] = None
    email: Optional[str] = None
    user_id: Optional[str] = None
    basic_salary: Optional[Decimal] = None
    first_name_ar: Optional[str] = None
    last_name_ar: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
