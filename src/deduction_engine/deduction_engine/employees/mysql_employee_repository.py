from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_decimal
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    id, employee_number, first_name, last_name, first_name_ar, last_name_ar,
    zk_employee_code, attendance_type_id, email, user_id, basic_salary
"""


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=str(row["id"]),
        employee_number=row["employee_number"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        zk_employee_code=row.get("zk_employee_code"),
        attendance_type_id=row.get("attendance_type_id"),
        email=row.get("email"),
        user_id=row.get("user_id"),
        basic_salary=normalize_decimal(row.get("basic_salary")),
        first_name_ar=row.get("first_name_ar"),
        last_name_ar=row.get("last_name_ar"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_with_zk_code(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE zk_employee_code IS NOT NULL AND employment_status='active'
                ORDER BY employee_number
                """
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def list_by_zk_codes(self, codes: Sequence[str]) -> Sequence[Employee]:
        if not codes:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE zk_employee_code IN ({in_clause(codes)})",
                tuple(codes),
            )
            return [_to_employee(r) for r in fetchall(cur)]
