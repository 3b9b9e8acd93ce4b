from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_decimal
from .model import DeductionRule
from .repository import DeductionRuleRepository

_COLUMNS = "id, rule_name, rule_name_ar, rule_type, min_minutes, max_minutes, deduction_type, deduction_value"


def _to_rule(r: dict) -> DeductionRule:
    return DeductionRule(
        rule_id=str(r["id"]),
        rule_name=r["rule_name"],
        rule_name_ar=r.get("rule_name_ar"),
        rule_type=str(r["rule_type"]),
        deduction_type=str(r["deduction_type"]),
        deduction_value=normalize_decimal(r["deduction_value"]),
        min_minutes=int(r["min_minutes"]) if r.get("min_minutes") is not None else None,
        max_minutes=int(r["max_minutes"]) if r.get("max_minutes") is not None else None,
    )


class MySQLDeductionRuleRepository(DeductionRuleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[DeductionRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM deduction_rules
                WHERE is_active=1
                ORDER BY sort_order, id
                """
            )
            return [_to_rule(r) for r in fetchall(cur)]

    def get_by_ids(self, rule_ids: Sequence[str]) -> Sequence[DeductionRule]:
        if not rule_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM deduction_rules WHERE id IN ({in_clause(rule_ids)})",
                tuple(rule_ids),
            )
            return [_to_rule(r) for r in fetchall(cur)]
