from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.enums import ProcessType
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_process_type(value: Optional[str]) -> ProcessType:
    if value is None or value == "":
        return ProcessType.MORNING
    try:
        return ProcessType(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"process_type must be 'morning' or 'evening', got {value!r}")


def require_iso_date(value: Optional[str], *, default: date) -> date:
    if value is None or value == "":
        return default
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"target_date must be YYYY-MM-DD, got {value!r}")


def require_bool(value: Any, field_name: str, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ValidationError(f"{field_name} must be a boolean")
