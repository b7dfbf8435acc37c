from __future__ import annotations

from datetime import date

from ..core.enums import AttendanceStatus, ValidationCode
from ..core.exceptions import ValidationError


def require_positive_id(value, field_name: str) -> int:
    try:
        ident = int(value)
    except (TypeError, ValueError):
        ident = 0
    if ident <= 0:
        raise ValidationError(ValidationCode.INVALID_ID, f"{field_name} must be a positive id", field=field_name)
    return ident


def require_date_range(start: date, end: date) -> None:
    if start is None or end is None:
        raise ValidationError(ValidationCode.INVALID_DATE_RANGE, "Start date and end date are required", field="start")
    if start > end:
        raise ValidationError(ValidationCode.INVALID_DATE_RANGE, "Start date cannot be after end date", field="start")


def parse_status(value) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError(
            ValidationCode.INVALID_STATUS,
            "Invalid status. Must be PRESENT, ABSENT, or LATE",
            field="status",
        )
