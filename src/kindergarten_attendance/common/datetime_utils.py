from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.enums import ValidationCode
from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_hhmm(value: Optional[str], field_name: str) -> Optional[time]:
    """Parse a 24-hour ``HH:MM`` string; blank input means no value."""
    v = (value or "").strip()
    if not v:
        return None
    m = _HHMM.match(v)
    if m is None:
        raise ValidationError(
            ValidationCode.BAD_TIME_FORMAT,
            f"{field_name}: invalid time {v!r} (expected HH:MM)",
            field=field_name,
        )
    return time(int(m.group(1)), int(m.group(2)))


def format_hhmm(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(TIME_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_date_field(value: Optional[str], field_name: str) -> date:
    """Like ``parse_iso_date`` but reports bad input as a ValidationError on ``field_name``."""
    try:
        return parse_iso_date(str(value or "").strip())
    except ValueError:
        raise ValidationError(
            ValidationCode.BAD_DATE_FORMAT,
            f"{field_name}: invalid date {value!r} (expected YYYY-MM-DD)",
            field=field_name,
        )
