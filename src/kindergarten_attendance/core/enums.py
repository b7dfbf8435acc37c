from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"

    @property
    def allows_evidence(self) -> bool:
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


class ValidationCode(str, Enum):
    """Which rule a rejected record or request broke."""

    MISSING_CHECK_IN = "MISSING_CHECK_IN"
    MISSING_LATE_ARRIVAL = "MISSING_LATE_ARRIVAL"
    CHECK_OUT_BEFORE_CHECK_IN = "CHECK_OUT_BEFORE_CHECK_IN"
    BAD_TIME_FORMAT = "BAD_TIME_FORMAT"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    INVALID_ID = "INVALID_ID"
    FUTURE_DATE = "FUTURE_DATE"
    BAD_DATE_FORMAT = "BAD_DATE_FORMAT"
    INVALID_IMAGE = "INVALID_IMAGE"


class BulkOperation(str, Enum):
    MARK_STATUS = "MARK_STATUS"
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"
