from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.datetime_utils import parse_hhmm
from ..common.validators import parse_status
from ..core.enums import AttendanceStatus, ValidationCode
from ..core.exceptions import ValidationError
from .model import AttendanceRecord


@dataclass(frozen=True)
class AttendanceForm:
    """Raw text input for one record, as submitted by an edit form."""

    status: str
    check_in_time: str = ""
    check_out_time: str = ""
    late_arrival_time: str = ""
    excuse_reason: str = ""


@dataclass(frozen=True)
class RuleOutcome:
    record: AttendanceRecord
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AttendanceRules:
    """Status/field consistency rules for attendance records.

    Pure: no I/O, no clock. Dependent fields are normalized from the status
    before required fields are checked, so switching a record to ABSENT
    always validates.
    """

    def normalize(self, record: AttendanceRecord) -> AttendanceRecord:
        status = record.status

        if not status.allows_evidence:
            return record.with_changes(
                check_in_time=None,
                check_out_time=None,
                late_arrival_time=None,
                check_in_image=None,
                check_out_image=None,
            )

        if status == AttendanceStatus.PRESENT:
            # excuse only applies to ABSENT/LATE
            return record.with_changes(late_arrival_time=None, excuse_reason=None)

        if record.check_in_time is None and record.late_arrival_time is not None:
            return record.with_changes(check_in_time=record.late_arrival_time)
        return record

    def check(self, record: AttendanceRecord) -> AttendanceRecord:
        """Normalize, then raise ValidationError on the first broken rule."""

        record = self.normalize(record)

        # check-out consistency is reported before missing required fields
        if record.check_out_time is not None:
            if record.check_in_time is None:
                raise ValidationError(
                    ValidationCode.CHECK_OUT_BEFORE_CHECK_IN,
                    "Cannot check out before checking in",
                    field="check_out_time",
                )
            if record.check_out_time < record.check_in_time:
                raise ValidationError(
                    ValidationCode.CHECK_OUT_BEFORE_CHECK_IN,
                    "Check-out time cannot be earlier than check-in time",
                    field="check_out_time",
                )

        if record.status == AttendanceStatus.PRESENT and record.check_in_time is None:
            raise ValidationError(
                ValidationCode.MISSING_CHECK_IN,
                "Check-in time is required for PRESENT",
                field="check_in_time",
            )

        if record.status == AttendanceStatus.LATE and record.late_arrival_time is None:
            raise ValidationError(
                ValidationCode.MISSING_LATE_ARRIVAL,
                "Late arrival time is required for LATE",
                field="late_arrival_time",
            )

        return record

    def validate(self, record: AttendanceRecord) -> RuleOutcome:
        try:
            return RuleOutcome(record=self.check(record))
        except ValidationError as e:
            return RuleOutcome(record=record, error=e)

    def apply_form(self, record: AttendanceRecord, form: AttendanceForm) -> RuleOutcome:
        """Merge text form input into ``record`` and validate the result."""

        try:
            updated = record.with_changes(
                status=parse_status(form.status),
                check_in_time=parse_hhmm(form.check_in_time, "check_in_time"),
                check_out_time=parse_hhmm(form.check_out_time, "check_out_time"),
                late_arrival_time=parse_hhmm(form.late_arrival_time, "late_arrival_time"),
                excuse_reason=(form.excuse_reason or "").strip() or None,
            )
        except ValidationError as e:
            return RuleOutcome(record=record, error=e)
        return self.validate(updated)
