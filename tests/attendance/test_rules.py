from __future__ import annotations

from datetime import date, time

import pytest

from kindergarten_attendance.attendance.model import AttendanceRecord
from kindergarten_attendance.attendance.rules import AttendanceForm, AttendanceRules
from kindergarten_attendance.core.enums import AttendanceStatus, ValidationCode
from kindergarten_attendance.core.exceptions import ValidationError

DAY = date(2024, 6, 1)


def _record(status: AttendanceStatus, **kwargs) -> AttendanceRecord:
    return AttendanceRecord(student_id=1, attendance_date=DAY, status=status, **kwargs)


def test_absent_clears_times_and_evidence():
    rec = _record(
        AttendanceStatus.ABSENT,
        check_in_time=time(8, 0),
        check_out_time=time(16, 0),
        late_arrival_time=time(8, 15),
        check_in_image=b"in",
        check_out_image=b"out",
        excuse_reason="fever",
    )

    outcome = AttendanceRules().validate(rec)

    assert outcome.ok
    r = outcome.record
    assert r.check_in_time is None
    assert r.check_out_time is None
    assert r.late_arrival_time is None
    assert r.check_in_image is None
    assert r.check_out_image is None
    assert r.excuse_reason == "fever"


def test_present_without_check_in_fails():
    outcome = AttendanceRules().validate(_record(AttendanceStatus.PRESENT))

    assert not outcome.ok
    assert outcome.error.code == ValidationCode.MISSING_CHECK_IN
    assert outcome.error.field == "check_in_time"


def test_present_clears_late_arrival():
    rec = _record(AttendanceStatus.PRESENT, check_in_time=time(7, 50), late_arrival_time=time(8, 20))

    outcome = AttendanceRules().validate(rec)

    assert outcome.ok
    assert outcome.record.late_arrival_time is None
    assert outcome.record.check_in_time == time(7, 50)


def test_late_defaults_check_in_to_late_arrival():
    rec = _record(AttendanceStatus.LATE, late_arrival_time=time(8, 15))

    outcome = AttendanceRules().validate(rec)

    assert outcome.ok
    assert outcome.record.check_in_time == time(8, 15)


def test_late_keeps_explicit_check_in():
    rec = _record(AttendanceStatus.LATE, late_arrival_time=time(8, 15), check_in_time=time(8, 20))

    assert AttendanceRules().validate(rec).record.check_in_time == time(8, 20)


def test_late_without_arrival_time_fails():
    outcome = AttendanceRules().validate(_record(AttendanceStatus.LATE, check_in_time=time(8, 40)))

    assert outcome.error.code == ValidationCode.MISSING_LATE_ARRIVAL
    assert outcome.error.field == "late_arrival_time"


def test_check_out_without_check_in_fails():
    rec = _record(AttendanceStatus.PRESENT, check_out_time=time(16, 0))

    with pytest.raises(ValidationError) as exc:
        AttendanceRules().check(rec)

    assert exc.value.code == ValidationCode.CHECK_OUT_BEFORE_CHECK_IN
    assert exc.value.field == "check_out_time"


def test_late_check_out_uses_defaulted_check_in():
    rec = _record(AttendanceStatus.LATE, late_arrival_time=time(8, 15), check_out_time=time(16, 0))

    outcome = AttendanceRules().validate(rec)

    assert outcome.ok
    assert outcome.record.check_in_time == time(8, 15)


def test_check_out_earlier_than_check_in_fails():
    rec = _record(AttendanceStatus.PRESENT, check_in_time=time(8, 0), check_out_time=time(7, 0))

    outcome = AttendanceRules().validate(rec)

    assert outcome.error.code == ValidationCode.CHECK_OUT_BEFORE_CHECK_IN
    assert outcome.error.field == "check_out_time"


def test_validate_returns_original_record_on_failure():
    rec = _record(AttendanceStatus.PRESENT, late_arrival_time=time(8, 10))

    outcome = AttendanceRules().validate(rec)

    assert not outcome.ok
    assert outcome.record is rec


def test_apply_form_parses_hhmm():
    base = AttendanceRecord.placeholder(student_id=1, attendance_date=DAY)
    form = AttendanceForm(status="late", late_arrival_time="08:15", excuse_reason="  traffic ")

    outcome = AttendanceRules().apply_form(base, form)

    assert outcome.ok
    assert outcome.record.status == AttendanceStatus.LATE
    assert outcome.record.check_in_time == time(8, 15)
    assert outcome.record.excuse_reason == "traffic"


@pytest.mark.parametrize("field", ["check_in_time", "check_out_time", "late_arrival_time"])
def test_apply_form_bad_time_names_field(field):
    base = AttendanceRecord.placeholder(student_id=1, attendance_date=DAY)
    values = {"check_in_time": "08:00", field: "8h30"}
    form = AttendanceForm(status="PRESENT", **values)

    outcome = AttendanceRules().apply_form(base, form)

    assert outcome.error.code == ValidationCode.BAD_TIME_FORMAT
    assert outcome.error.field == field
    assert outcome.record is base


def test_apply_form_rejects_unknown_status():
    base = AttendanceRecord.placeholder(student_id=1, attendance_date=DAY)

    outcome = AttendanceRules().apply_form(base, AttendanceForm(status="SICK"))

    assert outcome.error.code == ValidationCode.INVALID_STATUS


def test_switching_to_absent_always_validates():
    rec = _record(AttendanceStatus.PRESENT, check_out_time=time(16, 0), check_out_image=b"x")

    outcome = AttendanceRules().validate(rec.with_changes(status=AttendanceStatus.ABSENT))

    assert outcome.ok


@pytest.mark.parametrize("status", [AttendanceStatus.PRESENT, AttendanceStatus.LATE])
def test_evidence_survives_for_attending_statuses(status):
    rec = _record(
        status,
        check_in_time=time(8, 0),
        late_arrival_time=time(8, 0),
        check_in_image=b"in",
    )

    assert status.allows_evidence
    assert AttendanceRules().normalize(rec).check_in_image == b"in"
    assert not AttendanceStatus.ABSENT.allows_evidence
