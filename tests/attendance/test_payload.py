from __future__ import annotations

import base64
from datetime import date, time

import pytest

from kindergarten_attendance.attendance.model import AttendanceRecord
from kindergarten_attendance.attendance.payload import base_from_payload, record_from_payload, record_to_dict
from kindergarten_attendance.attendance.rules import AttendanceRules
from kindergarten_attendance.core.enums import AttendanceStatus, ValidationCode
from kindergarten_attendance.core.exceptions import ValidationError


def test_payload_round_trip_for_late_record():
    data = {
        "student_id": 4,
        "date": "2024-06-01",
        "status": "LATE",
        "late_arrival_time": "08:15",
        "check_in_image": base64.b64encode(b"jpeg").decode(),
    }

    outcome = record_from_payload(base_from_payload(data), data, AttendanceRules())

    assert outcome.ok
    rec = outcome.record
    assert rec.attendance_date == date(2024, 6, 1)
    assert rec.check_in_time == time(8, 15)
    assert rec.check_in_image == b"jpeg"

    out = record_to_dict(rec)
    assert out["check_in_time"] == "08:15"
    assert out["has_check_in_image"] is True
    assert "check_in_image" not in out
    assert out["saved"] is False


def test_bad_date_is_reported_on_date_field():
    with pytest.raises(ValidationError) as exc:
        base_from_payload({"student_id": 1, "date": "01/06/2024"})

    assert exc.value.code == ValidationCode.BAD_DATE_FORMAT
    assert exc.value.field == "date"


def test_bad_image_is_rejected():
    with pytest.raises(ValidationError) as exc:
        base_from_payload({"student_id": 1, "date": "2024-06-01", "check_out_image": "***"})

    assert exc.value.code == ValidationCode.INVALID_IMAGE
    assert exc.value.field == "check_out_image"


def test_record_to_dict_can_include_images():
    rec = AttendanceRecord(student_id=1, attendance_date=date(2024, 6, 1), status=AttendanceStatus.PRESENT,
                           check_in_time=time(8, 0), check_in_image=b"\x00\x01")

    out = record_to_dict(rec, include_images=True)

    assert base64.b64decode(out["check_in_image"]) == b"\x00\x01"
    assert out["check_out_image"] is None
