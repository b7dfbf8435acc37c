from __future__ import annotations

import base64
import binascii
from typing import Any, Optional

from ..common.datetime_utils import format_hhmm, parse_date_field
from ..common.validators import require_positive_id
from ..core.enums import AttendanceStatus, ValidationCode
from ..core.exceptions import ValidationError
from .model import AttendanceRecord
from .rules import AttendanceForm, AttendanceRules, RuleOutcome


def _decode_image(value: Any, field_name: str) -> Optional[bytes]:
    if not value:
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError, TypeError):
        raise ValidationError(ValidationCode.INVALID_IMAGE, f"{field_name}: not valid base64", field=field_name)


def _encode_image(value: Optional[bytes]) -> Optional[str]:
    if not value:
        return None
    return base64.b64encode(value).decode("ascii")


def base_from_payload(data: dict) -> AttendanceRecord:
    """Identity and evidence part of a JSON record; status/times come from the form."""

    attendance_id = data.get("attendance_id")
    return AttendanceRecord(
        student_id=require_positive_id(data.get("student_id"), "student_id"),
        attendance_date=parse_date_field(data.get("date"), "date"),
        status=AttendanceStatus.ABSENT,
        attendance_id=require_positive_id(attendance_id, "attendance_id") if attendance_id else None,
        check_in_image=_decode_image(data.get("check_in_image"), "check_in_image"),
        check_out_image=_decode_image(data.get("check_out_image"), "check_out_image"),
    )


def form_from_payload(data: dict) -> AttendanceForm:
    return AttendanceForm(
        status=str(data.get("status") or ""),
        check_in_time=str(data.get("check_in_time") or ""),
        check_out_time=str(data.get("check_out_time") or ""),
        late_arrival_time=str(data.get("late_arrival_time") or ""),
        excuse_reason=str(data.get("excuse_reason") or ""),
    )


def record_from_payload(base: AttendanceRecord, data: dict, rules: AttendanceRules) -> RuleOutcome:
    return rules.apply_form(base, form_from_payload(data))


def record_to_dict(r: AttendanceRecord, *, include_images: bool = False) -> dict:
    out = {
        "attendance_id": r.attendance_id,
        "student_id": r.student_id,
        "student_name": r.student_name,
        "class_name": r.class_name,
        "date": r.attendance_date.isoformat(),
        "status": r.status.value,
        "check_in_time": format_hhmm(r.check_in_time),
        "check_out_time": format_hhmm(r.check_out_time),
        "late_arrival_time": format_hhmm(r.late_arrival_time),
        "excuse_reason": r.excuse_reason,
        "has_check_in_image": r.has_check_in_image,
        "has_check_out_image": r.has_check_out_image,
        "saved": r.is_persisted,
        "created_at": r.created_at.isoformat() if r.created_at else None,
    }
    if include_images:
        out["check_in_image"] = _encode_image(r.check_in_image)
        out["check_out_image"] = _encode_image(r.check_out_image)
    return out
