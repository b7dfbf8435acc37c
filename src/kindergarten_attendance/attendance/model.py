from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import NamedTuple, Optional

from ..core.enums import AttendanceStatus


class AttendanceKey(NamedTuple):
    """Natural key: at most one record per student per date."""

    student_id: int
    attendance_date: date


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance on one date.

    A record without ``attendance_id`` has no stored row yet (synthesized
    placeholder). ``student_name``/``class_name`` are display attributes filled
    by the read path and are never written.
    """

    student_id: int
    attendance_date: date
    status: AttendanceStatus
    attendance_id: Optional[int] = None
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    late_arrival_time: Optional[time] = None
    excuse_reason: Optional[str] = None
    check_in_image: Optional[bytes] = None
    check_out_image: Optional[bytes] = None
    created_at: Optional[datetime] = None
    student_name: Optional[str] = None
    class_name: Optional[str] = None

    @property
    def key(self) -> AttendanceKey:
        return AttendanceKey(self.student_id, self.attendance_date)

    @property
    def is_persisted(self) -> bool:
        return bool(self.attendance_id)

    @property
    def has_check_in_image(self) -> bool:
        return bool(self.check_in_image)

    @property
    def has_check_out_image(self) -> bool:
        return bool(self.check_out_image)

    def with_changes(self, **changes) -> "AttendanceRecord":
        return replace(self, **changes)

    @classmethod
    def placeholder(
        cls,
        *,
        student_id: int,
        attendance_date: date,
        student_name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> "AttendanceRecord":
        """Unsaved ABSENT record for a (student, date) with no stored row."""
        return cls(
            student_id=student_id,
            attendance_date=attendance_date,
            status=AttendanceStatus.ABSENT,
            student_name=student_name,
            class_name=class_name,
        )
