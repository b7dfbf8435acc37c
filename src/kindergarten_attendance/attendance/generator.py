from __future__ import annotations

from datetime import date

from ..roster.repository import RosterReader
from .model import AttendanceRecord
from .repository import AttendanceStore


class DefaultRecordGenerator:
    """Builds one record per enrolled student for a date.

    Stored rows are used as-is; students without a row get an unsaved ABSENT
    placeholder carrying the requested date. Read-only and idempotent.
    """

    def __init__(self, roster: RosterReader, attendance: AttendanceStore):
        self._roster = roster
        self._attendance = attendance

    def generate(self, class_id: int, attendance_date: date) -> list[AttendanceRecord]:
        students = self._roster.students_in_class(class_id)
        stored = {
            r.student_id: r
            for r in self._attendance.find_by_class_and_date(class_id, attendance_date)
        }

        out: list[AttendanceRecord] = []
        for s in students:
            existing = stored.get(s.student_id)
            if existing is not None:
                out.append(existing.with_changes(student_name=s.name, class_name=s.class_name))
            else:
                out.append(
                    AttendanceRecord.placeholder(
                        student_id=s.student_id,
                        attendance_date=attendance_date,
                        student_name=s.name,
                        class_name=s.class_name,
                    )
                )
        return out
