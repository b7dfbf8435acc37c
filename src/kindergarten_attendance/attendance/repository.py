from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceStore(Protocol):
    """Record store keyed by (student_id, attendance_date) with upsert semantics.

    Implementations raise ``StoreError`` for connectivity/consistency failures.
    """

    def find_by_key(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_by_class_and_date(self, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        """Persisted rows only; students without a row are not returned."""

        raise NotImplementedError

    def find_by_student_and_date_range(
        self, student_id: int, start_date: date, end_date: date
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_by_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> int:
        """Create when ``attendance_id`` is absent, else update by id. Returns the id."""

        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError
