from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest

from kindergarten_attendance.attendance.model import AttendanceKey, AttendanceRecord
from kindergarten_attendance.core.exceptions import StoreError
from kindergarten_attendance.roster.model import RosterEntry


class InMemoryRoster:
    def __init__(self, classes: dict[int, list[RosterEntry]]):
        self._classes = {cid: sorted(entries, key=lambda s: s.name) for cid, entries in classes.items()}

    def students_in_class(self, class_id: int):
        return list(self._classes.get(class_id, []))

    def class_of(self, student_id: int) -> Optional[int]:
        for cid, entries in self._classes.items():
            if any(s.student_id == student_id for s in entries):
                return cid
        return None


class InMemoryAttendance:
    """Upsert-by-key store; ``fail_for`` student ids raise StoreError on write."""

    def __init__(self, roster: InMemoryRoster, *, fail_for: Optional[set[int]] = None):
        self._roster = roster
        self._rows: dict[AttendanceKey, AttendanceRecord] = {}
        self._id = 0
        self.fail_for = set(fail_for or ())
        self.writes = 0

    def rows(self) -> list[AttendanceRecord]:
        return list(self._rows.values())

    def find_by_key(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        return self._rows.get(AttendanceKey(student_id, attendance_date))

    def find_by_class_and_date(self, class_id: int, attendance_date: date):
        return [
            r
            for r in self._rows.values()
            if r.attendance_date == attendance_date and self._roster.class_of(r.student_id) == class_id
        ]

    def find_by_student_and_date_range(self, student_id: int, start_date: date, end_date: date):
        items = [
            r
            for r in self._rows.values()
            if r.student_id == student_id and start_date <= r.attendance_date <= end_date
        ]
        items.sort(key=lambda r: r.attendance_date, reverse=True)
        return items

    def find_by_date(self, attendance_date: date):
        return [r for r in self._rows.values() if r.attendance_date == attendance_date]

    def upsert(self, record: AttendanceRecord) -> int:
        self.writes += 1
        if record.student_id in self.fail_for:
            raise StoreError(f"constraint violation for student {record.student_id}")

        if record.is_persisted:
            existing = self._rows.get(record.key)
            if existing is None or existing.attendance_id != record.attendance_id:
                raise StoreError(f"Attendance id={record.attendance_id} does not exist for {record.key}")
            attendance_id = existing.attendance_id
            created_at = existing.created_at
        else:
            existing = self._rows.get(record.key)
            if existing is not None:
                attendance_id = existing.attendance_id
                created_at = existing.created_at
            else:
                self._id += 1
                attendance_id = self._id
                created_at = datetime(2024, 6, 1, 7, 0)

        self._rows[record.key] = record.with_changes(
            attendance_id=attendance_id,
            created_at=created_at,
            student_name=None,
            class_name=None,
        )
        return attendance_id

    def delete_by_id(self, attendance_id: int) -> bool:
        for k, r in list(self._rows.items()):
            if r.attendance_id == attendance_id:
                del self._rows[k]
                return True
        return False


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 8, 30, 0)


@pytest.fixture
def day() -> date:
    return date(2024, 6, 1)


@pytest.fixture
def roster() -> InMemoryRoster:
    return InMemoryRoster(
        {
            1: [
                RosterEntry(student_id=3, name="Chi Le", class_name="Sunflowers"),
                RosterEntry(student_id=1, name="An Nguyen", class_name="Sunflowers"),
                RosterEntry(student_id=2, name="Binh Tran", class_name="Sunflowers"),
            ],
            2: [RosterEntry(student_id=4, name="Dung Pham", class_name="Little Bears")],
        }
    )


@pytest.fixture
def store(roster) -> InMemoryAttendance:
    return InMemoryAttendance(roster)


@pytest.fixture
def failing_store(roster):
    def _make(*student_ids: int) -> InMemoryAttendance:
        return InMemoryAttendance(roster, fail_for=set(student_ids))

    return _make
