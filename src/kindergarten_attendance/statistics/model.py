from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class StudentStats:
    """Attendance counts and rates for one student over an inclusive date range.

    Only saved records count toward ``total_days``.
    """

    student_id: int
    start_date: date
    end_date: date
    total_days: int
    present_days: int
    absent_days: int
    late_days: int
    attendance_rate: float
    late_rate: float
    student_name: Optional[str] = None

    def to_dict(self) -> dict:
        d = asdict(self)
        d["start_date"] = self.start_date.isoformat()
        d["end_date"] = self.end_date.isoformat()
        return d


@dataclass(frozen=True)
class ClassDaySummary:
    """Read-model for the daily dashboard of one class."""

    class_id: int
    attendance_date: date
    total_students: int
    present_count: int
    absent_count: int
    late_count: int
    attendance_rate: float
    absence_rate: float
    late_rate: float

    def to_dict(self) -> dict:
        d = asdict(self)
        d["attendance_date"] = self.attendance_date.isoformat()
        return d
