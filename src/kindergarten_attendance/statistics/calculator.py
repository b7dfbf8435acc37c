from __future__ import annotations

from collections import Counter
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..attendance.generator import DefaultRecordGenerator
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceStore
from ..common.validators import require_date_range, require_positive_id
from ..core.constants import RATE_PRECISION
from ..core.enums import AttendanceStatus
from ..roster.repository import RosterReader
from .model import ClassDaySummary, StudentStats

_QUANT = Decimal(1).scaleb(-RATE_PRECISION)


def percent(part: int, total: int) -> float:
    """``part / total * 100`` rounded half-up to two decimals; 0.0 when total is 0."""
    if total <= 0:
        return 0.0
    value = Decimal(part) * 100 / Decimal(total)
    return float(value.quantize(_QUANT, rounding=ROUND_HALF_UP))


def count_statuses(records: Iterable[AttendanceRecord]) -> Counter:
    return Counter(r.status for r in records)


class StatisticsCalculator:
    """Attendance-rate aggregation at student and class granularity.

    Rates are rounded once, on the aggregate, so per-row rounding never drifts
    into the totals.
    """

    def __init__(
        self,
        attendance: AttendanceStore,
        roster: RosterReader,
        *,
        generator: Optional[DefaultRecordGenerator] = None,
    ):
        self._attendance = attendance
        self._roster = roster
        self._generator = generator or DefaultRecordGenerator(roster, attendance)

    def summarize(
        self,
        records: Iterable[AttendanceRecord],
        *,
        student_id: int,
        start: date,
        end: date,
        student_name: Optional[str] = None,
    ) -> StudentStats:
        saved = [r for r in records if r.is_persisted and start <= r.attendance_date <= end]
        counts = count_statuses(saved)
        total = len(saved)
        present = counts[AttendanceStatus.PRESENT]
        late = counts[AttendanceStatus.LATE]

        return StudentStats(
            student_id=student_id,
            start_date=start,
            end_date=end,
            total_days=total,
            present_days=present,
            absent_days=counts[AttendanceStatus.ABSENT],
            late_days=late,
            attendance_rate=percent(present, total),
            late_rate=percent(late, total),
            student_name=student_name,
        )

    def stats_for(self, student_id: int, start: date, end: date) -> StudentStats:
        require_positive_id(student_id, "student_id")
        require_date_range(start, end)
        records = self._attendance.find_by_student_and_date_range(student_id, start, end)
        return self.summarize(records, student_id=student_id, start=start, end=end)

    def class_summary(self, class_id: int, attendance_date: date) -> ClassDaySummary:
        require_positive_id(class_id, "class_id")
        # placeholders count as absent here: the dashboard shows the whole roster
        records = self._generator.generate(class_id, attendance_date)
        counts = count_statuses(records)
        total = len(records)
        present = counts[AttendanceStatus.PRESENT]
        absent = counts[AttendanceStatus.ABSENT]
        late = counts[AttendanceStatus.LATE]

        return ClassDaySummary(
            class_id=class_id,
            attendance_date=attendance_date,
            total_students=total,
            present_count=present,
            absent_count=absent,
            late_count=late,
            attendance_rate=percent(present, total),
            absence_rate=percent(absent, total),
            late_rate=percent(late, total),
        )

    def class_report(self, class_id: int, start: date, end: date) -> list[StudentStats]:
        require_positive_id(class_id, "class_id")
        require_date_range(start, end)
        out = []
        for s in self._roster.students_in_class(class_id):
            records = self._attendance.find_by_student_and_date_range(s.student_id, start, end)
            out.append(
                self.summarize(records, student_id=s.student_id, start=start, end=end, student_name=s.name)
            )
        return out
