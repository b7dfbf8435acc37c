from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_date_range, require_positive_id
from ..core.enums import AttendanceStatus, BulkOperation, ValidationCode
from ..core.exceptions import ValidationError
from ..roster.model import RosterEntry
from ..roster.repository import RosterReader
from .bulk import BulkFailure, BulkOperationCoordinator, BulkResult
from .factory import BulkStrategyFactory
from .generator import DefaultRecordGenerator
from .model import AttendanceRecord
from .repository import AttendanceStore
from .rules import AttendanceRules

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceStore,
        roster: RosterReader,
        *,
        rules: Optional[AttendanceRules] = None,
        strategy_factory: Optional[BulkStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._roster = roster
        self._rules = rules or AttendanceRules()
        self._factory = strategy_factory or BulkStrategyFactory()
        self._generator = DefaultRecordGenerator(roster, attendance)
        self._bulk = BulkOperationCoordinator(attendance, rules=self._rules)

    @staticmethod
    def can_mark_attendance(attendance_date: Optional[date], *, today: Optional[date] = None) -> bool:
        """Attendance may be marked for today and past dates only."""
        if attendance_date is None:
            return False
        today = today or now_local().date()
        return attendance_date <= today

    def _require_markable(self, attendance_date: date, today: Optional[date]) -> None:
        if not self.can_mark_attendance(attendance_date, today=today):
            raise ValidationError(
                ValidationCode.FUTURE_DATE,
                f"Cannot mark attendance for a future date ({attendance_date.isoformat()})",
                field="date",
            )

    def save(self, record: AttendanceRecord, *, today: Optional[date] = None) -> AttendanceRecord:
        """Validate and persist one record.

        Unlike bulk operations, failures propagate: ValidationError for a
        broken rule, StoreError when the store rejects the write.
        """

        require_positive_id(record.student_id, "student_id")
        self._require_markable(record.attendance_date, today)

        normalized = self._rules.check(record)
        attendance_id = self._attendance.upsert(normalized)
        logger.info("Saved attendance %s as id=%s (%s)", normalized.key, attendance_id, normalized.status.value)
        return normalized.with_changes(attendance_id=attendance_id)

    def get_attendance(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        require_positive_id(student_id, "student_id")
        return self._attendance.find_by_key(student_id, attendance_date)

    def attendance_by_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.find_by_date(attendance_date)

    def class_attendance(self, class_id: int, attendance_date: date) -> list[AttendanceRecord]:
        require_positive_id(class_id, "class_id")
        return self._generator.generate(class_id, attendance_date)

    def history(self, student_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        require_positive_id(student_id, "student_id")
        require_date_range(start, end)
        return self._attendance.find_by_student_and_date_range(student_id, start, end)

    def absent_students(self, class_id: int, attendance_date: date) -> list[RosterEntry]:
        """Students with no saved record or an ABSENT one on the date."""
        absent_ids = {
            r.student_id
            for r in self.class_attendance(class_id, attendance_date)
            if r.status == AttendanceStatus.ABSENT
        }
        return [s for s in self._roster.students_in_class(class_id) if s.student_id in absent_ids]

    def delete_attendance(self, attendance_id: int) -> bool:
        attendance_id = require_positive_id(attendance_id, "attendance_id")
        deleted = self._attendance.delete_by_id(attendance_id)
        if deleted:
            logger.info("Deleted attendance id=%s", attendance_id)
        return deleted

    def apply_bulk(self, records: Sequence[AttendanceRecord], *, today: Optional[date] = None) -> BulkResult:
        markable: list[AttendanceRecord] = []
        rejected: list[BulkFailure] = []
        for r in records:
            try:
                self._require_markable(r.attendance_date, today)
            except ValidationError as e:
                rejected.append(BulkFailure(key=r.key, error=e))
                continue
            markable.append(r)

        result = self._bulk.apply_bulk(markable)
        result.failed.extend(rejected)
        return result

    def _run_bulk(
        self,
        class_id: int,
        attendance_date: date,
        operation: BulkOperation,
        *,
        now: Optional[datetime],
        status: Optional[AttendanceStatus] = None,
        image: Optional[bytes] = None,
    ) -> BulkResult:
        now = now or now_local()
        self._require_markable(attendance_date, now.date())

        strategy = self._factory.for_operation(operation, status=status, image=image)
        records = strategy.prepare(self.class_attendance(class_id, attendance_date), now=now)
        logger.info(
            "Bulk %s for class %s on %s: %d record(s)",
            operation.value,
            class_id,
            attendance_date.isoformat(),
            len(records),
        )
        return self._bulk.apply_bulk(records)

    def mark_all(
        self,
        class_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        *,
        now: Optional[datetime] = None,
    ) -> BulkResult:
        return self._run_bulk(class_id, attendance_date, BulkOperation.MARK_STATUS, now=now, status=status)

    def bulk_check_in(
        self, class_id: int, attendance_date: date, image: bytes, *, now: Optional[datetime] = None
    ) -> BulkResult:
        return self._run_bulk(class_id, attendance_date, BulkOperation.CHECK_IN, now=now, image=image)

    def bulk_check_out(
        self, class_id: int, attendance_date: date, image: bytes, *, now: Optional[datetime] = None
    ) -> BulkResult:
        return self._run_bulk(class_id, attendance_date, BulkOperation.CHECK_OUT, now=now, image=image)
