from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from ..core.exceptions import StoreError, ValidationError
from .model import AttendanceKey, AttendanceRecord
from .repository import AttendanceStore
from .rules import AttendanceRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkFailure:
    key: AttendanceKey
    error: Union[ValidationError, StoreError]

    def to_dict(self) -> dict:
        if isinstance(self.error, ValidationError):
            detail = self.error.to_dict()
        else:
            detail = {"code": "STORE_ERROR", "field": None, "message": str(self.error)}
        return {
            "student_id": self.key.student_id,
            "date": self.key.attendance_date.isoformat(),
            **detail,
        }


@dataclass
class BulkResult:
    succeeded: list[AttendanceKey] = field(default_factory=list)
    failed: list[BulkFailure] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {
            "succeeded": [
                {"student_id": k.student_id, "date": k.attendance_date.isoformat()} for k in self.succeeded
            ],
            "failed": [f.to_dict() for f in self.failed],
        }


class BulkOperationCoordinator:
    """Best-effort batch persistence.

    Every record is validated and upserted on its own; a failure is recorded
    against that record's key and never stops the rest of the batch.
    """

    def __init__(self, attendance: AttendanceStore, *, rules: Optional[AttendanceRules] = None):
        self._attendance = attendance
        self._rules = rules or AttendanceRules()

    def apply_bulk(self, records: Sequence[AttendanceRecord]) -> BulkResult:
        result = BulkResult()

        for record in records:
            outcome = self._rules.validate(record)
            if not outcome.ok:
                logger.info("Rejected attendance %s: %s", record.key, outcome.error.code.value)
                result.failed.append(BulkFailure(key=record.key, error=outcome.error))
                continue

            try:
                self._attendance.upsert(outcome.record)
            except StoreError as e:
                logger.warning("Store failure for attendance %s: %s", record.key, e)
                result.failed.append(BulkFailure(key=record.key, error=e))
                continue

            result.succeeded.append(record.key)

        logger.info("Bulk attendance: %d saved, %d failed", len(result.succeeded), len(result.failed))
        return result
