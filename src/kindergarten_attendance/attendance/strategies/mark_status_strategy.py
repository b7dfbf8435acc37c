from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord
from .base import BulkStrategy


class MarkStatusStrategy(BulkStrategy):
    """Set one status on every record (e.g. "mark all present")."""

    def __init__(self, status: AttendanceStatus):
        self.status = status

    def prepare(self, records: Sequence[AttendanceRecord], *, now: datetime) -> list[AttendanceRecord]:
        at = now.time().replace(second=0, microsecond=0)
        out = []
        for r in records:
            changes: dict = {"status": self.status}
            if self.status == AttendanceStatus.PRESENT and r.check_in_time is None:
                changes["check_in_time"] = at
            elif self.status == AttendanceStatus.LATE and r.late_arrival_time is None:
                changes["late_arrival_time"] = at
            out.append(r.with_changes(**changes))
        return out
