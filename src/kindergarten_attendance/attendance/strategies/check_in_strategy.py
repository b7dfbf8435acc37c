from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord
from .base import BulkStrategy


class CheckInCaptureStrategy(BulkStrategy):
    """Attach check-in evidence to PRESENT records that have none yet."""

    def __init__(self, image: bytes):
        self.image = image

    def prepare(self, records: Sequence[AttendanceRecord], *, now: datetime) -> list[AttendanceRecord]:
        at = now.time().replace(second=0, microsecond=0)
        return [
            r.with_changes(check_in_image=self.image, check_in_time=r.check_in_time or at)
            for r in records
            if r.status == AttendanceStatus.PRESENT and not r.has_check_in_image
        ]
