from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord
from .base import BulkStrategy


class CheckOutCaptureStrategy(BulkStrategy):
    """Attach check-out evidence and time to PRESENT records without one.

    Records lacking a check-in time are still included; the rules reject them.
    """

    def __init__(self, image: bytes):
        self.image = image

    def prepare(self, records: Sequence[AttendanceRecord], *, now: datetime) -> list[AttendanceRecord]:
        at = now.time().replace(second=0, microsecond=0)
        return [
            r.with_changes(check_out_image=self.image, check_out_time=at)
            for r in records
            if r.status == AttendanceStatus.PRESENT and not r.has_check_out_image
        ]
