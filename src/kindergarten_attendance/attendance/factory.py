from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus, BulkOperation
from .strategies.base import BulkStrategy
from .strategies.check_in_strategy import CheckInCaptureStrategy
from .strategies.check_out_strategy import CheckOutCaptureStrategy
from .strategies.mark_status_strategy import MarkStatusStrategy


@dataclass
class BulkStrategyFactory:
    """Factory Pattern: choose the strategy for a bulk operation."""

    def for_operation(
        self,
        operation: BulkOperation,
        *,
        status: Optional[AttendanceStatus] = None,
        image: Optional[bytes] = None,
    ) -> BulkStrategy:
        if operation == BulkOperation.MARK_STATUS:
            if status is None:
                raise ValueError("status is required for MARK_STATUS")
            return MarkStatusStrategy(status)

        if not image:
            raise ValueError(f"image is required for {operation.value}")
        if operation == BulkOperation.CHECK_IN:
            return CheckInCaptureStrategy(image)
        return CheckOutCaptureStrategy(image)
