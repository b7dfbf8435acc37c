from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from ..model import AttendanceRecord


class BulkStrategy(ABC):
    """Strategy Pattern: how a bulk operation modifies the day's records.

    Strategies only build the in-memory list of modified records; persisting
    is left to the bulk coordinator.
    """

    @abstractmethod
    def prepare(self, records: Sequence[AttendanceRecord], *, now: datetime) -> list[AttendanceRecord]:
        raise NotImplementedError
