from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RosterEntry:
    """Read-only view of an enrolled student, owned by the roster directory."""

    student_id: int
    name: str
    class_name: Optional[str] = None
