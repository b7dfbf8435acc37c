from __future__ import annotations

from typing import Protocol, Sequence

from .model import RosterEntry


class RosterReader(Protocol):
    """Roster directory as seen by the attendance core.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def students_in_class(self, class_id: int) -> Sequence[RosterEntry]:
        """Enrolled students of a class, ordered by display name."""

        raise NotImplementedError
