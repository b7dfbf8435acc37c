from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import RosterEntry
from .repository import RosterReader


class MySQLRosterRepository(RosterReader):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def students_in_class(self, class_id: int) -> Sequence[RosterEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.student_id, s.name, c.class_name
                FROM students s
                LEFT JOIN classes c ON c.class_id = s.class_id
                WHERE s.class_id=%s
                ORDER BY s.name, s.student_id
                """,
                (int(class_id),),
            )
            return [
                RosterEntry(
                    student_id=int(r["student_id"]),
                    name=r["name"],
                    class_name=r.get("class_name"),
                )
                for r in fetchall(cur)
            ]
