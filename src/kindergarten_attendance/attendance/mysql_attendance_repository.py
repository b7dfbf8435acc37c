from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_blob, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceStore

_SELECT = """
    SELECT
        a.attendance_id, a.student_id, a.attendance_date, a.status,
        a.check_in_time, a.check_out_time, a.late_arrival_time, a.excuse_reason,
        a.check_in_image, a.check_out_image, a.created_at,
        s.name AS student_name, c.class_name
    FROM attendance a
    JOIN students s ON s.student_id = a.student_id
    LEFT JOIN classes c ON c.class_id = s.class_id
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=normalize_mysql_time(r.get("check_in_time")),
        check_out_time=normalize_mysql_time(r.get("check_out_time")),
        late_arrival_time=normalize_mysql_time(r.get("late_arrival_time")),
        excuse_reason=r.get("excuse_reason"),
        check_in_image=normalize_blob(r.get("check_in_image")),
        check_out_image=normalize_blob(r.get("check_out_image")),
        created_at=r.get("created_at"),
        student_name=r.get("student_name"),
        class_name=r.get("class_name"),
    )


class MySQLAttendanceRepository(AttendanceStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_key(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE a.student_id=%s AND a.attendance_date=%s",
                (int(student_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_by_class_and_date(self, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE s.class_id=%s AND a.attendance_date=%s ORDER BY s.name, s.student_id",
                (int(class_id), attendance_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def find_by_student_and_date_range(
        self, student_id: int, start_date: date, end_date: date
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + " WHERE a.student_id=%s AND a.attendance_date BETWEEN %s AND %s ORDER BY a.attendance_date DESC",
                (int(student_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def find_by_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE a.attendance_date=%s ORDER BY s.name, s.student_id",
                (attendance_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert(self, record: AttendanceRecord) -> int:
        values = (
            record.status.value,
            record.check_in_time,
            record.check_out_time,
            record.late_arrival_time,
            record.excuse_reason,
            record.check_in_image,
            record.check_out_image,
        )

        with db_cursor(self._conn_factory) as (_, cur):
            if record.is_persisted:
                cur.execute(
                    """
                    UPDATE attendance
                    SET status=%s, check_in_time=%s, check_out_time=%s, late_arrival_time=%s,
                        excuse_reason=%s, check_in_image=%s, check_out_image=%s
                    WHERE attendance_id=%s AND student_id=%s AND attendance_date=%s
                    """,
                    values + (int(record.attendance_id), int(record.student_id), record.attendance_date),
                )
                if cur.rowcount == 0:
                    raise StoreError(
                        f"Attendance id={record.attendance_id} does not exist for student {record.student_id} "
                        f"on {record.attendance_date.isoformat()}"
                    )
                return int(record.attendance_id)

            # Same-key races collapse into one row; LAST_INSERT_ID returns the existing id.
            cur.execute(
                """
                INSERT INTO attendance(
                    student_id, attendance_date, status, check_in_time, check_out_time,
                    late_arrival_time, excuse_reason, check_in_image, check_out_image
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    status=VALUES(status),
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    late_arrival_time=VALUES(late_arrival_time),
                    excuse_reason=VALUES(excuse_reason),
                    check_in_image=VALUES(check_in_image),
                    check_out_image=VALUES(check_out_image)
                """,
                (int(record.student_id), record.attendance_date) + values,
            )
            return int(cur.lastrowid)

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
