from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import BulkStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceStore
from .attendance.rules import AttendanceRules
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterReader
from .statistics.calculator import StatisticsCalculator


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceStore
    roster_repo: RosterReader

    attendance_rules: AttendanceRules
    attendance_service: AttendanceService
    statistics_calculator: StatisticsCalculator


def build_services(*, attendance_repo: AttendanceStore, roster_repo: RosterReader) -> Container:
    rules = AttendanceRules()
    attendance_service = AttendanceService(
        attendance_repo,
        roster_repo,
        rules=rules,
        strategy_factory=BulkStrategyFactory(),
    )
    statistics_calculator = StatisticsCalculator(attendance_repo, roster_repo)

    return Container(
        attendance_repo=attendance_repo,
        roster_repo=roster_repo,
        attendance_rules=rules,
        attendance_service=attendance_service,
        statistics_calculator=statistics_calculator,
    )


def build_container(*, db_config: dict) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        roster_repo=MySQLRosterRepository(conn),
    )
