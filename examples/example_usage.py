"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; attendance rules and statistics live in services.
"""

import importlib
from datetime import date

from config import get_settings_module

from kindergarten_attendance.container import build_container
from kindergarten_attendance.core.enums import AttendanceStatus


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    today = date.today()
    for r in container.attendance_service.class_attendance(1, today):
        print(r.student_name, r.status.value, "saved" if r.is_persisted else "unsaved")

    result = container.attendance_service.mark_all(1, today, AttendanceStatus.PRESENT)
    print("saved:", len(result.succeeded), "failed:", len(result.failed))
    print(container.statistics_calculator.class_summary(1, today))


if __name__ == "__main__":
    main()
