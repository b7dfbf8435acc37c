from __future__ import annotations

import csv
import io
import logging
from datetime import timedelta
from functools import wraps

import pandas as pd
from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import now_local, parse_date_field
from ..common.validators import parse_status
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import ValidationCode
from ..core.exceptions import StoreError, ValidationError
from ..container import Container
from .bulk import BulkFailure
from .payload import base_from_payload, record_from_payload, record_to_dict

logger = logging.getLogger(__name__)

REPORT_FIELDS = [
    "student_id",
    "student_name",
    "start_date",
    "end_date",
    "total_days",
    "present_days",
    "absent_days",
    "late_days",
    "attendance_rate",
    "late_rate",
]


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service
    stats = container.statistics_calculator
    rules = container.attendance_rules

    def json_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "error": e.to_dict()}), 400
            except StoreError as e:
                logger.error("Store failure in %s: %s", request.path, e)
                return jsonify({"success": False, "message": "Attendance store unavailable"}), 503

        return wrapper

    def _date_arg(name: str, default=None):
        value = request.args.get(name)
        if not value:
            if default is None:
                raise ValidationError(ValidationCode.BAD_DATE_FORMAT, f"Missing parameter {name}", field=name)
            return default
        return parse_date_field(value, name)

    def _range_args():
        today = now_local().date()
        start = _date_arg("start", today - timedelta(days=DEFAULT_REPORT_DAYS))
        end = _date_arg("end", today)
        return start, end

    def _image_upload():
        file = request.files.get("image")
        data = file.read() if file else b""
        if not data:
            raise ValidationError(ValidationCode.INVALID_IMAGE, "An image file is required", field="image")
        return data

    @app.route("/api/classes/<int:class_id>/attendance", methods=["GET"], endpoint="class_attendance")
    @json_errors
    def class_attendance(class_id: int):
        day = _date_arg("date", now_local().date())
        records = service.class_attendance(class_id, day)
        return jsonify({"date": day.isoformat(), "records": [record_to_dict(r) for r in records]})

    @app.route("/api/attendance", methods=["POST"], endpoint="save_attendance")
    @json_errors
    def save_attendance():
        data = request.get_json(silent=True) or {}
        outcome = record_from_payload(base_from_payload(data), data, rules)
        if not outcome.ok:
            raise outcome.error
        saved = service.save(outcome.record)
        return jsonify({"success": True, "record": record_to_dict(saved)}), 200

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="bulk_attendance")
    @json_errors
    def bulk_attendance():
        data = request.get_json(silent=True) or {}
        items = data.get("records") or []

        valid = []
        parse_failures = []
        unreadable = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                item = {}
            try:
                base = base_from_payload(item)
            except ValidationError as e:
                # no usable key: report by position and raw identity
                unreadable.append(
                    {"index": index, "student_id": item.get("student_id"), "date": item.get("date"), **e.to_dict()}
                )
                continue

            outcome = record_from_payload(base, item, rules)
            if outcome.ok:
                valid.append(outcome.record)
            else:
                parse_failures.append(BulkFailure(key=base.key, error=outcome.error))

        result = service.apply_bulk(valid)
        result.failed.extend(parse_failures)
        body = result.to_dict()
        body["failed"].extend(unreadable)
        return jsonify({"success": result.all_succeeded and not unreadable, **body}), 200

    @app.route("/api/classes/<int:class_id>/attendance/mark-all", methods=["POST"], endpoint="mark_all")
    @json_errors
    def mark_all(class_id: int):
        data = request.get_json(silent=True) or {}
        day = parse_date_field(data.get("date") or now_local().date().isoformat(), "date")
        result = service.mark_all(class_id, day, parse_status(data.get("status")))
        return jsonify({"success": result.all_succeeded, **result.to_dict()}), 200

    @app.route("/api/classes/<int:class_id>/attendance/check-in", methods=["POST"], endpoint="bulk_check_in")
    @json_errors
    def bulk_check_in(class_id: int):
        day = parse_date_field(request.form.get("date") or now_local().date().isoformat(), "date")
        result = service.bulk_check_in(class_id, day, _image_upload())
        return jsonify({"success": result.all_succeeded, **result.to_dict()}), 200

    @app.route("/api/classes/<int:class_id>/attendance/check-out", methods=["POST"], endpoint="bulk_check_out")
    @json_errors
    def bulk_check_out(class_id: int):
        day = parse_date_field(request.form.get("date") or now_local().date().isoformat(), "date")
        result = service.bulk_check_out(class_id, day, _image_upload())
        return jsonify({"success": result.all_succeeded, **result.to_dict()}), 200

    @app.route("/api/students/<int:student_id>/attendance", methods=["GET"], endpoint="student_history")
    @json_errors
    def student_history(student_id: int):
        start, end = _range_args()
        records = service.history(student_id, start, end)
        return jsonify({"records": [record_to_dict(r) for r in records]})

    @app.route("/api/students/<int:student_id>/attendance/stats", methods=["GET"], endpoint="student_stats")
    @json_errors
    def student_stats(student_id: int):
        start, end = _range_args()
        return jsonify(stats.stats_for(student_id, start, end).to_dict())

    @app.route("/api/classes/<int:class_id>/attendance/summary", methods=["GET"], endpoint="class_summary")
    @json_errors
    def class_summary(class_id: int):
        day = _date_arg("date", now_local().date())
        return jsonify(stats.class_summary(class_id, day).to_dict())

    @app.route("/api/classes/<int:class_id>/attendance/absent", methods=["GET"], endpoint="absent_students")
    @json_errors
    def absent_students(class_id: int):
        day = _date_arg("date", now_local().date())
        students = service.absent_students(class_id, day)
        return jsonify(
            {
                "date": day.isoformat(),
                "students": [{"student_id": s.student_id, "name": s.name} for s in students],
            }
        )

    @app.route("/api/classes/<int:class_id>/attendance/report.csv", methods=["GET"], endpoint="class_report_csv")
    @json_errors
    def class_report_csv(class_id: int):
        start, end = _range_args()
        report = stats.class_report(class_id, start, end)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in report:
            writer.writerow({k: v for k, v in row.to_dict().items() if k in REPORT_FIELDS})

        filename = f"class_{class_id}_attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/classes/<int:class_id>/attendance/report.xlsx", methods=["GET"], endpoint="class_report_xlsx")
    @json_errors
    def class_report_xlsx(class_id: int):
        start, end = _range_args()
        report = stats.class_report(class_id, start, end)

        df = pd.DataFrame([row.to_dict() for row in report], columns=REPORT_FIELDS)
        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Attendance")
        buf.seek(0)

        filename = f"class_{class_id}_attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.xlsx"
        return send_file(
            buf,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name=filename,
        )

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @json_errors
    def delete_attendance(attendance_id: int):
        if not service.delete_attendance(attendance_id):
            return jsonify({"success": False, "message": "Attendance record not found"}), 404
        return jsonify({"success": True}), 200
