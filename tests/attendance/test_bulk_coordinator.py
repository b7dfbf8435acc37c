from __future__ import annotations

from datetime import time

from kindergarten_attendance.attendance.bulk import BulkOperationCoordinator
from kindergarten_attendance.attendance.model import AttendanceKey, AttendanceRecord
from kindergarten_attendance.core.enums import AttendanceStatus, ValidationCode
from kindergarten_attendance.core.exceptions import StoreError, ValidationError


def _present(student_id, day, **kwargs):
    return AttendanceRecord(
        student_id=student_id,
        attendance_date=day,
        status=AttendanceStatus.PRESENT,
        check_in_time=kwargs.pop("check_in_time", time(8, 0)),
        **kwargs,
    )


def test_one_invalid_record_does_not_block_the_rest(store, day):
    records = [
        _present(1, day),
        _present(2, day, check_in_time=None),
        _present(3, day),
    ]

    result = BulkOperationCoordinator(store).apply_bulk(records)

    assert result.succeeded == [AttendanceKey(1, day), AttendanceKey(3, day)]
    assert len(result.failed) == 1
    assert result.failed[0].key == AttendanceKey(2, day)
    assert isinstance(result.failed[0].error, ValidationError)
    assert result.failed[0].error.code == ValidationCode.MISSING_CHECK_IN
    assert store.find_by_key(1, day).status == AttendanceStatus.PRESENT
    assert store.find_by_key(3, day) is not None
    assert store.find_by_key(2, day) is None


def test_invalid_records_never_reach_the_store(store, day):
    BulkOperationCoordinator(store).apply_bulk([_present(1, day, check_in_time=None)])

    assert store.writes == 0


def test_store_failure_is_recorded_per_record(failing_store, day):
    failing = failing_store(2)
    records = [_present(1, day), _present(2, day), _present(3, day)]

    result = BulkOperationCoordinator(failing).apply_bulk(records)

    assert [k.student_id for k in result.succeeded] == [1, 3]
    assert result.failed[0].key == AttendanceKey(2, day)
    assert isinstance(result.failed[0].error, StoreError)
    assert result.failed[0].to_dict()["code"] == "STORE_ERROR"


def test_records_are_normalized_before_saving(store, day):
    rec = AttendanceRecord(
        student_id=1,
        attendance_date=day,
        status=AttendanceStatus.ABSENT,
        check_in_time=time(8, 0),
        check_in_image=b"photo",
    )

    BulkOperationCoordinator(store).apply_bulk([rec])

    saved = store.find_by_key(1, day)
    assert saved.check_in_time is None
    assert saved.check_in_image is None


def test_upsert_keeps_one_row_per_key(store, day):
    coordinator = BulkOperationCoordinator(store)

    coordinator.apply_bulk([_present(1, day)])
    coordinator.apply_bulk([_present(1, day, check_in_time=time(9, 0))])

    rows = [r for r in store.rows() if r.key == AttendanceKey(1, day)]
    assert len(rows) == 1
    assert rows[0].check_in_time == time(9, 0)


def test_result_to_dict_reports_every_record(store, day):
    result = BulkOperationCoordinator(store).apply_bulk([_present(1, day), _present(2, day, check_in_time=None)])

    d = result.to_dict()
    assert d["succeeded"] == [{"student_id": 1, "date": "2024-06-01"}]
    assert d["failed"][0]["student_id"] == 2
    assert d["failed"][0]["code"] == "MISSING_CHECK_IN"
    assert d["failed"][0]["field"] == "check_in_time"
    assert not result.all_succeeded


def test_empty_batch(store):
    result = BulkOperationCoordinator(store).apply_bulk([])

    assert result.succeeded == []
    assert result.failed == []
    assert result.all_succeeded
