from __future__ import annotations

from flask import Flask, request

from ..common.http import (
    current_principal,
    json_body,
    ok,
    optional_date,
    optional_float,
    optional_int,
    optional_time_field,
    pick,
    principal_required,
    sector_profile,
)
from ..common.validators import require_int
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceInput, build_filters


def _status(value) -> AttendanceStatus | None:
    if value is None:
        return None
    try:
        return AttendanceStatus(value)
    except ValueError as e:
        raise ValidationError(f"Unknown attendance status: {value}") from e


def _attendance_input(payload: dict) -> AttendanceInput:
    return AttendanceInput(
        status=_status(pick(payload, "status")),
        work_date=optional_date(payload, "date", "work_date"),
        context_id=optional_int(payload, "context_id", "contextId", "project_id"),
        subject=pick(payload, "subject"),
        check_in=optional_time_field(payload, "check_in", "checkIn"),
        check_out=optional_time_field(payload, "check_out", "checkOut"),
        total_hours=optional_float(payload, "total_hours", "totalHours"),
        work_mode=pick(payload, "work_mode", "workMode"),
        note=pick(payload, "note", "remarks"),
        permission_start=optional_time_field(payload, "permission_start", "permissionStart"),
        permission_end=optional_time_field(payload, "permission_end", "permissionEnd"),
        permission_reason=pick(payload, "permission_reason", "permissionReason"),
        overtime_hours=optional_float(payload, "overtime_hours", "overtimeHours"),
        overtime_reason=pick(payload, "overtime_reason", "overtimeReason"),
    )


def _filters_from_query():
    args = request.args
    return build_filters(
        period=pick(args, "period"),
        start_date=optional_date(args, "startDate", "start_date"),
        end_date=optional_date(args, "endDate", "end_date"),
        member_id=optional_int(args, "memberId", "member_id"),
        role=pick(args, "role"),
        department=pick(args, "department"),
        context_id=optional_int(args, "contextId", "context_id"),
    )


def _member_id(payload: dict) -> int:
    value = pick(payload, "member_id", "memberId")
    if value is None:
        raise ValidationError("member_id is required")
    return require_int(value, "member_id")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/<sector>/attendance", methods=["GET"], endpoint="attendance_list")
    @principal_required
    def attendance_list(sector: str):
        records = container.attendance_service.list_records(
            current_principal(), sector_profile(sector), _filters_from_query()
        )
        return ok(records)

    @app.route("/api/<sector>/attendance", methods=["POST"], endpoint="attendance_create")
    @principal_required
    def attendance_create(sector: str):
        payload = json_body()
        data = _attendance_input(payload)
        record = container.attendance_service.create(
            current_principal(), sector_profile(sector), _member_id(payload), data.work_date, data
        )
        return ok(record, 201)

    @app.route("/api/<sector>/attendance/quick", methods=["POST"], endpoint="attendance_quick_mark")
    @principal_required
    def attendance_quick_mark(sector: str):
        payload = json_body()
        data = _attendance_input(payload)
        result = container.quick_mark_service.quick_mark(
            current_principal(), sector_profile(sector), _member_id(payload), data.work_date, data
        )
        return ok(result.to_dict(), 201 if result.created else 200)

    @app.route("/api/<sector>/attendance/bulk", methods=["POST"], endpoint="attendance_bulk_mark")
    @principal_required
    def attendance_bulk_mark(sector: str):
        payload = json_body()
        member_ids = pick(payload, "member_ids", "memberIds") or []
        if not isinstance(member_ids, list):
            raise ValidationError("member_ids must be a list")
        result = container.quick_mark_service.bulk_mark(
            current_principal(),
            sector_profile(sector),
            [require_int(m, "member_ids") for m in member_ids],
            optional_date(payload, "date", "work_date"),
            _status(pick(payload, "status")),
        )
        return ok(result)

    @app.route("/api/<sector>/attendance/<int:record_id>", methods=["PUT"], endpoint="attendance_update")
    @principal_required
    def attendance_update(sector: str, record_id: int):
        record = container.attendance_service.update(
            current_principal(), sector_profile(sector), record_id, _attendance_input(json_body())
        )
        return ok(record)

    @app.route("/api/<sector>/attendance/<int:record_id>", methods=["DELETE"], endpoint="attendance_delete")
    @principal_required
    def attendance_delete(sector: str, record_id: int):
        container.attendance_service.delete(current_principal(), sector_profile(sector), record_id)
        return ok({"id": record_id, "deleted": True})

    @app.route("/api/<sector>/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @principal_required
    def attendance_stats(sector: str):
        stats = container.stats_service.stats(current_principal(), sector_profile(sector), _filters_from_query())
        return ok(stats)

    @app.route("/api/<sector>/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @principal_required
    def attendance_summary(sector: str):
        rows = container.stats_service.member_summary(
            current_principal(), sector_profile(sector), _filters_from_query()
        )
        return ok([r.to_dict() for r in rows])
