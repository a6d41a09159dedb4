from __future__ import annotations

from flask import Flask, request

from ..common.http import current_principal, json_body, ok, pick, principal_required, sector_profile
from ..container import Container
from .model import AttendanceLock


def _lock_dict(lock: AttendanceLock | None) -> dict | None:
    if lock is None:
        return None
    return {
        "scope": lock.scope.key,
        "granularity": lock.scope.granularity.value,
        "is_locked": lock.is_locked,
        "locked_by": lock.locked_by,
        "locked_at": lock.locked_at,
        "unlocked_by": lock.unlocked_by,
        "unlocked_at": lock.unlocked_at,
        "unlock_reason": lock.unlock_reason,
    }


def register(app: Flask, container: Container) -> None:
    def scope_from(profile, source):
        return container.lock_manager.scope_from_request(
            profile,
            lock_date=pick(source, "date", "lock_date"),
            month=pick(source, "month"),
            year=pick(source, "year"),
        )

    @app.route("/api/<sector>/attendance/lock", methods=["POST"], endpoint="attendance_lock")
    @principal_required
    def attendance_lock(sector: str):
        profile = sector_profile(sector)
        lock = container.lock_manager.lock(current_principal(), profile, scope_from(profile, json_body()))
        return ok(_lock_dict(lock))

    @app.route("/api/<sector>/attendance/unlock", methods=["POST"], endpoint="attendance_unlock")
    @principal_required
    def attendance_unlock(sector: str):
        profile = sector_profile(sector)
        payload = json_body()
        lock = container.lock_manager.unlock(
            current_principal(), profile, scope_from(profile, payload), pick(payload, "reason", "unlock_reason")
        )
        return ok(_lock_dict(lock))

    @app.route("/api/<sector>/attendance/locked-dates", methods=["GET"], endpoint="attendance_locked_dates")
    @principal_required
    def attendance_locked_dates(sector: str):
        dates = container.lock_manager.locked_dates(
            current_principal(), sector_profile(sector), request.args.get("month"), request.args.get("year")
        )
        return ok(dates)

    @app.route("/api/<sector>/attendance/lock-status", methods=["GET"], endpoint="attendance_lock_status")
    @principal_required
    def attendance_lock_status(sector: str):
        locks = container.lock_manager.list_locks(
            current_principal(), sector_profile(sector), request.args.get("month"), request.args.get("year")
        )
        return ok([_lock_dict(lk) for lk in locks])
