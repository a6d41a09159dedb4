from __future__ import annotations

from decimal import Decimal

import pytest

from attendance_payroll.attendance.model import AttendanceInput
from attendance_payroll.core.enums import AttendanceStatus, LockGranularity, Sector
from attendance_payroll.core.exceptions import (
    AuthorizationError,
    ConflictError,
    LockedError,
    NotFoundError,
    TemporalPolicyError,
    ValidationError,
)
from attendance_payroll.locks.model import LockScope
from attendance_payroll.sectors.profile import get_profile
from tests.fakes import OTHER_TENANT, OWNER, STAFF, build_env, d, make_member, t

HOTEL = get_profile(Sector.HOTEL)
EDUCATION = get_profile(Sector.EDUCATION)


@pytest.fixture
def hotel(fixed_now):
    return build_env(fixed_now, make_member(7, Sector.HOTEL), make_member(8, Sector.HOTEL, tenant_id=2))


@pytest.fixture
def school(fixed_now):
    return build_env(fixed_now, make_member(5, Sector.EDUCATION, cl_balance=Decimal("2")))


def test_create_derives_hours_and_overtime(hotel):
    svc = hotel.container.attendance_service

    rec = svc.create(OWNER, HOTEL, 7, d("2024-01-10"), AttendanceInput(check_in=t("22:00"), check_out=t("08:00")))

    assert rec.record_id > 0
    assert rec.total_hours == 10.0
    assert rec.overtime_hours == 2.0
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.subject == "Shift Duty"
    assert rec.created_by == "owner"
    assert hotel.audit.actions() == ["CREATED_ATTENDANCE"]


def test_explicit_total_hours_override_duration(hotel):
    rec = hotel.container.attendance_service.create(
        OWNER, HOTEL, 7, d("2024-01-10"), AttendanceInput(check_in=t("09:00"), check_out=t("17:00"), total_hours=5)
    )
    assert rec.total_hours == 5.0
    assert rec.overtime_hours == 0.0


def test_negative_hours_rejected(hotel):
    with pytest.raises(ValidationError):
        hotel.container.attendance_service.create(OWNER, HOTEL, 7, d("2024-01-10"), AttendanceInput(total_hours=-1))
    assert hotel.attendance.records == {}


def test_date_is_required(hotel):
    with pytest.raises(ValidationError):
        hotel.container.attendance_service.create(OWNER, HOTEL, 7, None)


def test_sector_without_time_tracking_drops_times(school):
    rec = school.container.attendance_service.create(
        OWNER, EDUCATION, 5, d("2024-01-10"), AttendanceInput(check_in=t("08:00"), check_out=t("12:00"))
    )
    assert rec.check_in is None and rec.check_out is None
    assert rec.total_hours == 0.0
    assert rec.subject == "Daily Attendance"


def test_second_create_same_day_is_a_conflict_without_shifts(school):
    svc = school.container.attendance_service
    svc.create(OWNER, EDUCATION, 5, d("2024-01-10"))

    with pytest.raises(ConflictError):
        svc.create(OWNER, EDUCATION, 5, d("2024-01-10"), AttendanceInput(status=AttendanceStatus.ABSENT))
    assert len(school.attendance.records) == 1


def test_overnight_shifts_conflict(fixed_now):
    env = build_env(fixed_now, make_member(7, Sector.HOTEL))
    svc = env.container.attendance_service
    svc.create(OWNER, HOTEL, 7, d("2024-03-01"), AttendanceInput(check_in=t("22:00"), check_out=t("06:00")))

    with pytest.raises(ConflictError):
        svc.create(OWNER, HOTEL, 7, d("2024-03-01"), AttendanceInput(check_in=t("23:00"), check_out=t("05:00")))
    assert len(env.attendance.records) == 1


def test_back_to_back_shifts_do_not_conflict(hotel):
    svc = hotel.container.attendance_service
    svc.create(OWNER, HOTEL, 7, d("2024-01-11"), AttendanceInput(check_in=t("09:00"), check_out=t("17:00")))
    svc.create(OWNER, HOTEL, 7, d("2024-01-11"), AttendanceInput(check_in=t("17:00"), check_out=t("21:00")))
    assert len(hotel.attendance.records) == 2


def test_full_day_record_conflicts_with_any_shift(hotel):
    svc = hotel.container.attendance_service
    svc.create(OWNER, HOTEL, 7, d("2024-01-11"))

    with pytest.raises(ConflictError):
        svc.create(OWNER, HOTEL, 7, d("2024-01-11"), AttendanceInput(check_in=t("09:00"), check_out=t("10:00")))


def test_child_principal_cannot_create_past_date(hotel):
    svc = hotel.container.attendance_service
    with pytest.raises(TemporalPolicyError):
        svc.create(STAFF, HOTEL, 7, d("2024-01-09"))

    rec = svc.create(OWNER, HOTEL, 7, d("2024-01-09"))
    assert rec.work_date == d("2024-01-09")


def test_temporal_policy_checks_existing_and_new_date(hotel):
    svc = hotel.container.attendance_service
    past = svc.create(OWNER, HOTEL, 7, d("2024-01-05"))
    today = svc.create(OWNER, HOTEL, 7, d("2024-01-10"), AttendanceInput(context_id=3))

    with pytest.raises(TemporalPolicyError):
        svc.update(STAFF, HOTEL, past.record_id, AttendanceInput(work_date=d("2024-01-12")))
    with pytest.raises(TemporalPolicyError):
        svc.update(STAFF, HOTEL, today.record_id, AttendanceInput(work_date=d("2024-01-02")))
    with pytest.raises(TemporalPolicyError):
        svc.delete(STAFF, HOTEL, past.record_id)

    assert hotel.attendance.records[past.record_id].work_date == d("2024-01-05")
    assert hotel.attendance.records[today.record_id].work_date == d("2024-01-10")


def test_lock_blocks_child_mutations_but_not_privileged(school):
    c = school.container
    rec = c.attendance_service.create(OWNER, EDUCATION, 5, d("2024-01-10"))
    c.lock_manager.lock(OWNER, EDUCATION, LockScope.for_date(LockGranularity.DATE, d("2024-01-10")))

    with pytest.raises(LockedError):
        c.attendance_service.update(STAFF, EDUCATION, rec.record_id, AttendanceInput(note="late bus"))
    with pytest.raises(LockedError):
        c.attendance_service.delete(STAFF, EDUCATION, rec.record_id)

    updated = c.attendance_service.update(OWNER, EDUCATION, rec.record_id, AttendanceInput(note="late bus"))
    assert updated.note == "late bus"
    c.attendance_service.delete(OWNER, EDUCATION, rec.record_id)
    assert school.attendance.records == {}


def test_lock_blocks_child_create(school):
    c = school.container
    c.lock_manager.lock(OWNER, EDUCATION, LockScope.for_date(LockGranularity.DATE, d("2024-01-11")))

    with pytest.raises(LockedError):
        c.attendance_service.create(STAFF, EDUCATION, 5, d("2024-01-11"))
    assert school.attendance.records == {}


def test_cross_tenant_access_is_an_authorization_error(hotel):
    svc = hotel.container.attendance_service
    rec = svc.create(OWNER, HOTEL, 7, d("2024-01-10"))

    with pytest.raises(AuthorizationError):
        svc.get(OTHER_TENANT, HOTEL, rec.record_id)
    with pytest.raises(AuthorizationError):
        svc.delete(OTHER_TENANT, HOTEL, rec.record_id)
    with pytest.raises(AuthorizationError):
        svc.create(OWNER, HOTEL, 8, d("2024-01-10"))


def test_unknown_member_and_record(hotel):
    svc = hotel.container.attendance_service
    with pytest.raises(NotFoundError):
        svc.create(OWNER, HOTEL, 404, d("2024-01-10"))
    with pytest.raises(NotFoundError):
        svc.update(OWNER, HOTEL, 404, AttendanceInput(note="x"))


def test_update_merges_and_recomputes_hours(hotel):
    svc = hotel.container.attendance_service
    rec = svc.create(
        OWNER, HOTEL, 7, d("2024-01-10"), AttendanceInput(check_in=t("09:00"), check_out=t("17:00"), note="ok")
    )

    updated = svc.update(OWNER, HOTEL, rec.record_id, AttendanceInput(check_out=t("19:30")))

    assert updated.check_in == t("09:00")
    assert updated.total_hours == 10.5
    assert updated.overtime_hours == 2.5
    assert updated.note == "ok"


def test_update_to_leave_charges_once(school):
    svc = school.container.attendance_service
    rec = svc.create(OWNER, EDUCATION, 5, d("2024-01-10"))

    svc.update(OWNER, EDUCATION, rec.record_id, AttendanceInput(status=AttendanceStatus.CL))
    svc.update(OWNER, EDUCATION, rec.record_id, AttendanceInput(note="doctor"))
    assert school.members.get_by_id(5).cl_balance == Decimal("1")

    # No re-credit when the day moves away from leave.
    svc.update(OWNER, EDUCATION, rec.record_id, AttendanceInput(status=AttendanceStatus.PRESENT))
    assert school.members.get_by_id(5).cl_balance == Decimal("1")


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_hours_rejected(hotel, value):
    with pytest.raises(ValidationError):
        hotel.container.attendance_service.create(OWNER, HOTEL, 7, d("2024-01-10"), AttendanceInput(total_hours=value))
    with pytest.raises(ValidationError):
        hotel.container.attendance_service.create(OWNER, HOTEL, 7, d("2024-01-10"), AttendanceInput(overtime_hours=value))
    assert hotel.attendance.records == {}
