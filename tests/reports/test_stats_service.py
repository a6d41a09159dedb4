from __future__ import annotations

from decimal import Decimal

import pytest

from attendance_payroll.attendance.model import AttendanceInput, build_filters
from attendance_payroll.core.enums import AttendanceStatus, Sector, WageType
from attendance_payroll.sectors.profile import get_profile
from tests.fakes import OWNER, build_env, d, make_member, t

HOTEL = get_profile(Sector.HOTEL)
EDUCATION = get_profile(Sector.EDUCATION)


@pytest.fixture
def hotel(fixed_now):
    env = build_env(
        fixed_now,
        make_member(
            7,
            Sector.HOTEL,
            full_name="Night Porter",
            role="porter",
            wage_type=WageType.HOURLY,
            hourly_rate=Decimal("50"),
            overtime_rate=Decimal("75"),
        ),
        make_member(8, Sector.HOTEL, full_name="Receptionist", role="front desk", daily_wage=Decimal("600"), wage_type=WageType.DAILY),
    )
    qm = env.container.quick_mark_service
    qm.quick_mark(OWNER, HOTEL, 7, d("2024-01-08"), AttendanceInput(check_in=t("22:00"), check_out=t("08:00")))
    qm.quick_mark(OWNER, HOTEL, 7, d("2024-01-09"), AttendanceInput(check_in=t("22:00"), check_out=t("06:00")))
    qm.quick_mark(OWNER, HOTEL, 8, d("2024-01-08"), AttendanceInput(status=AttendanceStatus.HALF_DAY))
    qm.quick_mark(OWNER, HOTEL, 8, d("2024-01-09"), AttendanceInput(status=AttendanceStatus.WEEK_OFF))
    return env


def test_stats_zero_fill_every_status(hotel):
    stats = hotel.container.stats_service.stats(OWNER, HOTEL, build_filters(period="2024-01"))

    assert stats["present"] == 2
    assert stats["half_day"] == 1
    assert stats["week_off"] == 1
    assert stats["CL"] == 0
    assert stats["total"] == 4


def test_stats_honours_period_and_member(hotel):
    svc = hotel.container.stats_service

    assert svc.stats(OWNER, HOTEL, build_filters(period="2024-01-09"))["total"] == 2
    assert svc.stats(OWNER, HOTEL, build_filters(period="2024-01", member_id=8))["present"] == 0
    assert svc.stats(OWNER, HOTEL, build_filters(period="2023"))["total"] == 0


def test_member_summary_estimates_wages(hotel):
    rows = {s.member.member_id: s for s in hotel.container.stats_service.member_summary(OWNER, HOTEL, build_filters(period="2024-01"))}

    porter = rows[7]
    assert porter.hours_worked == 18.0
    assert porter.overtime_hours == 2.0
    assert porter.base_wage == Decimal("900.00")
    assert porter.ot_wage == Decimal("150.00")
    assert porter.estimated_total_wage == Decimal("1050.00")

    desk = rows[8]
    assert desk.working_days == 1
    assert desk.present_equivalent == Decimal("0.5")
    assert desk.estimated_total_wage == Decimal("300.00")
    assert desk.to_dict()["week_off"] == 1


def test_member_summary_filters_by_role(hotel):
    rows = hotel.container.stats_service.member_summary(OWNER, HOTEL, build_filters(period="2024-01", role="porter"))
    assert [r.member.member_id for r in rows] == [7]


def test_summary_without_wages_for_education(fixed_now):
    env = build_env(fixed_now, make_member(1, Sector.EDUCATION), make_member(2, Sector.EDUCATION))
    env.container.quick_mark_service.quick_mark(OWNER, EDUCATION, 1, d("2024-01-10"))

    rows = env.container.stats_service.member_summary(OWNER, EDUCATION, build_filters(period="2024-01-10"))

    assert [r.total_records for r in rows] == [1, 0]
    assert rows[0].estimated_total_wage is None
    assert "estimated_total_wage" not in rows[0].to_dict()
