import pytest

from attendance_payroll.core.enums import Sector
from attendance_payroll.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from tests.fakes import OTHER_TENANT, OWNER, STAFF, build_env, t


def test_create_list_and_delete(fixed_now):
    svc = build_env(fixed_now).container.shift_service

    shift = svc.create_shift(OWNER, Sector.HOTEL, shift_name=" Night ", start_time=t("22:00"), end_time=t("06:00"))

    assert shift.shift_name == "Night"
    assert shift.hours == 8.0
    assert svc.list_shifts(OWNER, Sector.HOTEL) == [shift]
    assert svc.list_shifts(OTHER_TENANT, Sector.HOTEL) == []

    with pytest.raises(AuthorizationError):
        svc.delete_shift(OTHER_TENANT, shift.shift_id)
    svc.delete_shift(OWNER, shift.shift_id)
    with pytest.raises(NotFoundError):
        svc.delete_shift(OWNER, shift.shift_id)


def test_shift_validation(fixed_now):
    svc = build_env(fixed_now).container.shift_service

    with pytest.raises(AuthorizationError):
        svc.create_shift(STAFF, Sector.HOTEL, shift_name="Day", start_time=t("08:00"), end_time=t("16:00"))
    with pytest.raises(ValidationError):
        svc.create_shift(OWNER, Sector.HOTEL, shift_name="Day", start_time=t("08:00"), end_time=t("08:00"))
    with pytest.raises(ValidationError):
        svc.create_shift(OWNER, Sector.HOTEL, shift_name="", start_time=t("08:00"), end_time=t("16:00"))
