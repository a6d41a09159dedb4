from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from attendance_payroll.core.enums import PayrollStatus, Sector
from attendance_payroll.core.exceptions import (
    AuthorizationError,
    ImmutableRecordError,
    InvalidTransitionError,
    NotFoundError,
)
from attendance_payroll.sectors.profile import get_profile
from tests.fakes import ADMIN, OTHER_TENANT, OWNER, STAFF, build_env, d, make_member

IT = get_profile(Sector.IT)


@pytest.fixture
def env(fixed_now):
    env = build_env(fixed_now, make_member(4, Sector.IT, full_name="Dev Rao", daily_wage=Decimal("800")))
    for day in ("2024-01-02", "2024-01-03"):
        env.container.quick_mark_service.quick_mark(OWNER, IT, 4, d(day))
    return env


@pytest.fixture
def draft(env):
    (record,) = env.container.payroll_generator.generate(OWNER, IT, 1, 2024).records
    return record


def test_approve_then_pay_posts_one_ledger_entry(env, draft):
    lifecycle = env.container.payroll_lifecycle

    approved = lifecycle.approve(ADMIN, IT, draft.payroll_id)
    paid = lifecycle.pay(OWNER, IT, draft.payroll_id)

    assert approved.status == PayrollStatus.APPROVED
    assert paid.status == PayrollStatus.PAID
    assert paid.payment_mode == "Cash"
    assert paid.paid_at == datetime(2024, 1, 10, 9, 0)

    (ref, entry), = env.ledger.entries.items()
    assert paid.transaction_ref == ref
    assert entry.amount == Decimal("1600.00")
    assert entry.label == "Salary Payment - Dev Rao (1/2024)"
    assert entry.member_id == 4
    assert env.audit.actions()[-2:] == ["APPROVED_PAYROLL", "PAID_PAYROLL"]


def test_pay_requires_approval(env, draft):
    with pytest.raises(InvalidTransitionError):
        env.container.payroll_lifecycle.pay(OWNER, IT, draft.payroll_id)
    assert env.ledger.entries == {}


def test_paid_record_is_immutable(env, draft):
    lifecycle = env.container.payroll_lifecycle
    lifecycle.approve(OWNER, IT, draft.payroll_id)
    lifecycle.pay(OWNER, IT, draft.payroll_id, "UPI")

    with pytest.raises(ImmutableRecordError):
        lifecycle.pay(OWNER, IT, draft.payroll_id)
    with pytest.raises(ImmutableRecordError):
        lifecycle.approve(OWNER, IT, draft.payroll_id)
    assert len(env.ledger.entries) == 1


def test_approving_twice_is_an_invalid_transition(env, draft):
    env.container.payroll_lifecycle.approve(OWNER, IT, draft.payroll_id)
    with pytest.raises(InvalidTransitionError):
        env.container.payroll_lifecycle.approve(OWNER, IT, draft.payroll_id)


def test_failed_status_flip_rolls_back_ledger_entry(env, draft):
    lifecycle = env.container.payroll_lifecycle
    lifecycle.approve(OWNER, IT, draft.payroll_id)
    env.payroll.fail_mark_paid = True

    with pytest.raises(InvalidTransitionError):
        lifecycle.pay(OWNER, IT, draft.payroll_id)

    assert env.ledger.entries == {}
    assert env.payroll.get_by_id(draft.payroll_id).status == PayrollStatus.APPROVED
    assert "PAID_PAYROLL" not in env.audit.actions()


def test_lifecycle_requires_privilege_and_tenant(env, draft):
    lifecycle = env.container.payroll_lifecycle
    with pytest.raises(AuthorizationError):
        lifecycle.approve(STAFF, IT, draft.payroll_id)
    with pytest.raises(AuthorizationError):
        lifecycle.approve(OTHER_TENANT, IT, draft.payroll_id)
    with pytest.raises(NotFoundError):
        lifecycle.approve(OWNER, IT, 999)


def test_payroll_is_scoped_to_its_sector(env, draft):
    education = get_profile(Sector.EDUCATION)
    c = env.container

    assert c.payroll_service.list_payroll(OWNER, education, 1, 2024) == []
    assert c.payroll_service.period_summary(OWNER, education, 1, 2024).staff_count == 0
    assert [r.member_id for r in c.payroll_service.list_payroll(OWNER, IT, 1, 2024)] == [4]

    with pytest.raises(NotFoundError):
        c.payroll_lifecycle.approve(OWNER, education, draft.payroll_id)
    c.payroll_lifecycle.approve(OWNER, IT, draft.payroll_id)
    with pytest.raises(NotFoundError):
        c.payroll_lifecycle.pay(OWNER, education, draft.payroll_id)

    assert env.payroll.get_by_id(draft.payroll_id).status == PayrollStatus.APPROVED
    assert env.ledger.entries == {}
