from __future__ import annotations

from flask import Flask, request

from ..common.http import current_principal, json_body, ok, pick, principal_required, sector_profile
from ..common.serialization import to_jsonable
from ..container import Container
from ..core.enums import PayrollStatus
from ..core.exceptions import ValidationError
from .model import PayrollRecord


def _payroll_dict(record: PayrollRecord) -> dict:
    out = {
        "id": record.payroll_id,
        "member_id": record.member_id,
        "member_name": record.member_name,
        "sector": record.sector,
        "month": record.month,
        "year": record.year,
        "status": record.status.value,
        "bonus": record.bonus,
        "deductions": record.deductions,
        "payment_mode": record.payment_mode,
        "transaction_ref": record.transaction_ref,
        "paid_at": record.paid_at,
    }
    out.update(to_jsonable(record.figures))
    return to_jsonable(out)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/<sector>/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    @principal_required
    def payroll_generate(sector: str):
        payload = json_body()
        result = container.payroll_generator.generate(
            current_principal(), sector_profile(sector), pick(payload, "month"), pick(payload, "year")
        )
        return ok(
            [_payroll_dict(r) for r in result.records],
            201,
            skipped_paid=result.skipped_paid,
            message=f"Payroll generated for {len(result.records)} members",
        )

    @app.route("/api/<sector>/payroll", methods=["GET"], endpoint="payroll_list")
    @principal_required
    def payroll_list(sector: str):
        profile = sector_profile(sector)
        status = request.args.get("status")
        try:
            status_enum = PayrollStatus(status) if status else None
        except ValueError as e:
            raise ValidationError(f"Unknown payroll status: {status}") from e
        records = container.payroll_service.list_payroll(
            current_principal(), profile, request.args.get("month"), request.args.get("year"), status=status_enum
        )
        return ok([_payroll_dict(r) for r in records])

    @app.route("/api/<sector>/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    @principal_required
    def payroll_summary(sector: str):
        summary = container.payroll_service.period_summary(
            current_principal(), sector_profile(sector), request.args.get("month"), request.args.get("year")
        )
        return ok(summary)

    @app.route("/api/<sector>/payroll/<int:payroll_id>/approve", methods=["PUT"], endpoint="payroll_approve")
    @principal_required
    def payroll_approve(sector: str, payroll_id: int):
        record = container.payroll_lifecycle.approve(current_principal(), sector_profile(sector), payroll_id)
        return ok(_payroll_dict(record))

    @app.route("/api/<sector>/payroll/<int:payroll_id>/pay", methods=["POST"], endpoint="payroll_pay")
    @principal_required
    def payroll_pay(sector: str, payroll_id: int):
        payload = json_body()
        record = container.payroll_lifecycle.pay(
            current_principal(), sector_profile(sector), payroll_id, pick(payload, "payment_mode", "paymentMode")
        )
        return ok(_payroll_dict(record))
