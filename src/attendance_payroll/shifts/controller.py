from __future__ import annotations

from flask import Flask

from ..common.http import current_principal, json_body, ok, optional_time_field, pick, principal_required, sector_profile
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/<sector>/shifts", methods=["GET"], endpoint="shifts_list")
    @principal_required
    def shifts_list(sector: str):
        profile = sector_profile(sector)
        return ok(container.shift_service.list_shifts(current_principal(), profile.sector))

    @app.route("/api/<sector>/shifts", methods=["POST"], endpoint="shifts_create")
    @principal_required
    def shifts_create(sector: str):
        profile = sector_profile(sector)
        payload = json_body()
        shift = container.shift_service.create_shift(
            current_principal(),
            profile.sector,
            shift_name=pick(payload, "shift_name", "name"),
            start_time=optional_time_field(payload, "start_time", "startTime"),
            end_time=optional_time_field(payload, "end_time", "endTime"),
        )
        return ok(shift, 201)

    @app.route("/api/<sector>/shifts/<int:shift_id>", methods=["DELETE"], endpoint="shifts_delete")
    @principal_required
    def shifts_delete(sector: str, shift_id: int):
        sector_profile(sector)
        container.shift_service.delete_shift(current_principal(), shift_id)
        return ok({"id": shift_id, "deleted": True})
