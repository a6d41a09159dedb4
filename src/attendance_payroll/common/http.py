from __future__ import annotations

import logging
import math
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..auth.principal import Principal
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..sectors.profile import SectorProfile, get_profile
from .datetime_utils import optional_time
from .serialization import to_jsonable
from .validators import require_date, require_int

logger = logging.getLogger(__name__)


def principal_required(view):
    """Resolve the authenticated principal from the session into ``g.principal``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "tenant_id" not in session or "user_id" not in session:
            return jsonify({"success": False, "error": "unauthenticated", "message": "Login required"}), 401
        try:
            role = Role(session.get("role", Role.STAFF.value))
        except ValueError:
            return jsonify({"success": False, "error": "unauthenticated", "message": "Unknown role"}), 401

        g.principal = Principal(
            tenant_id=int(session["tenant_id"]),
            user_id=int(session["user_id"]),
            username=str(session.get("username") or session["user_id"]),
            role=role,
        )
        return view(*args, **kwargs)

    return wrapper


def current_principal() -> Principal:
    return g.principal


def sector_profile(sector: str) -> SectorProfile:
    return get_profile(sector)


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True, "data": to_jsonable(data)}
    body.update({k: to_jsonable(v) for k, v in extra.items()})
    return jsonify(body), status


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def pick(source: Any, *names: str) -> Any:
    """First non-empty value among alternative spellings (``member_id`` / ``memberId``)."""

    for name in names:
        value = source.get(name)
        if value is not None and value != "":
            return value
    return None


def optional_int(source: Any, *names: str) -> Optional[int]:
    value = pick(source, *names)
    return None if value is None else require_int(value, names[0])


def optional_float(source: Any, *names: str) -> Optional[float]:
    value = pick(source, *names)
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{names[0]} must be a number") from e
    if not math.isfinite(number):
        raise ValidationError(f"{names[0]} must be a finite number")
    return number


def optional_date(source: Any, *names: str):
    value = pick(source, *names)
    return None if value is None else require_date(value, names[0])


def optional_time_field(source: Any, *names: str):
    return optional_time(pick(source, *names))


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        logger.warning("%s %s rejected: %s (%s)", request.method, request.path, e, e.kind)
        return jsonify({"success": False, "error": e.kind, "message": str(e)}), e.http_status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "error": "http_error", "message": e.description}), e.code

        logger.exception("unexpected error on %s %s", request.method, request.path)
        return jsonify({"success": False, "error": "internal_error", "message": "Internal server error"}), 500
