from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as resolved by the identity layer."""

    tenant_id: int
    user_id: int
    username: str
    role: Role

    @property
    def is_privileged(self) -> bool:
        return self.role.is_privileged


def ensure_same_tenant(principal: Principal, tenant_id: int, *, what: str = "resource") -> None:
    if int(tenant_id) != int(principal.tenant_id):
        raise AuthorizationError(f"The {what} belongs to another tenant")


def require_privileged(principal: Principal, action: str) -> None:
    if not principal.is_privileged:
        raise AuthorizationError(f"Only an owner or admin can {action}")
