# industrin/core/rbac.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from industrin.core.errors import AuthenticationFailed, PermissionDenied


class Role(str, enum.Enum):
    ADMIN = "admin"
    COMPANY = "company"
    ANONYMOUS = "anonymous"


ADMIN_ROLES = {"admin", "super_admin"}
COMPANY_ROLES = {"company"}


@dataclass(frozen=True)
class Principal:
    """Authenticated identity of one request, resolved once at the boundary."""

    role: Role
    subject: Optional[str] = None  # admin_users.id, company_users.id or IdP sub
    company_id: Optional[str] = None
    display_name: Optional[str] = None
    is_super_admin: bool = False
    source: str = "anonymous"  # session | idp | anonymous

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_company(self) -> bool:
        return self.role is Role.COMPANY


ANONYMOUS = Principal(role=Role.ANONYMOUS)


def _metadata_role(claims: Mapping[str, Any], key: str) -> str:
    meta = claims.get(key) or {}
    if not isinstance(meta, Mapping):
        return ""
    return str(meta.get("role") or "").strip().lower()


def role_from_claims(claims: Mapping[str, Any]) -> Role:
    """
    Map identity-provider metadata to an internal role.
    app_metadata is set server-side and wins over user-editable user_metadata.
    """
    raw = _metadata_role(claims, "app_metadata") or _metadata_role(claims, "user_metadata")
    if raw in ADMIN_ROLES:
        return Role.ADMIN
    if raw in COMPANY_ROLES:
        return Role.COMPANY
    return Role.ANONYMOUS


def is_super_from_claims(claims: Mapping[str, Any]) -> bool:
    for key in ("app_metadata", "user_metadata"):
        meta = claims.get(key) or {}
        if isinstance(meta, Mapping):
            if meta.get("is_super_admin") or str(meta.get("role") or "").lower() == "super_admin":
                return True
    return False


# -----------------------------
# Guards
# -----------------------------

def _is_unauthenticated(principal: Principal) -> bool:
    # a verified IdP token without a usable role still carries a subject
    return principal.role is Role.ANONYMOUS and principal.subject is None


def ensure_admin(principal: Principal) -> Principal:
    """401 if unauthenticated, 403 if authenticated but not an admin."""
    if _is_unauthenticated(principal):
        raise AuthenticationFailed("Authentication required")
    if not principal.is_admin:
        raise PermissionDenied("Admin privileges required")
    return principal


def ensure_company(principal: Principal) -> Principal:
    if _is_unauthenticated(principal):
        raise AuthenticationFailed("Authentication required")
    if not principal.is_company or not principal.company_id:
        raise PermissionDenied("Company account required")
    return principal
