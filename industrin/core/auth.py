# industrin/core/auth.py
from datetime import datetime
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import func
from sqlalchemy.orm import Session

from industrin.core.errors import AuthenticationFailed, NotFound
from industrin.core.rbac import (
    ANONYMOUS,
    Principal,
    Role,
    ensure_admin,
    ensure_company,
    is_super_from_claims,
    role_from_claims,
)
from industrin.core.security import (
    UNMATCHABLE_TOKEN_HASH,
    access_token_matches,
    decode_idp_token,
    decode_session_token,
    verify_password,
)
from industrin.db.session import SessionLocal
from industrin.models.admin_user import AdminUser
from industrin.models.company_user import CompanyUser

# Bearer scheme for Swagger "Authorize" button; optional so public routes still work
bearer_scheme = HTTPBearer(auto_error=False)

SESSION_COOKIE = "session"

# One message for every failed company login (no hint which factor was wrong)
COMPANY_LOGIN_FAILED = "Invalid email or access token"
ADMIN_LOGIN_FAILED = "Incorrect username or password"
INVALID_CREDENTIALS = "Could not validate credentials"


def get_db():
    """Yield a DB session and make sure it's closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# -----------------------------
# Login checks
# -----------------------------

def authenticate_admin(db: Session, username: str, password: str) -> AdminUser:
    """
    Legacy admin login. Unknown user, disabled user and wrong password all
    raise the same 401.
    """
    admin = (
        db.query(AdminUser)
        .filter(func.lower(AdminUser.username) == (username or "").strip().lower())
        .first()
    )
    if not admin or not admin.is_active:
        raise AuthenticationFailed(ADMIN_LOGIN_FAILED)
    if not verify_password(password, admin.hashed_password):
        raise AuthenticationFailed(ADMIN_LOGIN_FAILED)

    admin.last_login_at = datetime.utcnow()
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def authenticate_company_user(db: Session, email: str, access_token: str) -> CompanyUser:
    """
    Legacy company login with the access token issued at claim approval.
    Unknown email, inactive user and token mismatch are indistinguishable,
    and each one hashes the presented token once. Read-only.
    """
    cu = (
        db.query(CompanyUser)
        .filter(func.lower(CompanyUser.email) == (email or "").strip().lower())
        .first()
    )
    token_hash = cu.access_token_hash if cu is not None else UNMATCHABLE_TOKEN_HASH
    token_ok = access_token_matches(access_token, token_hash)
    if cu is None or not cu.is_active or not token_ok:
        raise AuthenticationFailed(COMPANY_LOGIN_FAILED)
    return cu


# -----------------------------
# Principal resolution
# -----------------------------

def _extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE) or None


def _principal_from_session(db: Session, claims: dict) -> Principal:
    role = claims.get("role")
    sub = claims.get("sub")

    if role == Role.ADMIN.value:
        admin = db.get(AdminUser, sub) if sub else None
        if admin is None or not admin.is_active:
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        return Principal(
            role=Role.ADMIN,
            subject=admin.id,
            display_name=admin.username,
            is_super_admin=bool(admin.is_super_admin),
            source="session",
        )

    if role == Role.COMPANY.value:
        cu = db.get(CompanyUser, sub) if sub else None
        if cu is None or not cu.is_active:
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        return Principal(
            role=Role.COMPANY,
            subject=cu.id,
            company_id=cu.company_id,
            display_name=cu.email,
            source="session",
        )

    raise AuthenticationFailed(INVALID_CREDENTIALS)


def _principal_from_idp(db: Session, claims: dict) -> Principal:
    sub = claims.get("sub")
    email = (claims.get("email") or "").strip().lower()
    if not sub:
        raise AuthenticationFailed(INVALID_CREDENTIALS)

    role = role_from_claims(claims)
    if role is Role.ADMIN:
        return Principal(
            role=Role.ADMIN,
            subject=str(sub),
            display_name=email or str(sub),
            is_super_admin=is_super_from_claims(claims),
            source="idp",
        )

    if role is Role.COMPANY and email:
        cu = (
            db.query(CompanyUser)
            .filter(func.lower(CompanyUser.email) == email, CompanyUser.is_active.is_(True))
            .first()
        )
        if cu is not None:
            return Principal(
                role=Role.COMPANY,
                subject=cu.id,
                company_id=cu.company_id,
                display_name=cu.email,
                source="idp",
            )

    # verified, but nothing this service can grant
    return Principal(role=Role.ANONYMOUS, subject=str(sub), display_name=email or None, source="idp")


def resolve_principal(db: Session, token: Optional[str]) -> Principal:
    """Turn a bearer/cookie credential into a Principal. No token → anonymous."""
    if not token:
        return ANONYMOUS

    try:
        claims = decode_session_token(token)
    except JWTError:
        claims = None
    if claims is not None:
        return _principal_from_session(db, claims)

    try:
        idp_claims = decode_idp_token(token)
    except JWTError:
        idp_claims = None
    if idp_claims is not None:
        return _principal_from_idp(db, idp_claims)

    raise AuthenticationFailed(INVALID_CREDENTIALS)


def get_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Resolve the request principal and expose it to middleware/loggers via
    request.state.
    """
    principal = resolve_principal(db, _extract_token(request, credentials))
    request.state.principal_role = principal.role.value
    request.state.principal_subject = principal.subject
    return principal


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    return ensure_admin(principal)


def require_company(principal: Principal = Depends(get_principal)) -> Principal:
    return ensure_company(principal)


def get_current_company_user(
    principal: Principal = Depends(require_company),
    db: Session = Depends(get_db),
) -> CompanyUser:
    cu = db.get(CompanyUser, principal.subject)
    if cu is None:
        raise NotFound("Company user not found")
    return cu
