# industrin/api/admin_auth.py
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from industrin.core.auth import SESSION_COOKIE, authenticate_admin, get_db, require_admin
from industrin.core.rbac import Principal, Role
from industrin.core.security import ACCESS_TOKEN_EXPIRE_MINUTES, create_access_token
from industrin.schemas.admin import AdminLogin, AdminLoginOut, AdminOut

log = logging.getLogger("industrin.auth")

router = APIRouter(prefix="/admin")


@router.post("/login", response_model=AdminLoginOut)
def admin_login(payload: AdminLogin, response: Response, db: Session = Depends(get_db)):
    admin = authenticate_admin(db, payload.username, payload.password)
    token = create_access_token({"sub": admin.id, "role": Role.ADMIN.value})
    response.set_cookie(
        SESSION_COOKIE,
        token,
        httponly=True,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    log.info("admin %s signed in", admin.username)
    return AdminLoginOut(
        admin=AdminOut(
            id=admin.id,
            username=admin.username,
            role=admin.role,
            is_super_admin=bool(admin.is_super_admin),
            source="session",
        ),
        token=token,
    )


@router.get("/verify", response_model=AdminOut)
def admin_verify(principal: Principal = Depends(require_admin)):
    # IdP admins have no admin_users row; the principal carries everything
    return AdminOut(
        id=principal.subject,
        username=principal.display_name or principal.subject,
        role="super_admin" if principal.is_super_admin else "admin",
        is_super_admin=principal.is_super_admin,
        source=principal.source,
    )
