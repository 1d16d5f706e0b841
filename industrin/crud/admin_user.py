# industrin/crud/admin_user.py
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from industrin.core.security import get_password_hash
from industrin.models.admin_user import AdminUser


def get_by_username(db: Session, username: str) -> Optional[AdminUser]:
    return (
        db.query(AdminUser)
        .filter(func.lower(AdminUser.username) == (username or "").strip().lower())
        .first()
    )


def ensure_admin(
    db: Session, username: str, password: str, *, super_admin: bool = True
) -> AdminUser:
    """
    Create the admin if missing, otherwise make sure it is active (and super
    admin when asked). The password of an existing admin is left alone.
    Safe to run repeatedly.
    """
    admin = get_by_username(db, username)
    if admin:
        changed = False
        if not admin.is_active:
            admin.is_active = True
            changed = True
        if super_admin and not admin.is_super_admin:
            admin.is_super_admin = True
            admin.role = "super_admin"
            changed = True
        if changed:
            db.add(admin)
            db.commit()
            db.refresh(admin)
        return admin

    admin = AdminUser(
        username=username.strip(),
        hashed_password=get_password_hash(password),
        role="super_admin" if super_admin else "admin",
        is_super_admin=super_admin,
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin
