# industrin/crud/company_user.py
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from industrin.models.company_user import CompanyUser


def get_company_user(db: Session, company_user_id: str) -> Optional[CompanyUser]:
    return db.get(CompanyUser, company_user_id)


def get_by_email(db: Session, email: str) -> Optional[CompanyUser]:
    return (
        db.query(CompanyUser)
        .filter(func.lower(CompanyUser.email) == (email or "").strip().lower())
        .first()
    )


def get_active_for_company(db: Session, company_id: str) -> Optional[CompanyUser]:
    return (
        db.query(CompanyUser)
        .filter(CompanyUser.company_id == company_id, CompanyUser.is_active.is_(True))
        .first()
    )


def token_hash_exists(db: Session, token_hash: str) -> bool:
    return (
        db.query(CompanyUser.id).filter(CompanyUser.access_token_hash == token_hash).first()
        is not None
    )


def list_company_users(
    db: Session,
    company_id: Optional[str] = None,
    active: Optional[bool] = None,
) -> List[CompanyUser]:
    q = db.query(CompanyUser).options(joinedload(CompanyUser.company))
    if company_id:
        q = q.filter(CompanyUser.company_id == company_id)
    if active is not None:
        q = q.filter(CompanyUser.is_active.is_(active))
    return q.order_by(CompanyUser.created_at.desc()).all()


def count_active(db: Session) -> int:
    return db.query(CompanyUser).filter(CompanyUser.is_active.is_(True)).count()


def deactivate(db: Session, cu: CompanyUser) -> CompanyUser:
    """The only mutation a company user gets after creation. Idempotent."""
    if cu.is_active:
        cu.is_active = False
        db.add(cu)
        db.commit()
        db.refresh(cu)
    return cu
