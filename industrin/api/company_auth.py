# industrin/api/company_auth.py
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from industrin.core.auth import (
    SESSION_COOKIE,
    authenticate_company_user,
    get_current_company_user,
    get_db,
)
from industrin.core.errors import NotFound
from industrin.core.security import ACCESS_TOKEN_EXPIRE_MINUTES, create_access_token
from industrin.core.rbac import Role
from industrin.crud.company import get_company, update_company
from industrin.models.company_user import CompanyUser
from industrin.schemas.company import CompanyOut, CompanyProfileUpdate
from industrin.schemas.company_user import CompanyLogin, CompanyLoginOut, CompanyUserOut

log = logging.getLogger("industrin.auth")

router = APIRouter(prefix="/company")


@router.post("/login", response_model=CompanyLoginOut)
def company_login(payload: CompanyLogin, response: Response, db: Session = Depends(get_db)):
    """
    Sign in with the email and access token issued on claim approval.
    Every failure returns the same 401.
    """
    cu = authenticate_company_user(db, payload.email, payload.access_token)
    token = create_access_token({"sub": cu.id, "role": Role.COMPANY.value})
    response.set_cookie(
        SESSION_COOKIE,
        token,
        httponly=True,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    log.info("company user %s signed in (company %s)", cu.id, cu.company_id)
    return CompanyLoginOut(company_user=CompanyUserOut.model_validate(cu), token=token)


@router.get("/verify", response_model=CompanyUserOut)
def company_verify(cu: CompanyUser = Depends(get_current_company_user)):
    return CompanyUserOut.model_validate(cu)


def _own_company(db: Session, cu: CompanyUser):
    company = get_company(db, cu.company_id)
    if company is None:
        raise NotFound("Company not found")
    return company


@router.get("/profile", response_model=CompanyOut)
def get_own_profile(
    cu: CompanyUser = Depends(get_current_company_user),
    db: Session = Depends(get_db),
):
    return CompanyOut.model_validate(_own_company(db, cu))


@router.put("/profile", response_model=CompanyOut)
def update_own_profile(
    payload: CompanyProfileUpdate,
    cu: CompanyUser = Depends(get_current_company_user),
    db: Session = Depends(get_db),
):
    """Descriptive and contact fields only; slug, region and flags stay with admins."""
    company = update_company(db, _own_company(db, cu), payload)
    log.info("company %s profile updated by company user %s", company.id, cu.id)
    return CompanyOut.model_validate(company)
