# industrin/api/admin.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from industrin.core.auth import get_db, require_admin
from industrin.core.errors import NotFound
from industrin.core.rbac import Principal
from industrin.crud import claim_request as claims_crud
from industrin.crud import company as company_crud
from industrin.crud import company_user as company_user_crud
from industrin.crud import quote_request as quotes_crud
from industrin.models.claim_request import CLAIM_APPROVED, CLAIM_PENDING, CLAIM_REJECTED
from industrin.schemas.admin import AdminStats
from industrin.schemas.claim_request import (
    ClaimApprovalOut,
    ClaimReject,
    ClaimRequestOut,
    ClaimStatus,
)
from industrin.schemas.company import CompanyCreate, CompanyOut, CompanyUpdate
from industrin.schemas.company_user import CompanyUserOut
from industrin.schemas.quote_request import GeneralQuoteRequestOut, QuoteRequestOut
from industrin.services.claims import approve_claim, reject_claim

log = logging.getLogger("industrin.admin")

router = APIRouter(prefix="/admin")


@router.get("/stats", response_model=AdminStats)
def stats(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    by_status = claims_crud.count_by_status(db)
    return AdminStats(
        total_companies=company_crud.count_companies(db),
        pending_claims=by_status[CLAIM_PENDING],
        approved_claims=by_status[CLAIM_APPROVED],
        rejected_claims=by_status[CLAIM_REJECTED],
        total_quote_requests=quotes_crud.count_quote_requests(db),
        total_general_quote_requests=quotes_crud.count_general_quote_requests(db),
        active_company_users=company_user_crud.count_active(db),
    )


# ---------- claims ----------

@router.get("/claim-requests", response_model=List[ClaimRequestOut])
def list_claim_requests(
    status_filter: Optional[ClaimStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    rows = claims_crud.list_claims(db, status=status_filter, skip=skip, limit=limit)
    return [ClaimRequestOut.model_validate(r) for r in rows]


@router.post("/claim-requests/{claim_id}/approve", response_model=ClaimApprovalOut)
def approve_claim_request(
    claim_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    """
    Approve a pending claim: creates the company user and returns its access
    token. The token is not retrievable afterwards.
    """
    result = approve_claim(db, claim_id, principal)
    return ClaimApprovalOut(
        claim_request=ClaimRequestOut.model_validate(result.claim),
        company_user=CompanyUserOut.model_validate(result.company_user),
        access_token=result.access_token,
    )


@router.post("/claim-requests/{claim_id}/reject", response_model=ClaimRequestOut)
def reject_claim_request(
    claim_id: str,
    payload: Optional[ClaimReject] = Body(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    notes = payload.notes if payload else None
    return ClaimRequestOut.model_validate(reject_claim(db, claim_id, principal, notes=notes))


# ---------- company users ----------

@router.get("/company-users", response_model=List[CompanyUserOut])
def list_company_users(
    company_id: Optional[str] = Query(None, alias="companyId"),
    active: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    rows = company_user_crud.list_company_users(db, company_id=company_id, active=active)
    return [CompanyUserOut.model_validate(r) for r in rows]


@router.post("/company-users/{company_user_id}/deactivate", response_model=CompanyUserOut)
def deactivate_company_user(
    company_user_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    cu = company_user_crud.get_company_user(db, company_user_id)
    if cu is None:
        raise NotFound("Company user not found")
    cu = company_user_crud.deactivate(db, cu)
    log.info("company user %s deactivated by %s", cu.id, principal.subject)
    return CompanyUserOut.model_validate(cu)


# ---------- companies ----------

@router.post("/companies", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
def create_company(
    payload: CompanyCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    company = company_crud.create_company(db, payload)
    log.info("company %s (%s) created by %s", company.id, company.slug, principal.subject)
    return CompanyOut.model_validate(company)


@router.patch("/companies/{company_id}", response_model=CompanyOut)
def update_company(
    company_id: str,
    payload: CompanyUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    company = company_crud.get_company(db, company_id)
    if company is None:
        raise NotFound("Company not found")
    company = company_crud.update_company(db, company, payload)
    return CompanyOut.model_validate(company)


# ---------- quotes ----------

@router.get("/quote-requests", response_model=List[QuoteRequestOut])
def list_quote_requests(
    company_id: Optional[str] = Query(None, alias="companyId"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    rows = quotes_crud.list_quote_requests(db, company_id=company_id, skip=skip, limit=limit)
    return [QuoteRequestOut.model_validate(r) for r in rows]


@router.get("/general-quote-requests", response_model=List[GeneralQuoteRequestOut])
def list_general_quote_requests(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    rows = quotes_crud.list_general_quote_requests(db, skip=skip, limit=limit)
    return [GeneralQuoteRequestOut.model_validate(r) for r in rows]
