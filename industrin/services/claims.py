# industrin/services/claims.py
"""
Ownership-claim workflow.

    pending --approve--> approved   (creates CompanyUser + access token)
    pending --reject---> rejected

Both transitions are terminal. The status change is a compare-and-set on
status='pending', so of two concurrent reviews only one can win; approval
writes the CompanyUser and the status change in one transaction.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from industrin.core.errors import Conflict, DirectoryError, NotFound, ValidationFailed
from industrin.core.rbac import Principal, ensure_admin
from industrin.core.security import generate_access_token, hash_access_token
from industrin.crud.claim_request import create_claim
from industrin.crud.company import resolve_company
from industrin.crud.company_user import get_active_for_company, get_by_email, token_hash_exists
from industrin.models.claim_request import (
    CLAIM_APPROVED,
    CLAIM_PENDING,
    CLAIM_REJECTED,
    ClaimRequest,
)
from industrin.models.company_user import CompanyUser
from industrin.schemas.claim_request import ClaimRequestCreate

log = logging.getLogger("industrin.claims")


def single_company_user_enforced() -> bool:
    """One active company user per company unless ENFORCE_SINGLE_COMPANY_USER=0."""
    return os.getenv("ENFORCE_SINGLE_COMPANY_USER", "1") == "1"


TOKEN_ATTEMPTS = 5


@dataclass
class ApprovalResult:
    claim: ClaimRequest
    company_user: CompanyUser
    access_token: str  # plain value, returned once


# -----------------------------
# Submission
# -----------------------------

def submit_claim(db: Session, payload: ClaimRequestCreate) -> ClaimRequest:
    """
    Persist a new pending claim. Duplicates are not merged: every valid
    submission creates its own pending claim.
    """
    if not payload.company_id and not payload.company_slug:
        raise ValidationFailed("Company reference (companyId or companySlug) is required")
    if payload.consent is not True:
        raise ValidationFailed("Consent is required to submit a claim")

    company = resolve_company(db, payload.company_id, payload.company_slug)

    claim = create_claim(
        db,
        company_id=company.id,
        name=payload.name,
        email=str(payload.email),
        phone=payload.phone,
        message=payload.message,
        consent=True,
    )
    log.info("claim %s submitted for company %s (%s)", claim.id, company.id, company.slug)
    return claim


# -----------------------------
# Review helpers
# -----------------------------

def _load_claim(db: Session, claim_id: str) -> ClaimRequest:
    q = db.query(ClaimRequest).filter(ClaimRequest.id == claim_id)
    if db.get_bind().dialect.name == "postgresql":
        q = q.with_for_update()
    claim = q.first()
    if claim is None:
        raise NotFound("Claim request not found")
    if claim.status != CLAIM_PENDING:
        raise Conflict(f"Claim request is already {claim.status}")
    return claim


def _issue_token(db: Session) -> Tuple[str, str]:
    for _ in range(TOKEN_ATTEMPTS):
        token = generate_access_token()
        token_hash = hash_access_token(token)
        if not token_hash_exists(db, token_hash):
            return token, token_hash
    raise Conflict("Could not generate a unique access token")


def _transition(
    db: Session,
    claim_id: str,
    to_status: str,
    reviewer: Principal,
    now: datetime,
    notes: Optional[str] = None,
) -> None:
    """Compare-and-set pending -> to_status. Does not commit."""
    values = {"status": to_status, "reviewed_at": now, "reviewed_by": reviewer.subject}
    if notes is not None:
        values["review_notes"] = notes
    result = db.execute(
        update(ClaimRequest)
        .where(ClaimRequest.id == claim_id, ClaimRequest.status == CLAIM_PENDING)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise Conflict("Claim request was already reviewed")


# -----------------------------
# Review
# -----------------------------

def approve_claim(db: Session, claim_id: str, reviewer: Principal) -> ApprovalResult:
    ensure_admin(reviewer)
    try:
        claim = _load_claim(db, claim_id)

        if single_company_user_enforced() and get_active_for_company(db, claim.company_id):
            raise Conflict("Company already has an active company user")
        if get_by_email(db, claim.email):
            raise Conflict("A company user with this email already exists")

        token, token_hash = _issue_token(db)
        now = datetime.utcnow()

        company_user = CompanyUser(
            company_id=claim.company_id,
            email=claim.email.strip().lower(),
            name=claim.name,
            role="owner",
            access_token_hash=token_hash,
            is_active=True,
            approved_by=reviewer.subject,
            claim_request_id=claim.id,
            created_at=now,
        )
        db.add(company_user)
        db.flush()

        _transition(db, claim.id, CLAIM_APPROVED, reviewer, now)
        db.commit()
    except DirectoryError:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Company user could not be created (duplicate key)") from e
    except Exception:
        db.rollback()
        raise

    db.refresh(claim)
    db.refresh(company_user)
    log.info(
        "claim %s approved by %s; company user %s created for company %s",
        claim.id,
        reviewer.subject,
        company_user.id,
        claim.company_id,
    )
    return ApprovalResult(claim=claim, company_user=company_user, access_token=token)


def reject_claim(
    db: Session, claim_id: str, reviewer: Principal, notes: Optional[str] = None
) -> ClaimRequest:
    ensure_admin(reviewer)
    try:
        claim = _load_claim(db, claim_id)
        _transition(db, claim.id, CLAIM_REJECTED, reviewer, datetime.utcnow(), notes=notes)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(claim)
    log.info("claim %s rejected by %s", claim.id, reviewer.subject)
    return claim
