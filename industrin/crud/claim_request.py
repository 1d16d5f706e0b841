# industrin/crud/claim_request.py
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from industrin.core.errors import ValidationFailed
from industrin.models.claim_request import CLAIM_PENDING, CLAIM_STATUSES, ClaimRequest


def get_claim(db: Session, claim_id: str) -> Optional[ClaimRequest]:
    return db.get(ClaimRequest, claim_id)


def list_claims(
    db: Session,
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[ClaimRequest]:
    q = db.query(ClaimRequest).options(joinedload(ClaimRequest.company))
    if status:
        if status not in CLAIM_STATUSES:
            raise ValidationFailed(f"Unknown claim status '{status}'")
        q = q.filter(ClaimRequest.status == status)
    return (
        q.order_by(ClaimRequest.submitted_at.desc(), ClaimRequest.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_claims_for_company(db: Session, company_id: str) -> List[ClaimRequest]:
    return (
        db.query(ClaimRequest)
        .filter(ClaimRequest.company_id == company_id)
        .order_by(ClaimRequest.submitted_at.desc())
        .all()
    )


def count_by_status(db: Session) -> Dict[str, int]:
    counts = {s: 0 for s in CLAIM_STATUSES}
    rows = db.query(ClaimRequest.status, func.count(ClaimRequest.id)).group_by(ClaimRequest.status).all()
    for status, n in rows:
        counts[status] = int(n)
    return counts


def create_claim(
    db: Session,
    *,
    company_id: str,
    name: str,
    email: str,
    phone: Optional[str],
    message: str,
    consent: bool,
) -> ClaimRequest:
    claim = ClaimRequest(
        company_id=company_id,
        name=name,
        email=email,
        phone=phone or None,
        message=message or "",
        consent=consent,
        status=CLAIM_PENDING,
    )
    db.add(claim)
    db.commit()
    db.refresh(claim)
    return claim
