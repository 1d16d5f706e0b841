# industrin/api/claims.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from industrin.core.auth import get_db
from industrin.schemas.claim_request import ClaimRequestCreate, ClaimRequestOut
from industrin.services.claims import submit_claim

router = APIRouter()


@router.post(
    "/claim-requests",
    response_model=ClaimRequestOut,
    status_code=status.HTTP_201_CREATED,
)
def create_claim_request(payload: ClaimRequestCreate, db: Session = Depends(get_db)):
    """Public claim form. The returned id is the confirmation reference."""
    return ClaimRequestOut.model_validate(submit_claim(db, payload))


@router.post(
    "/companies/{company_id}/claim",
    response_model=ClaimRequestOut,
    status_code=status.HTTP_201_CREATED,
)
def claim_company(company_id: str, payload: ClaimRequestCreate, db: Session = Depends(get_db)):
    # the path wins over any reference in the body
    payload = payload.model_copy(update={"company_id": company_id, "company_slug": None})
    return ClaimRequestOut.model_validate(submit_claim(db, payload))
