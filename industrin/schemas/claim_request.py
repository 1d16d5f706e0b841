# industrin/schemas/claim_request.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from industrin.schemas.common import CamelModel
from industrin.schemas.company import CompanySummary
from industrin.schemas.company_user import CompanyUserOut

ClaimStatus = Literal["pending", "approved", "rejected"]


class ClaimRequestCreate(CamelModel):
    # one of company_id / company_slug; the per-company route fills company_id
    company_id: Optional[str] = None
    company_slug: Optional[str] = None

    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=60)
    message: str = Field(default="", max_length=5000)
    consent: bool = False


class ClaimRequestOut(CamelModel):
    id: str
    company_id: str
    name: str
    email: str
    phone: Optional[str] = None
    message: str = ""
    consent: bool
    status: ClaimStatus
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    review_notes: Optional[str] = None
    company: Optional[CompanySummary] = None


class ClaimReject(CamelModel):
    notes: Optional[str] = Field(default=None, max_length=2000)


class ClaimApprovalOut(CamelModel):
    claim_request: ClaimRequestOut
    company_user: CompanyUserOut
    # shown once; only its digest is stored
    access_token: str
