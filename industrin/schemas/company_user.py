# industrin/schemas/company_user.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from industrin.schemas.common import CamelModel
from industrin.schemas.company import CompanySummary


class CompanyUserOut(CamelModel):
    id: str
    company_id: str
    email: str
    name: str
    role: str
    is_active: bool
    approved_by: Optional[str] = None
    created_at: Optional[datetime] = None
    company: Optional[CompanySummary] = None


class CompanyLogin(CamelModel):
    # plain str: a malformed email must fail like any other bad credential
    email: str = Field(..., min_length=1, max_length=255)
    access_token: str = Field(..., min_length=1, max_length=512)


class CompanyLoginOut(CamelModel):
    company_user: CompanyUserOut
    token: str
