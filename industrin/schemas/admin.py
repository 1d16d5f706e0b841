# industrin/schemas/admin.py
from typing import Optional

from pydantic import Field

from industrin.schemas.common import CamelModel


class AdminLogin(CamelModel):
    username: str = Field(..., min_length=1, max_length=120)
    password: str = Field(..., min_length=1, max_length=256)


class AdminOut(CamelModel):
    id: str
    username: str
    role: str
    is_super_admin: bool = False
    source: Optional[str] = None


class AdminLoginOut(CamelModel):
    admin: AdminOut
    token: str


class AdminStats(CamelModel):
    total_companies: int
    pending_claims: int
    approved_claims: int
    rejected_claims: int
    total_quote_requests: int
    total_general_quote_requests: int
    active_company_users: int
