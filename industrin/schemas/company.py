# industrin/schemas/company.py
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from industrin.schemas.common import CamelModel


def _clean_tags(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return None
    out: List[str] = []
    for v in value:
        v = (v or "").strip()
        if v and v not in out:
            out.append(v)
    return out


class CompanySummary(CamelModel):
    id: str
    name: str
    slug: str


class CompanyFields(CamelModel):
    """Descriptive and contact fields shared by create and update payloads."""

    logo_url: Optional[str] = None
    description: Optional[str] = None
    description_sv: Optional[str] = None
    categories: Optional[List[str]] = None
    services: Optional[List[str]] = None
    service_areas: Optional[List[str]] = None
    specialties: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, max_length=20)
    city: Optional[str] = Field(default=None, max_length=120)
    contact_email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=60)
    website: Optional[str] = None

    @field_validator("categories", "services", "service_areas")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)


class CompanyCreate(CompanyFields):
    name: str = Field(..., min_length=2, max_length=255)
    # optional explicit slug (importers); otherwise derived from name
    slug: Optional[str] = Field(default=None, max_length=255)
    region: str = Field(..., min_length=1, max_length=120)
    is_featured: bool = False
    is_verified: bool = False


class CompanyUpdate(CompanyFields):
    """Admin partial update. The slug is immutable and therefore absent."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    region: Optional[str] = Field(default=None, min_length=1, max_length=120)
    is_featured: Optional[bool] = None
    is_verified: Optional[bool] = None


class CompanyProfileUpdate(CompanyFields):
    """What a claimed company may change on its own listing."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=255)


class CompanyOut(CamelModel):
    id: str
    slug: str
    name: str
    logo_url: Optional[str] = None
    description: str = ""
    description_sv: Optional[str] = None
    categories: List[str] = []
    services: List[str] = []
    service_areas: List[str] = []
    specialties: Optional[str] = None
    location: str = ""
    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    region: str
    contact_email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    is_featured: bool = False
    is_verified: bool = False
    created_at: Optional[datetime] = None

    @field_validator("categories", "services", "service_areas", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []
