# industrin/schemas/quote_request.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field, field_validator

from industrin.schemas.common import CamelModel

Urgency = Literal["akut", "inom_veckan", "planerad"]
ContactMethod = Literal["email", "phone", "both"]


class QuoteRequestCreate(CamelModel):
    company_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=60)
    company: Optional[str] = Field(default=None, max_length=255)
    service_type: Optional[str] = Field(default=None, max_length=255)
    message: str = Field(..., min_length=1, max_length=5000)
    urgency: Optional[Urgency] = None
    preferred_contact: ContactMethod = "email"


class QuoteRequestOut(CamelModel):
    id: str
    company_id: str
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    service_type: Optional[str] = None
    message: str
    urgency: Optional[str] = None
    preferred_contact: str
    submitted_at: datetime


class GeneralQuoteRequestCreate(CamelModel):
    description: str = Field(..., min_length=10, max_length=10000)
    service_type: str = Field(..., min_length=1, max_length=255)
    urgency: Urgency
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=60)
    company_name: Optional[str] = Field(default=None, max_length=255)
    preferred_contact: ContactMethod = "email"


class AttachmentOut(CamelModel):
    filename: str
    stored_name: str
    content_type: Optional[str] = None
    size_bytes: int


class GeneralQuoteRequestOut(CamelModel):
    id: str
    description: str
    service_type: str
    urgency: str
    name: str
    email: str
    phone: Optional[str] = None
    company_name: Optional[str] = None
    preferred_contact: str
    files: List[AttachmentOut] = []
    submitted_at: datetime

    @field_validator("files", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []
