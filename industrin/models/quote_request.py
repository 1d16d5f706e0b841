# industrin/models/quote_request.py
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from industrin.db.base import Base
from industrin.models.company import new_id

URGENCY_LEVELS = ("akut", "inom_veckan", "planerad")
CONTACT_METHODS = ("email", "phone", "both")


class QuoteRequest(Base):
    """Quote request addressed to one company. Write-once."""

    __tablename__ = "quote_requests"

    id = Column(String(36), primary_key=True, default=new_id)
    company_id = Column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(60), nullable=True)
    company = Column(String(255), nullable=True)  # requester's own company
    service_type = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    urgency = Column(String(20), nullable=True)
    preferred_contact = Column(String(10), nullable=False, default="email")

    submitted_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    target_company = relationship("Company", backref="quote_requests", passive_deletes=True)


class GeneralQuoteRequest(Base):
    """Quote request not bound to a company, routed manually. Write-once."""

    __tablename__ = "general_quote_requests"

    id = Column(String(36), primary_key=True, default=new_id)

    description = Column(Text, nullable=False)
    service_type = Column(String(255), nullable=False)
    urgency = Column(String(20), nullable=False)

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(60), nullable=True)
    company_name = Column(String(255), nullable=True)
    preferred_contact = Column(String(10), nullable=False, default="email")

    # [{"filename", "stored_name", "content_type", "size_bytes"}]
    files = Column(JSON, nullable=True)

    submitted_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
