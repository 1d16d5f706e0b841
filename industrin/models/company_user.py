# industrin/models/company_user.py
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, true
from sqlalchemy.orm import relationship

from industrin.db.base import Base
from industrin.models.company import new_id


class CompanyUser(Base):
    """
    Login binding for a claimed company. Created only by claim approval;
    afterwards the only mutation is deactivation.
    Only the SHA-256 digest of the issued access token is stored.
    """

    __tablename__ = "company_users"

    id = Column(String(36), primary_key=True, default=new_id)
    company_id = Column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(30), nullable=False, default="owner")

    access_token_hash = Column(String(64), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    approved_by = Column(String(255), nullable=True)
    claim_request_id = Column(String(36), ForeignKey("claim_requests.id"), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    company = relationship("Company", backref="company_users", passive_deletes=True)
