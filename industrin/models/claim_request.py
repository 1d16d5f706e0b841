# industrin/models/claim_request.py
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from industrin.db.base import Base
from industrin.models.company import new_id

CLAIM_PENDING = "pending"
CLAIM_APPROVED = "approved"
CLAIM_REJECTED = "rejected"
CLAIM_STATUSES = (CLAIM_PENDING, CLAIM_APPROVED, CLAIM_REJECTED)


class ClaimRequest(Base):
    """
    Ownership claim for a listed company.
    Starts as 'pending' and is moved exactly once to 'approved' or 'rejected'.
    reviewed_by holds the reviewing admin's principal subject; no FK so that
    identity-provider admins (no admin_users row) can review too.
    """

    __tablename__ = "claim_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_claim_requests_status",
        ),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    company_id = Column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # claimant
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(60), nullable=True)
    message = Column(Text, nullable=False, default="")
    consent = Column(Boolean, nullable=False, default=False)

    # review
    status = Column(String(20), nullable=False, default=CLAIM_PENDING, index=True)
    submitted_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    reviewed_at = Column(DateTime, nullable=True)
    reviewed_by = Column(String(255), nullable=True)
    review_notes = Column(Text, nullable=True)

    company = relationship("Company", backref="claim_requests", passive_deletes=True)


Index(
    "ix_claim_requests_status_submitted",
    ClaimRequest.status,
    ClaimRequest.submitted_at.desc(),
)
