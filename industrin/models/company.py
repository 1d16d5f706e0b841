# industrin/models/company.py
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, String, Text, JSON
from sqlalchemy.dialects.postgresql import ARRAY

from industrin.db.base import Base

# text[] on Postgres, JSON array on SQLite (dev/tests)
StringList = ARRAY(String).with_variant(JSON(), "sqlite")


def new_id() -> str:
    return str(uuid4())


class Company(Base):
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=new_id)

    # public identifier, derived from name once and never changed
    slug = Column(String(255), unique=True, nullable=False, index=True)

    name = Column(String(255), nullable=False, index=True)
    logo_url = Column(String, nullable=True)
    description = Column(Text, nullable=False, default="")
    description_sv = Column(Text, nullable=True)

    categories = Column(StringList, nullable=False, default=list)
    services = Column(StringList, nullable=True, default=list)
    service_areas = Column("serviceomraden", StringList, nullable=True, default=list)
    specialties = Column(Text, nullable=True)

    # location
    location = Column(String, nullable=False, default="")
    address = Column(String, nullable=True)
    postal_code = Column(String(20), nullable=True)
    city = Column(String(120), nullable=True, index=True)
    region = Column(String(120), nullable=False, index=True)

    # contact
    contact_email = Column(String(255), nullable=True)
    phone = Column(String(60), nullable=True)
    website = Column(String, nullable=True)

    is_featured = Column(Boolean, nullable=False, default=False)
    is_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
