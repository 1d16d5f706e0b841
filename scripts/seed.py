#!/usr/bin/env python3
"""
Development seed:
- Ensures a super admin exists (SEED_ADMIN_USERNAME / SEED_ADMIN_PASSWORD).
- Adds three sample companies unless their slugs are taken.
- Safe to run multiple times (idempotent).
"""
import os
import sys

# enable 'industrin.' imports when run from the repo root
sys.path.append(os.getcwd())

from sqlalchemy.orm import Session

from industrin.crud.admin_user import ensure_admin
from industrin.crud.company import create_company, get_company_by_slug
from industrin.db.session import SessionLocal, engine
from industrin.models import Base
from industrin.schemas.company import CompanyCreate

SAMPLE_COMPANIES = [
    {
        "name": "Precision Tech AB",
        "slug": "precision-tech-ab",
        "description": "Specialiserade på CNC-bearbetning och precisionstillverkning av komplexa "
        "komponenter för industrin. Över 25 års erfarenhet inom området.",
        "categories": ["CNC-bearbetning", "Precisionsdelar"],
        "location": "Borås",
        "region": "Västra Götaland",
        "contact_email": "info@precisiontech.se",
        "phone": "033-123 45 67",
        "website": "www.precisiontech.se",
        "address": "Industrivägen 15",
        "postal_code": "503 32",
        "city": "Borås",
        "is_featured": True,
        "is_verified": True,
    },
    {
        "name": "HydroTech Solutions",
        "slug": "hydrotech-solutions",
        "description": "Ledande leverantör av hydrauliska system och komponenter. Erbjuder service, "
        "installation och underhåll av hydraulisk utrustning.",
        "categories": ["Hydraulik", "Service"],
        "location": "Göteborg",
        "region": "Västra Götaland",
        "contact_email": "info@hydrotech.se",
        "phone": "031-987 65 43",
        "website": "www.hydrotech.se",
        "address": "Hydraulikgatan 8",
        "postal_code": "411 32",
        "city": "Göteborg",
        "is_featured": False,
        "is_verified": True,
    },
    {
        "name": "AutoIndustri Nord",
        "slug": "autoindustri-nord",
        "description": "Automationslösningar och robotik för modern industri. Vi hjälper företag "
        "att optimera produktionsprocesser med avancerad teknik.",
        "categories": ["Automation", "Robotik"],
        "location": "Malmö",
        "region": "Skåne",
        "contact_email": "info@autoindustri.se",
        "phone": "040-555 12 34",
        "website": "www.autoindustri.se",
        "address": "Robotvägen 22",
        "postal_code": "211 45",
        "city": "Malmö",
        "is_featured": False,
        "is_verified": False,
    },
]


def seed_companies(db: Session) -> int:
    created = 0
    for data in SAMPLE_COMPANIES:
        if get_company_by_slug(db, data["slug"]):
            continue
        create_company(db, CompanyCreate(**data))
        created += 1
    return created


def main():
    username = os.environ.get("SEED_ADMIN_USERNAME", "admin")
    password = os.environ.get("SEED_ADMIN_PASSWORD", "admin123")

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        admin = ensure_admin(db, username, password)
        print(f"OK: super admin ensured -> {admin.username} (id={admin.id})")
        n = seed_companies(db)
        print(f"OK: {n} sample companies added")
    finally:
        db.close()


if __name__ == "__main__":
    main()
