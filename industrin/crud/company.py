# industrin/crud/company.py
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from industrin.core.errors import Conflict, NotFound, ValidationFailed
from industrin.models.company import Company
from industrin.schemas.company import CompanyCreate, CompanyFields
from industrin.services.slugs import is_valid_slug, slugify, unique_slug

DEFAULT_CATEGORY = "Service, Reparation & Underhåll"


# --- helpers -----------------------------------------------------------------

def _slug_exists(db: Session, slug: str) -> bool:
    return db.query(Company.id).filter(Company.slug == slug).first() is not None


def _distinct_sorted(values: Iterable[Optional[str]]) -> List[str]:
    return sorted({v for v in values if v})


_REQUIRED_FIELDS = {"name", "region", "description", "location"}


def _apply_fields(obj: Company, data: CompanyFields) -> None:
    # only what came in the payload; explicit null clears optional fields
    for key, value in data.model_dump(exclude_unset=True).items():
        if key == "slug":
            continue
        if value is None and key in _REQUIRED_FIELDS:
            raise ValidationFailed(f"{key} cannot be empty")
        if key in ("categories", "services", "service_areas") and value is None:
            value = []
        setattr(obj, key, value)


# --- reads -------------------------------------------------------------------

def get_company(db: Session, company_id: str) -> Optional[Company]:
    return db.get(Company, company_id)


def get_company_by_slug(db: Session, slug: str) -> Optional[Company]:
    return db.query(Company).filter(Company.slug == slug).first()


def resolve_company(
    db: Session, company_id: Optional[str] = None, company_slug: Optional[str] = None
) -> Company:
    """Find a company by id or slug; 400 when neither is given, 404 when unknown."""
    if not company_id and not company_slug:
        raise ValidationFailed("Company reference (companyId or companySlug) is required")
    company = None
    if company_id:
        company = get_company(db, company_id)
    if company is None and company_slug:
        company = get_company_by_slug(db, company_slug)
    if company is None:
        raise NotFound("Company not found")
    return company


def count_companies(db: Session) -> int:
    return db.query(Company).count()


def list_regions(db: Session) -> List[str]:
    return _distinct_sorted(r for (r,) in db.query(Company.region).distinct().all())


def list_categories(db: Session) -> List[str]:
    rows = db.query(Company.categories).all()
    return _distinct_sorted(c for (cats,) in rows for c in (cats or []))


def list_service_areas(db: Session) -> List[str]:
    rows = db.query(Company.service_areas).all()
    return _distinct_sorted(a for (areas,) in rows for a in (areas or []))


# --- writes ------------------------------------------------------------------

def create_company(db: Session, data: CompanyCreate) -> Company:
    """
    Slug rules: an explicit slug must be well formed and free (409 otherwise);
    a derived slug gets a -2, -3, ... suffix when taken.
    """
    if data.slug:
        slug = data.slug.strip().lower()
        if not is_valid_slug(slug):
            raise ValidationFailed("Invalid slug", details={"slug": data.slug})
        if _slug_exists(db, slug):
            raise Conflict(f"Slug '{slug}' is already in use")
    else:
        slug = unique_slug(slugify(data.name), lambda s: _slug_exists(db, s))

    obj = Company(
        slug=slug,
        name=data.name,
        region=data.region,
        description="",
        categories=[],
        services=[],
        service_areas=[],
        location="",
        is_featured=data.is_featured,
        is_verified=data.is_verified,
    )
    _apply_fields(obj, data)

    if not obj.description:
        obj.description = f"{data.name} - industriföretag specialiserat inom service och reparationer."
    if not obj.categories:
        obj.categories = [DEFAULT_CATEGORY]
    if not obj.location:
        obj.location = ", ".join(p for p in (obj.city, "Sverige") if p)

    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def update_company(db: Session, obj: Company, data: CompanyFields) -> Company:
    """Partial update (admin or the company itself). The slug never changes."""
    _apply_fields(obj, data)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
