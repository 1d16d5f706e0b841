# industrin/api/companies.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from industrin.core.auth import get_db
from industrin.core.errors import NotFound
from industrin.crud.company import get_company, get_company_by_slug
from industrin.schemas.company import CompanyOut
from industrin.services.search import CompanyFilters, parse_categories, search_companies

router = APIRouter()


@router.get("/companies", response_model=List[CompanyOut])
def list_companies(
    search: Optional[str] = Query(None, max_length=200),
    region: Optional[str] = Query(None, max_length=120),
    categories: Optional[str] = Query(None, description="Comma separated, any-of"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    sort: Optional[str] = Query(None, pattern="^(name-asc|name-desc|relevance|newest)$"),
    db: Session = Depends(get_db),
):
    """
    Public directory listing.
    `Alla regioner` / `Alla kategorier` are accepted as "no filter".
    """
    filters = CompanyFilters(
        search=search,
        region=region,
        categories=parse_categories(categories),
        limit=limit,
        offset=offset,
        sort=sort,
    )
    return [CompanyOut.model_validate(c) for c in search_companies(db, filters)]


@router.get("/companies/{slug}", response_model=CompanyOut)
def get_company_by_slug_route(slug: str, db: Session = Depends(get_db)):
    company = get_company_by_slug(db, slug)
    if company is None:
        raise NotFound("Company not found")
    return CompanyOut.model_validate(company)


@router.get("/company-profile/{company_id}", response_model=CompanyOut)
def get_company_profile(company_id: str, db: Session = Depends(get_db)):
    company = get_company(db, company_id)
    if company is None:
        raise NotFound("Company not found")
    return CompanyOut.model_validate(company)
