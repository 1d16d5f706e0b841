# industrin/services/search.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy import String, and_, case, cast, or_, text
from sqlalchemy.orm import Session

from industrin.models.company import Company

log = logging.getLogger("industrin.search")

# UI sentinels meaning "no filter"
ALL_REGIONS = "Alla regioner"
ALL_CATEGORIES = "Alla kategorier"

SORT_OPTIONS = ("name-asc", "name-desc", "relevance", "newest")

# a multi-word query longer than this is treated as a company name lookup
NAME_LOOKUP_MIN_LENGTH = 10

# Swedish industrial vocabulary, incl. spellings without å/ä/ö
SEARCH_SYNONYMS = {
    # service terms
    "service": ["underhåll", "reparation", "reparationer"],
    "underhåll": ["service", "maintenance", "skötsel"],
    "reparation": ["service", "repair", "lagning"],
    "reparationer": ["service", "repairs", "lagningar"],
    "reservdelar": ["delar", "komponenter", "ersättningsdelar"],
    "delar": ["reservdelar", "komponenter"],
    # equipment
    "maskiner": ["utrustning", "maskin", "equipment"],
    "maskin": ["maskiner", "utrustning", "equipment"],
    "utrustning": ["maskiner", "maskin", "equipment"],
    "cnc": ["cnc-bearbetning", "bearbetning"],
    "hydraulik": ["hydrauliksystem", "hydrauliska"],
    "pneumatik": ["pneumatiska", "tryckluft"],
    # places
    "göteborg": ["göteborgs", "västra götaland", "goteborg", "goteborgs"],
    "goteborg": ["göteborg", "göteborgs", "västra götaland"],
    "stockholm": ["stockholms", "stockholms län"],
    "malmö": ["malmös", "skåne", "malmo"],
    "malmo": ["malmö", "malmös", "skåne"],
    "skåne": ["malmö", "skåne län", "skane"],
    "skane": ["skåne", "malmö", "skåne län"],
    "västra": ["västra götaland", "göteborg", "vastra"],
    "vastra": ["västra", "västra götaland", "göteborg"],
    "götaland": ["västra götaland", "göteborg", "gotaland"],
    "gotaland": ["götaland", "västra götaland", "göteborg"],
    "norrland": ["norrbotten", "västerbotten"],
    # industry
    "industri": ["industrial", "industriell"],
    "verkstad": ["verkstäder", "workshop"],
    "produktion": ["tillverkning", "manufacturing"],
    "automation": ["automatisering", "robot"],
    "svetsning": ["svets", "welding"],
    "lyftutrustning": ["lyft", "kran", "lyftar"],
}


@dataclass
class CompanyFilters:
    search: Optional[str] = None
    region: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    limit: Optional[int] = None
    offset: int = 0
    sort: Optional[str] = None


def parse_categories(raw: Optional[str]) -> List[str]:
    """'Hydraulik, Service' -> ['Hydraulik', 'Service']"""
    if not raw:
        return []
    out: List[str] = []
    for part in raw.split(","):
        part = part.strip()
        if part and part not in out:
            out.append(part)
    return out


def synonyms_for(term: str) -> List[str]:
    return SEARCH_SYNONYMS.get(term.lower(), [])


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(column, value: str):
    return column.ilike(f"%{_escape_like(value)}%", escape="\\")


def _searchable_columns() -> list:
    return [
        Company.name,
        Company.description,
        Company.description_sv,
        cast(Company.categories, String),
        Company.city,
        Company.region,
    ]


def _term_condition(term: str):
    variants = [term] + synonyms_for(term)
    return or_(*[_contains(col, v) for v in variants for col in _searchable_columns()])


def search_condition(search: str):
    value = search.strip()
    if " " in value and len(value) > NAME_LOOKUP_MIN_LENGTH:
        return _contains(Company.name, value)
    # every term must match (AND), each term via itself or a synonym (OR)
    return and_(*[_term_condition(t) for t in value.split()])


def _dialect(db: Session) -> str:
    return db.get_bind().dialect.name


def category_condition(db: Session, categories: Iterable[str]):
    """Any-of containment against the categories collection."""
    categories = list(categories)
    if _dialect(db) == "postgresql":
        return or_(*[Company.categories.contains([c]) for c in categories])

    # SQLite keeps the list as a JSON array
    clauses = []
    for i, c in enumerate(categories):
        param = f"category_{i}"
        clauses.append(
            text(
                "EXISTS (SELECT 1 FROM json_each(companies.categories) "
                f"WHERE json_each.value = :{param})"
            ).bindparams(**{param: c})
        )
    return or_(*clauses)


def _relevance_rank(search: str):
    s = _escape_like(search.strip())
    return case(
        (Company.name.ilike(s, escape="\\"), 1),
        (Company.name.ilike(f"{s}%", escape="\\"), 2),
        (Company.name.ilike(f"%{s}%", escape="\\"), 3),
        (cast(Company.categories, String).ilike(f"%{s}%", escape="\\"), 4),
        (Company.description_sv.ilike(f"%{s}%", escape="\\"), 5),
        (Company.description.ilike(f"%{s}%", escape="\\"), 6),
        (Company.city.ilike(f"%{s}%", escape="\\"), 7),
        (Company.region.ilike(f"%{s}%", escape="\\"), 8),
        else_=9,
    )


def _order_by(filters: CompanyFilters) -> list:
    sort = filters.sort or ""
    if sort == "name-asc":
        return [Company.name.asc(), Company.id.asc()]
    if sort == "name-desc":
        return [Company.name.desc(), Company.id.asc()]
    if sort == "newest":
        return [Company.created_at.desc(), Company.id.asc()]
    if sort == "relevance" and filters.search and filters.search.strip():
        return [Company.is_featured.desc(), _relevance_rank(filters.search), Company.name.asc()]
    return [Company.is_featured.desc(), Company.name.asc()]


def search_companies(db: Session, filters: CompanyFilters) -> List[Company]:
    """
    Filtered listing: keyword search, exact region, any-of category containment,
    explicit sort, limit/offset. Everything runs in the database.
    """
    conditions = []

    if filters.search and filters.search.strip():
        conditions.append(search_condition(filters.search))

    if filters.region and filters.region != ALL_REGIONS:
        conditions.append(Company.region == filters.region)

    if filters.categories and ALL_CATEGORIES not in filters.categories:
        conditions.append(category_condition(db, filters.categories))

    query = db.query(Company)
    if conditions:
        query = query.filter(and_(*conditions))

    query = query.order_by(*_order_by(filters))

    if filters.offset:
        query = query.offset(filters.offset)
    if filters.limit:
        query = query.limit(filters.limit)

    rows = query.all()
    log.debug("company search %s -> %d rows", filters, len(rows))
    return rows
