# industrin/scripts/import_companies.py
"""
Bulk import of companies from a JSON array.

    python -m industrin.scripts.import_companies companies.json

Only Swedish (or country-less) entries are imported. Existing slugs are
skipped; rows are committed in batches of 50 and a failing batch does not
stop the rest.
"""
import json
import logging
import re
import sys
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from industrin.core.logging import configure_logging
from industrin.crud.company import DEFAULT_CATEGORY
from industrin.db.session import SessionLocal
from industrin.models.company import Company
from industrin.services.slugs import slugify

log = logging.getLogger("industrin.import")

BATCH_SIZE = 50
FALLBACK_REGION = "Övrigt"

CITY_TO_REGION = {
    # Stockholm
    "Stockholm": "Stockholm",
    "Nacka": "Stockholm",
    "Älvsjö": "Stockholm",
    "Sollentuna": "Stockholm",
    "Solna": "Stockholm",
    "Södertälje": "Stockholm",
    # Västra Götaland
    "Göteborg": "Västra Götaland",
    "Alingsås": "Västra Götaland",
    "Borås": "Västra Götaland",
    "Trollhättan": "Västra Götaland",
    "Uddevalla": "Västra Götaland",
    "Mölndal": "Västra Götaland",
    "Partille": "Västra Götaland",
    "Härryda": "Västra Götaland",
    "Mariestad": "Västra Götaland",
    "Smögen": "Västra Götaland",
    "Brämhult": "Västra Götaland",
    # Skåne
    "Malmö": "Skåne",
    "Helsingborg": "Skåne",
    "Lund": "Skåne",
    "Kristianstad": "Skåne",
    "Landskrona": "Skåne",
    "Trelleborg": "Skåne",
    "Höganäs": "Skåne",
    "Arlöv": "Skåne",
    "Bjärnum": "Skåne",
    "Halmstad": "Skåne",
    "Ekeby": "Skåne",
    # Värmland / Västmanland
    "Karlstad": "Värmland",
    "Hammarö": "Värmland",
    "Västerås": "Västmanland",
    "Bålsta": "Västmanland",
    # other
    "Nässjö": "Jönköpings län",
    "Jönköping": "Jönköpings län",
    "Gislaved": "Jönköpings län",
    "Värnamo": "Jönköpings län",
    "Skellefteå": "Västerbotten",
    "Umeå": "Västerbotten",
    "Växjö": "Kronobergs län",
    "Lammhult": "Kronobergs län",
    "Urshult": "Kronobergs län",
    "Horndal": "Gävleborg",
    "Avesta": "Dalarna",
    "Falun": "Dalarna",
    "Blomstermåla": "Kalmar län",
    "Onsala": "Halland",
}

_POSTCODE_PREFIX = re.compile(r"^[\d\s]+")


def _first_line(value: Optional[str]) -> str:
    return (value or "").split("\n", 1)[0].strip()


def region_for_city(city: Optional[str]) -> str:
    """'503 32 Borås' -> 'Västra Götaland'; unknown -> 'Övrigt'."""
    clean = _POSTCODE_PREFIX.sub("", _first_line(city)).strip()
    return CITY_TO_REGION.get(clean, FALLBACK_REGION)


def is_swedish(record: Dict[str, Any]) -> bool:
    country = record.get("country")
    return not country or country == "Sverige"


def to_company(record: Dict[str, Any]) -> Company:
    name = (record.get("name") or "").strip()
    city = _first_line(record.get("city")) or None
    return Company(
        name=name,
        slug=record.get("slug") or slugify(name),
        description=record.get("description")
        or f"{name} - industriföretag specialiserat inom service och reparationer.",
        categories=record.get("categories") or [DEFAULT_CATEGORY],
        services=[],
        service_areas=[],
        region=record.get("region") or region_for_city(city),
        location=f"{city}, Sverige" if city else "Sverige",
        contact_email=record.get("email") or None,
        phone=record.get("phone") or None,
        website=record.get("website") or None,
        address=record.get("address") or None,
        postal_code=_first_line(record.get("postalCode")) or None,
        city=city,
        logo_url=record.get("logo") or None,
    )


def _batches(items: List[Company], size: int) -> Iterable[List[Company]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


def import_records(db: Session, records: List[Dict[str, Any]]) -> int:
    """Returns the number of companies written."""
    candidates = [to_company(r) for r in records if is_swedish(r) and r.get("name")]

    existing = {s for (s,) in db.query(Company.slug).all()}
    fresh: List[Company] = []
    for c in candidates:
        if c.slug in existing:
            continue
        existing.add(c.slug)
        fresh.append(c)

    skipped = len(candidates) - len(fresh)
    if skipped:
        log.info("skipping %d companies whose slug already exists", skipped)

    imported = 0
    for n, batch in enumerate(_batches(fresh, BATCH_SIZE), start=1):
        try:
            db.add_all(batch)
            db.commit()
        except Exception:
            db.rollback()
            log.exception("batch %d failed, continuing with the next one", n)
            continue
        imported += len(batch)
        log.info("imported %d/%d", imported, len(fresh))
    return imported


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Usage: python -m industrin.scripts.import_companies <file.json>")
        return 1

    configure_logging()
    with open(argv[0], encoding="utf-8") as fh:
        records = json.load(fh)

    db = SessionLocal()
    try:
        imported = import_records(db, records)
    finally:
        db.close()
    log.info("import finished: %d companies", imported)
    return 0


if __name__ == "__main__":
    sys.exit(main())
