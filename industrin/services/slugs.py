# industrin/services/slugs.py
from __future__ import annotations

import re
import unicodedata
from typing import Callable

# Swedish letters first, the rest goes through NFKD
_TRANSLITERATE = str.maketrans({"å": "a", "ä": "a", "ö": "o", "æ": "ae", "ø": "o", "ß": "ss"})
_INVALID = re.compile(r"[^a-z0-9\s-]")
_DASHES = re.compile(r"[\s-]+")

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
MAX_SLUG_LENGTH = 200


def slugify(name: str) -> str:
    """
    'Rusty Support AB' -> 'rusty-support-ab', 'Göteborgs Hydraulik & Co' -> 'goteborgs-hydraulik-co'
    """
    text = (name or "").strip().lower().translate(_TRANSLITERATE)
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = _INVALID.sub("", text)
    text = _DASHES.sub("-", text).strip("-")
    text = text[:MAX_SLUG_LENGTH].rstrip("-")
    return text or "company"


def is_valid_slug(slug: str) -> bool:
    return bool(slug) and len(slug) <= MAX_SLUG_LENGTH and bool(SLUG_PATTERN.match(slug))


def unique_slug(base: str, exists: Callable[[str], bool]) -> str:
    """base, base-2, base-3, ... first one for which exists() is False."""
    if not exists(base):
        return base
    n = 2
    while exists(f"{base}-{n}"):
        n += 1
    return f"{base}-{n}"
