"""
Address cleaning and validation for international KYC submissions.

Every rewrite here removes text, never inserts it, so running
``format_address`` on its own output changes nothing further.
"""
from __future__ import annotations
import logging
import re
from typing import List, Optional

from .models import AddressComponents, Severity, ValidationVerdict
from .utils import compile_phrases, same_text, strip_patterns, tidy_text

logger = logging.getLogger(__name__)

COLLOQUIALISMS = (
    # English
    "opposite",
    "near",
    "behind",
    "next to",
    "besides",
    "adjacent to",
    "close to",
    "around",
    "off",
    "by the",
    "across from",
    "in front of",
    # Spanish
    "cerca de",
    "frente a",
    "al lado de",
    "detrás de",
    # Portuguese
    "perto de",
    "em frente",
    "ao lado de",
    # French
    "près de",
    "en face de",
    "à côté de",
)

# Landmarks that global platforms reject as part of a building name
PROBLEMATIC_KEYWORDS = (
    "mosque",
    "church",
    "temple",
    "shrine",
    "cathedral",
    "westside",
    "eastside",
    "northside",
    "southside",
)

PO_BOX_PATTERNS = (
    "p.o. box",
    "p.o box",
    "po box",
    "pobox",
    "p o box",
    "p/o box",
    "postal box",
    "private bag",
    "apartado",
    "casilla",
    "caixa postal",
    "boîte postale",
    "postfach",
)

MIN_SEGMENTS = 3

_COLLOQUIAL_RES = compile_phrases(COLLOQUIALISMS)
_PROBLEMATIC_RES = compile_phrases(PROBLEMATIC_KEYWORDS)
_STATE_SUFFIXES = ("", " county", " state", " province")

MSG_EMPTY = "Address cannot be empty"
MSG_PO_BOX = "ADDRESS REJECTED: Contains P.O. Box. Global platforms will reject this."
MSG_INCOMPLETE = "Address seems incomplete. Add more details for better verification."
MSG_OK = "Address format looks good for international platforms!"


def remove_informal_references(text: Optional[str]) -> str:
    if not text:
        return ""
    return strip_patterns(text.strip(), _COLLOQUIAL_RES)


def strip_problematic_keywords(building: str) -> str:
    cleaned = strip_patterns(building, _PROBLEMATIC_RES)
    if cleaned.lower() == "building":
        return ""
    return cleaned


def is_generic_area(area: str) -> bool:
    return len(area.split()) == 1 or len(area) < 4


def format_address(components: AddressComponents) -> str:
    """
    Render components as ``building, street, area, city, state, postal code, country``.

    Colloquialisms are stripped from the free-text fields, religious and
    directional landmarks from the building, and parts that repeat
    information (state equal to city, a one-word area behind a street,
    "Kenya" inside the state) are dropped.
    """
    c = components
    building = remove_informal_references(c.building)
    street = remove_informal_references(c.street)
    area = remove_informal_references(c.area)
    city = remove_informal_references(c.city)
    state = c.state.strip()
    postal_code = c.postal_code.strip()
    country = c.country.strip()

    if building:
        building = strip_problematic_keywords(building)

    if state and city and any(same_text(state, city + suffix) for suffix in _STATE_SUFFIXES):
        logger.debug("Dropping state %r: repeats city %r", state, city)
        state = ""

    if street and area and is_generic_area(area):
        logger.debug("Dropping generic area %r in favour of street %r", area, street)
        area = ""

    if same_text(country, "kenya") and "kenya" in state.lower():
        state = tidy_text(re.sub("kenya", "", state, flags=re.IGNORECASE))

    parts = [p for p in (building, street, area, city, state, postal_code, country) if p]
    deduped: List[str] = []
    for part in parts:
        if deduped and same_text(deduped[-1], part):
            continue
        deduped.append(part)
    return ", ".join(deduped)


def validate_address(address: Optional[str]) -> ValidationVerdict:
    if not address or not address.strip():
        return ValidationVerdict(False, Severity.ERROR, MSG_EMPTY)

    lower = address.lower()
    for pattern in PO_BOX_PATTERNS:
        if pattern in lower:
            return ValidationVerdict(False, Severity.ERROR, MSG_PO_BOX)

    phrase = next((p for p in COLLOQUIALISMS if p in lower), None)
    if phrase:
        return ValidationVerdict(
            True, Severity.WARNING,
            f'WARNING: Address contains "{phrase}". Consider removing it.',
        )

    segments = [s for s in address.split(",") if s.strip()]
    if len(segments) < MIN_SEGMENTS:
        return ValidationVerdict(True, Severity.WARNING, MSG_INCOMPLETE)

    return ValidationVerdict(True, Severity.SUCCESS, MSG_OK)
