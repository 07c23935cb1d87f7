from __future__ import annotations
import logging
from typing import List, Mapping, Optional

from .locations import KENYA_LOCATIONS, lookup_area
from .models import AddressComponents, Issue, IssueType, LocationConflict, LocationRecord, Severity
from .utils import contains_any, same_text

logger = logging.getLogger(__name__)

RELIGIOUS_KEYWORDS = ("mosque", "church", "temple", "cathedral", "shrine")
VAGUE_TERMS = ("westside", "eastside", "northside", "southside", "near", "opposite")


def detect_location_conflict(area: Optional[str], sub_county: Optional[str],
                             table: Mapping[str, LocationRecord] = KENYA_LOCATIONS) -> Optional[LocationConflict]:
    """None when either value is missing or the area is unknown."""
    if not area or not sub_county:
        return None
    rec = lookup_area(area, table)
    if rec is None:
        return None
    if not same_text(rec.sub_county, sub_county):
        return LocationConflict(
            has_conflict=True,
            correct_postal_code=rec.postal_code,
            suggested_roads=rec.roads,
            actual_sub_county=rec.sub_county,
            declared_sub_county=sub_county,
        )
    return LocationConflict(has_conflict=False, correct_postal_code=rec.postal_code,
                            suggested_roads=rec.roads)


class ConflictChecker:
    """Kenya address checks; each check adds at most one issue, in a fixed order."""

    def __init__(self, table: Mapping[str, LocationRecord] = KENYA_LOCATIONS):
        self.table = table

    def check(self, components: AddressComponents) -> List[Issue]:
        c = components
        issues: List[Issue] = []

        # 1: area belongs to a different sub-county than the one declared
        conflict = detect_location_conflict(c.area, c.state, self.table)
        if conflict and conflict.has_conflict:
            issues.append(Issue(
                IssueType.CONFLICT, Severity.ERROR,
                f'You said "{c.area}" (which is in {conflict.actual_sub_county}) but listed '
                f'"{conflict.declared_sub_county}". Google will reject this mismatch.',
                f'Change sub-county to "{conflict.actual_sub_county}" and postal code to '
                f'"{conflict.correct_postal_code}"',
            ))

        # 2: religious landmark in the building name
        if contains_any(c.building, RELIGIOUS_KEYWORDS):
            issues.append(Issue(
                IssueType.FORBIDDEN_KEYWORD, Severity.ERROR,
                'Building name contains religious landmark. Google prefers "Plot" or "Road".',
                'Remove the religious reference or replace with "Building" or a plot number',
            ))

        # 3: vague directional terms
        if contains_any(c.building, VAGUE_TERMS) or contains_any(c.area, VAGUE_TERMS):
            issues.append(Issue(
                IssueType.VAGUE_TERM, Severity.WARNING,
                "Address contains vague directional term. It confuses GPS.",
                'Remove vague terms like "westside" or "near"',
            ))

        # 4: state repeats the city
        if c.city and c.state and c.city.lower() in c.state.lower():
            issues.append(Issue(
                IssueType.REDUNDANCY, Severity.WARNING,
                f'"{c.city}, {c.state}" is repetitive.',
                f'Remove "{c.state}" and keep only "{c.city}"',
            ))

        # 5: postal code does not belong to the area
        rec = lookup_area(c.area, self.table)
        if rec and c.postal_code.strip() != rec.postal_code:
            issues.append(Issue(
                IssueType.WRONG_POSTAL_CODE, Severity.WARNING,
                f"Postal code {c.postal_code} is incorrect for {c.area}. Should be {rec.postal_code}.",
                f"Change postal code to {rec.postal_code}",
            ))

        if issues:
            logger.debug("Address issues: %s", [i.type.value for i in issues])
        return issues


def analyze_address_issues(components: AddressComponents,
                           table: Mapping[str, LocationRecord] = KENYA_LOCATIONS) -> List[Issue]:
    return ConflictChecker(table).check(components)
