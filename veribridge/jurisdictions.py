from __future__ import annotations
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .conflicts import ConflictChecker
from .locations import KENYA_LOCATIONS
from .models import AddressComponents, AlternateOptions, Issue, LocationRecord
from .options import generate_alternate_options


@dataclass(frozen=True)
class Jurisdiction:
    """
    Capabilities available for addresses in one jurisdiction.

    Issue analysis and alternate renderings need a location table; a
    jurisdiction without one (the international default) only formats and
    validates.
    """
    code: str
    name: str
    locations: Optional[Mapping[str, LocationRecord]] = None

    @property
    def supports_issue_analysis(self) -> bool:
        return self.locations is not None

    def analyze(self, components: AddressComponents) -> Optional[List[Issue]]:
        if self.locations is None:
            return None
        return ConflictChecker(self.locations).check(components)

    def alternate_options(self, components: AddressComponents) -> Optional[AlternateOptions]:
        if self.locations is None:
            return None
        return generate_alternate_options(components, self.locations)


DEFAULT_JURISDICTION = Jurisdiction(code="INTL", name="International")
KENYA_JURISDICTION = Jurisdiction(code="KE", name="Kenya", locations=KENYA_LOCATIONS)

_KENYA_CODES = {"ke", "ken", "kenya"}


def get_jurisdiction(code: Optional[str],
                     kenya_locations: Mapping[str, LocationRecord] = KENYA_LOCATIONS) -> Jurisdiction:
    """Kenya for ``KE``/``KEN``/``Kenya`` (any case), the international default otherwise."""
    if (code or "").strip().lower() in _KENYA_CODES:
        if kenya_locations is KENYA_LOCATIONS:
            return KENYA_JURISDICTION
        return Jurisdiction(code="KE", name="Kenya", locations=kenya_locations)
    return DEFAULT_JURISDICTION
