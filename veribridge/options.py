from __future__ import annotations
from typing import Mapping

from .locations import KENYA_LOCATIONS, lookup_area
from .models import (
    AddressComponents,
    AddressLines,
    AddressOption,
    AlternateOptions,
    LocationRecord,
    StandardAddressFormat,
)

DEFAULT_POSTAL_CODE = "00100"
DEFAULT_CITY = "Nairobi"
PLACEHOLDER_ROAD = "Main Road"
PLACEHOLDER_BUILDING = "Plot 45"
KENYA = "Kenya"


def generate_alternate_options(components: AddressComponents,
                               table: Mapping[str, LocationRecord] = KENYA_LOCATIONS) -> AlternateOptions:
    """Two form-ready renderings of a Kenyan address: road-based (recommended) and building-based."""
    c = components
    rec = lookup_area(c.area, table)

    roads = rec.roads if rec else ()
    postal_code = (rec.postal_code if rec else "") or c.postal_code or DEFAULT_POSTAL_CODE
    line2 = c.area or (rec.sub_county if rec else "")
    road = c.street or (roads[0] if roads else "") or PLACEHOLDER_ROAD
    city = c.city or DEFAULT_CITY

    def lines(line1: str) -> AddressLines:
        return AddressLines(line1=line1, line2=line2, city=city, postal_code=postal_code, country=KENYA)

    option_a = AddressOption(
        label="Precise Format",
        recommended=True,
        description="Best if you live near the main road",
        lines=lines(road),
    )
    option_b = AddressOption(
        label="Building Format",
        recommended=False,
        description="Best if your building has a known name",
        lines=lines(f"{c.building or PLACEHOLDER_BUILDING}, {road}"),
    )
    return AlternateOptions(option_a=option_a, option_b=option_b)


def generate_standard_address_format(components: AddressComponents) -> StandardAddressFormat:
    """Split components into the line layout bank and platform forms ask for."""
    c = components
    line1 = ", ".join(p for p in (c.building, c.street) if p and p.strip())
    parts = [line1, c.area, c.city, c.postal_code, c.country]
    return StandardAddressFormat(
        address_line1=line1,
        address_line2=c.area,
        city_town=c.city,
        postal_code=c.postal_code,
        country=c.country,
        full_address=", ".join(p for p in parts if p),
    )
