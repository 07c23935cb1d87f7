"""Kenya location table: area -> sub-county, postal code and the main roads serving it."""
from __future__ import annotations
from types import MappingProxyType
from typing import Mapping, Optional

from .models import LocationRecord


def _rec(sub_county: str, postal_code: str, *roads: str) -> LocationRecord:
    return LocationRecord(sub_county=sub_county, postal_code=postal_code, roads=tuple(roads))


KENYA_LOCATIONS: Mapping[str, LocationRecord] = MappingProxyType({
    # Kibra
    "makina": _rec("Kibra", "00504", "Kibera Drive", "Sheikh Mahmoud Road"),
    "kibera": _rec("Kibra", "00504", "Kibera Drive", "Mbagathi Way"),
    "sarang'ombe": _rec("Kibra", "00504", "Kibera Drive"),
    "laini saba": _rec("Kibra", "00504", "Mbagathi Way"),
    # Starehe
    "cbd": _rec("Starehe", "00100", "Kenyatta Avenue", "Moi Avenue"),
    "pangani": _rec("Starehe", "00610", "Jogoo Road", "Juja Road"),
    "ngara": _rec("Starehe", "00106", "Ngara Road", "Limuru Road"),
    # Westlands
    "westlands": _rec("Westlands", "00800", "Waiyaki Way", "Parklands Road"),
    "parklands": _rec("Westlands", "00623", "Parklands Road", "Limuru Road"),
    # Kasarani
    "kasarani": _rec("Kasarani", "00618", "Thika Road", "Kasarani Road"),
    "ruaraka": _rec("Kasarani", "00618", "Thika Road", "Outering Road"),
    # Embakasi
    "embakasi": _rec("Embakasi", "00200", "Mombasa Road", "Jogoo Road"),
    "umoja": _rec("Embakasi", "00103", "Kangundo Road", "Outer Ring Road"),
})


def area_key(area: Optional[str]) -> str:
    return (area or "").strip().lower()


def lookup_area(area: Optional[str],
                table: Mapping[str, LocationRecord] = KENYA_LOCATIONS) -> Optional[LocationRecord]:
    key = area_key(area)
    if not key:
        return None
    return table.get(key)
