from __future__ import annotations
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .locations import KENYA_LOCATIONS, area_key
from .models import LocationRecord

logger = logging.getLogger(__name__)


def load_location_table(path: str | Path) -> Dict[str, LocationRecord]:
    """
    Read a JSON object of area -> {subCounty, postalCode, roads}.
    Keys are stored lower-cased and trimmed, the same way lookups normalise them.
    """
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"{p}: location table must be a JSON object")
    table: Dict[str, LocationRecord] = {}
    for area, entry in raw.items():
        table[area_key(area)] = _entry_to_record(area, entry)
    logger.debug("Loaded %d location records from %s", len(table), p)
    return table


def build_location_table(path: Optional[str | Path] = None) -> Mapping[str, LocationRecord]:
    """Built-in Kenya table, extended/overridden by the entries of an optional JSON file."""
    if not path:
        return KENYA_LOCATIONS
    merged = dict(KENYA_LOCATIONS)
    merged.update(load_location_table(path))
    return MappingProxyType(merged)


def _entry_to_record(area: str, entry: Any) -> LocationRecord:
    if not isinstance(entry, dict):
        raise ValueError(f"location {area!r}: entry must be an object")
    sub_county = entry.get("subCounty", entry.get("sub_county"))
    postal_code = entry.get("postalCode", entry.get("postal_code"))
    if not sub_county or not postal_code:
        raise ValueError(f"location {area!r}: subCounty and postalCode are required")
    roads = entry.get("roads") or []
    return LocationRecord(sub_county=str(sub_county), postal_code=str(postal_code),
                          roads=tuple(str(r) for r in roads))
