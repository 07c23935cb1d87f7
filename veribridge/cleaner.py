from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

logger = logging.getLogger(__name__)

LANDMARK_KEYWORDS = ("near", "opposite", "next to", "behind", "along", "off")

ROAD_RE = re.compile(r"([\w\s]+(?:Road|Rd|Avenue|Ave|Street|St|Way|Drive|Dr|Lane))", re.IGNORECASE)
_LANDMARK_RE = re.compile("|".join(re.escape(k) for k in LANDMARK_KEYWORDS), re.IGNORECASE)

KENYAN_CITIES = (
    "Nairobi", "Mombasa", "Kisumu", "Nakuru", "Eldoret", "Thika", "Malindi",
    "Kitale", "Garissa", "Kakamega", "Machakos", "Meru", "Nyeri", "Ruiru",
)


@dataclass
class CleanedAddress:
    original: str
    landmark_keyword: Optional[str] = None
    formatted: Dict[str, str] = field(default_factory=dict)
    complete: str = ""
    components: int = 0
    confidence: float = 0.0


def clean_address(raw: str) -> CleanedAddress:
    """
    Split a one-line Kenyan address ("Kilimani near Yaya Centre, Argwings Kodhek Road, Nairobi")
    into estate, street, landmark and city.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError("raw_string must be a non-empty string")

    text = raw.strip()
    result = CleanedAddress(original=text)
    out = result.formatted
    lower = text.lower()

    landmark = next((kw for kw in LANDMARK_KEYWORDS if kw in lower), None)
    if landmark:
        result.landmark_keyword = landmark
        pieces = re.split(re.escape(landmark), text, maxsplit=1, flags=re.IGNORECASE)
        if len(pieces) > 1:
            tail = pieces[1].strip().split(",")[0].strip()
            if tail:
                out["landmark"] = tail

    m = ROAD_RE.search(text)
    if m:
        out["street"] = m.group(1).strip()

    city = next((c for c in KENYAN_CITIES if c in text), None)
    if city:
        out["city"] = city

    head = text.split(",")[0]
    if landmark:
        head = re.split(re.escape(landmark), head, maxsplit=1, flags=re.IGNORECASE)[0]
    estate = " ".join(_LANDMARK_RE.sub("", head).split())
    if estate and estate not in out.get("street", ""):
        out["estate"] = estate

    out["country"] = "Kenya"

    parts = [
        out.get("estate"),
        out.get("street"),
        f"({landmark} {out['landmark']})" if "landmark" in out else None,
        out.get("city"),
        out.get("country"),
    ]
    result.complete = ", ".join(p for p in parts if p)
    result.components = len(out)
    result.confidence = min(result.components / 5, 1.0)
    logger.debug("Cleaned %r -> %r (confidence %.2f)", text, result.complete, result.confidence)
    return result
