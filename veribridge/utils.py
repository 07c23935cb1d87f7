from __future__ import annotations
import math
import re
from typing import Iterable, Optional, Pattern, Sequence, Tuple


_WS_RE = re.compile(r"\s+")
_COMMA_RUN_RE = re.compile(r",(?:\s*,)+")
_TRAILING_COMMA_RE = re.compile(r",\s*$")
_LEADING_COMMA_RE = re.compile(r"^\s*,")


def phrase_pattern(phrase: str) -> Pattern[str]:
    """Whole-word, case-insensitive pattern; words of a phrase may be separated by any whitespace."""
    words = [re.escape(w) for w in phrase.split()]
    return re.compile(r"\b" + r"\s+".join(words) + r"\b", re.IGNORECASE)


def compile_phrases(phrases: Iterable[str]) -> Tuple[Tuple[str, Pattern[str]], ...]:
    return tuple((p, phrase_pattern(p)) for p in phrases)


def tidy_text(text: str) -> str:
    """Single spaces, no comma runs, no leading/trailing comma."""
    if not text:
        return ""
    t = _WS_RE.sub(" ", text)
    t = _COMMA_RUN_RE.sub(",", t)
    t = _TRAILING_COMMA_RE.sub("", t)
    t = _LEADING_COMMA_RE.sub("", t)
    return t.strip()


def strip_patterns(text: str, patterns: Sequence[Tuple[str, Pattern[str]]]) -> str:
    """Remove every pattern in order, repeating the pass until nothing more matches."""
    current = text
    while True:
        out = current
        for _, pat in patterns:
            out = pat.sub("", out)
        out = tidy_text(out)
        if out == current:
            return out
        current = out


def contains_any(text: Optional[str], keywords: Iterable[str]) -> bool:
    low = (text or "").lower()
    return bool(low) and any(kw in low for kw in keywords)


def same_text(a: Optional[str], b: Optional[str]) -> bool:
    return (a or "").strip().lower() == (b or "").strip().lower()


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    R = 6371.0
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    a = math.sin(dphi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(dl/2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))
    return R * c

