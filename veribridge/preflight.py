"""
Pre-flight verification: scores an address (and optionally the OCR text of
a proof-of-address document and the applicant's identity details) before it
is submitted to a bank or platform.

Each layer starts at 100 and loses points per failed check; blockers make the
layer fail outright, warnings only cost points.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .normalizer import PO_BOX_PATTERNS
from .utils import haversine_km

logger = logging.getLogger(__name__)

VAGUE_LANDMARKS = (
    "near", "opposite", "next to", "behind", "besides", "adjacent to", "close to",
    "around", "off ", "by the", "across from", "in front of", "along ", "towards",
    "stage", "junction", "corner of", "before ",
    # Kenyan shorthand
    "opp ", "nr ", "adj ",
)
INFORMAL_TERMS = (
    "plot", "kwa ", "estate gate", "main road", "slum", "informal settlement", "camp", "squatter",
)
KNOWN_INSTITUTIONS = (
    "equity", "kcb", "cooperative", "coop", "ncba", "absa", "stanbic", "standard chartered",
    "barclays", "diamond trust", "family bank", "kenya power", "kplc", "nairobi water",
    "safaricom", "airtel",
)
# Pre-flight also catches the French "BP" abbreviation
PREFLIGHT_PO_BOX_PATTERNS = PO_BOX_PATTERNS + ("bp ",)
COUNTRY_RE = re.compile(r"kenya|nigeria|ghana|india|philippines|brazil|mexico|uganda|tanzania", re.IGNORECASE)

MIN_ADDRESS_LENGTH = 20
MIN_COMPONENTS = 3
MAX_DOCUMENT_AGE_DAYS = 90
STALE_DOCUMENT_AGE_DAYS = 60
MIN_WORDS = 20
MIN_NAME_SIMILARITY = 0.5
MIN_ADDRESS_WORD_MATCHES = 3
MAX_GPS_DISTANCE_KM = 50

_MONTHS = {m: i for i, m in enumerate(
    ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"), start=1)}
_MON = r"(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*"
_NUMERIC_DATE_RE = re.compile(r"(\d{1,2})[/\-](\d{1,2})[/\-](20\d{2})")
_DAY_MONTH_DATE_RE = re.compile(r"(\d{1,2})\s+" + _MON + r"\s+(20\d{2})", re.IGNORECASE)
_MONTH_DAY_DATE_RE = re.compile(_MON + r"\s+(\d{1,2}),?\s+(20\d{2})", re.IGNORECASE)


@dataclass
class Check:
    name: str
    passed: bool
    found: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LayerResult:
    passed: bool = True
    score: int = 100
    checks: List[Check] = field(default_factory=list)
    blockers: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def finish(self) -> "LayerResult":
        self.passed = not self.blockers
        self.score = max(0, self.score)
        return self


@dataclass
class VerificationReport:
    timestamp: str
    overall_passed: bool
    overall_score: int
    layers: Dict[str, LayerResult]
    total_blockers: List[str]
    total_warnings: List[str]
    recommendation: str


@dataclass
class Badge:
    text: str
    color: str
    icon: str


def _first_keyword(text: str, keywords) -> Optional[str]:
    return next((kw for kw in keywords if kw in text), None)


def verify_syntax(address: Optional[str]) -> LayerResult:
    if not address or not isinstance(address, str):
        return LayerResult(passed=False, score=0, checks=[Check("Address Present", False)],
                           blockers=["No address provided"])

    res = LayerResult()
    lower = address.lower()

    kw = _first_keyword(lower, PREFLIGHT_PO_BOX_PATTERNS)
    res.checks.append(Check("P.O. Box Detection", kw is None, found=kw))
    if kw:
        res.blockers.append(
            f'Contains "{kw}" - Google will instantly reject this. Use a physical street address.')
        res.score -= 50

    kw = _first_keyword(lower, VAGUE_LANDMARKS)
    res.checks.append(Check("Vague Landmark Detection", kw is None, found=kw))
    if kw:
        res.warnings.append(
            f'Contains "{kw.strip()}" - this reads as a landmark, not an address. '
            "Use a building name or street number instead.")
        res.score -= 15

    kw = _first_keyword(lower, INFORMAL_TERMS)
    res.checks.append(Check("Informal Language Detection", kw is None, found=kw))
    if kw:
        res.warnings.append(f'Contains informal term "{kw.strip()}". Consider using formal address components.')
        res.score -= 10

    long_enough = len(address) >= MIN_ADDRESS_LENGTH
    res.checks.append(Check("Address Length", long_enough, details={"length": len(address)}))
    if not long_enough:
        res.warnings.append(
            f"Address too short ({len(address)} chars). Addresses shorter than "
            f"{MIN_ADDRESS_LENGTH} characters may be rejected.")
        res.score -= 10

    count = len([p for p in address.split(",") if p.strip()])
    res.checks.append(Check("Address Components", count >= MIN_COMPONENTS, details={"count": count}))
    if count < MIN_COMPONENTS:
        res.warnings.append(f"Only {count} address components. Include at least: Building + Street + City.")
        res.score -= 15

    has_country = bool(COUNTRY_RE.search(address))
    res.checks.append(Check("Country Included", has_country))
    if not has_country:
        res.warnings.append("Country name not detected. Include your country for international verification.")
        res.score -= 5

    return res.finish()


def extract_dates(text: str, today: date) -> List[date]:
    """Every date in ``text`` that is not in the future; numeric dates are read day-first."""
    found: List[date] = []
    for m in _NUMERIC_DATE_RE.finditer(text):
        a, b, y = int(m.group(1)), int(m.group(2)), int(m.group(3))
        d = _safe_date(y, b, a) or _safe_date(y, a, b)
        if d:
            found.append(d)
    for m in _DAY_MONTH_DATE_RE.finditer(text):
        d = _safe_date(int(m.group(3)), _MONTHS[m.group(2).lower()], int(m.group(1)))
        if d:
            found.append(d)
    for m in _MONTH_DAY_DATE_RE.finditer(text):
        d = _safe_date(int(m.group(3)), _MONTHS[m.group(1).lower()], int(m.group(2)))
        if d:
            found.append(d)
    return [d for d in found if d <= today]


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def verify_document_health(ocr_text: Optional[str], today: Optional[date] = None) -> LayerResult:
    if not ocr_text or not isinstance(ocr_text, str):
        return LayerResult(passed=False, score=0, checks=[Check("OCR Extraction", False)],
                           blockers=["Could not extract text from document"])

    today = today or date.today()
    res = LayerResult()
    lower = ocr_text.lower()

    kw = _first_keyword(lower, PREFLIGHT_PO_BOX_PATTERNS)
    res.checks.append(Check("P.O. Box in Document", kw is None, found=kw))
    if kw:
        res.blockers.append(
            f'Document contains "{kw}" in header! Do not upload this. Ask the issuer to '
            "use your physical address only.")
        res.score -= 50

    dates = extract_dates(ocr_text, today)
    freshness = Check("Document Freshness", True)
    if dates:
        newest = max(dates)
        age = (today - newest).days
        freshness.details = {"days_since_issue": age, "date_found": newest.isoformat()}
        if age > MAX_DOCUMENT_AGE_DAYS:
            freshness.passed = False
            res.blockers.append(
                f"Document is {age} days old. Documents older than {MAX_DOCUMENT_AGE_DAYS} days "
                "are rejected. Get a fresh statement.")
            res.score -= 40
        elif age > STALE_DOCUMENT_AGE_DAYS:
            res.warnings.append(
                f"Document is {age} days old. Consider getting a fresh statement to be safe.")
            res.score -= 10
    else:
        freshness.passed = False
        freshness.details = {"date_found": None}
        res.warnings.append(
            f"Could not detect document date. Ensure it shows a date within the last {MAX_DOCUMENT_AGE_DAYS} days.")
        res.score -= 10
    res.checks.append(freshness)

    inst = _first_keyword(lower, KNOWN_INSTITUTIONS)
    res.checks.append(Check("Institution Detected", inst is not None, found=inst))
    if inst is None:
        res.warnings.append("Could not identify issuing institution. Ensure the bank/utility logo is visible.")
        res.score -= 5

    words = len([w for w in ocr_text.split() if len(w) > 2])
    res.checks.append(Check("Text Quality", words >= MIN_WORDS, details={"word_count": words}))
    if words < MIN_WORDS:
        res.warnings.append(
            "Very little text extracted. Image may be blurry or low resolution. Retake with better lighting.")
        res.score -= 15

    return res.finish()


def _word_set(text: str, pattern: str, min_len: int = 0) -> set:
    cleaned = re.sub(pattern, "", text.lower()).strip()
    return {w for w in cleaned.split() if len(w) > min_len}


_IDENTITY_ALIASES = {
    "documentName": "document_name",
    "profileName": "profile_name",
    "documentAddress": "document_address",
    "inputAddress": "input_address",
    "gpsLocation": "gps_location",
    "addressLocation": "address_location",
}


def _coords(loc: Any) -> Optional[tuple]:
    """(lat, lng) from a ``{"lat": .., "lng": ..}`` mapping, or None when either is missing or not numeric."""
    if not isinstance(loc, Mapping):
        return None
    try:
        return float(loc["lat"]), float(loc["lng"])
    except (KeyError, TypeError, ValueError):
        return None


def verify_identity_consistency(user_data: Mapping[str, Any]) -> LayerResult:
    """Accepts snake_case keys or the web client's camelCase ones (``documentName``, ``gpsLocation``...)."""
    data = {_IDENTITY_ALIASES.get(k, k): v for k, v in user_data.items()}
    res = LayerResult()
    document_name = data.get("document_name")
    profile_name = data.get("profile_name")
    document_address = data.get("document_address")
    input_address = data.get("input_address")
    gps = _coords(data.get("gps_location"))
    addr_loc = _coords(data.get("address_location"))

    if document_name and profile_name:
        doc_words = _word_set(document_name, r"[^a-z\s]")
        profile_words = _word_set(profile_name, r"[^a-z\s]")
        common = doc_words & profile_words
        similarity = len(common) / max(len(doc_words), len(profile_words), 1)
        passed = similarity >= MIN_NAME_SIMILARITY
        res.checks.append(Check("Name Consistency", passed, details={"similarity": similarity}))
        if not passed:
            res.blockers.append(
                f'Name mismatch detected. Document shows "{document_name}" but profile has '
                f'"{profile_name}". Names must match exactly.')
            res.score -= 40

    if document_address and input_address:
        common = _word_set(document_address, r"[^a-z0-9\s]", 2) & _word_set(input_address, r"[^a-z0-9\s]", 2)
        passed = len(common) >= MIN_ADDRESS_WORD_MATCHES
        res.checks.append(Check("Address Consistency", passed, details={"matching_words": len(common)}))
        if not passed:
            res.warnings.append("Document address differs significantly from input address. Ensure they match.")
            res.score -= 20

    if gps and addr_loc:
        distance = haversine_km(gps[0], gps[1], addr_loc[0], addr_loc[1])
        passed = distance <= MAX_GPS_DISTANCE_KM
        res.checks.append(Check("GPS Location Match", passed, details={"distance_km": round(distance)}))
        if not passed:
            res.warnings.append(
                f"You appear to be {round(distance)}km from the address you entered. "
                "This may be flagged as suspicious.")
            res.score -= 15

    return res.finish()


def generate_verification_report(address: Optional[str],
                                 ocr_text: Optional[str] = None,
                                 user_data: Optional[Mapping[str, Any]] = None,
                                 today: Optional[date] = None) -> VerificationReport:
    layers: Dict[str, LayerResult] = {"syntax": verify_syntax(address)}
    if ocr_text:
        layers["document_health"] = verify_document_health(ocr_text, today)
    if user_data:
        layers["identity"] = verify_identity_consistency(user_data)

    blockers: List[str] = []
    warnings: List[str] = []
    for layer in layers.values():
        blockers.extend(layer.blockers)
        warnings.extend(layer.warnings)
    score = round(sum(layer.score for layer in layers.values()) / len(layers))

    if blockers:
        recommendation = "DO NOT SUBMIT. Fix the critical issues above first."
    elif score >= 80:
        recommendation = "READY TO SUBMIT. Your documents look good!"
    elif score >= 60:
        recommendation = "PROCEED WITH CAUTION. Address the warnings for best chance of approval."
    else:
        recommendation = "NOT RECOMMENDED. Too many issues detected."

    report = VerificationReport(
        timestamp=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        overall_passed=all(layer.passed for layer in layers.values()),
        overall_score=score,
        layers=layers,
        total_blockers=blockers,
        total_warnings=warnings,
        recommendation=recommendation,
    )
    logger.info("Pre-flight report: score=%d blockers=%d warnings=%d",
                score, len(blockers), len(warnings))
    return report


def get_verification_badge(score: float) -> Badge:
    if score >= 90:
        return Badge("Excellent", "green", "✓✓")
    if score >= 75:
        return Badge("Good", "blue", "✓")
    if score >= 50:
        return Badge("Fair", "yellow", "⚠")
    return Badge("Poor", "red", "✗")
