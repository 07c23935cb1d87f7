from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"


class IssueType(str, Enum):
    CONFLICT = "CONFLICT"
    FORBIDDEN_KEYWORD = "FORBIDDEN_KEYWORD"
    VAGUE_TERM = "VAGUE_TERM"
    REDUNDANCY = "REDUNDANCY"
    WRONG_POSTAL_CODE = "WRONG_POSTAL_CODE"


# camelCase keys sent by the web client
_COMPONENT_ALIASES = {
    "postalCode": "postal_code",
    "postcode": "postal_code",
    "countryName": "country",
}


@dataclass
class AddressComponents:
    building: str = ""
    street: str = ""
    area: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""

    def __post_init__(self) -> None:
        for f in fields(self):
            val = getattr(self, f.name)
            setattr(self, f.name, "" if val is None else str(val))

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "AddressComponents":
        """Build components from a loose mapping; unknown keys are ignored, missing ones are empty."""
        names = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, val in (data or {}).items():
            name = _COMPONENT_ALIASES.get(key, key)
            if name in names and val is not None:
                kwargs[name] = val
        return cls(**kwargs)


@dataclass(frozen=True)
class LocationRecord:
    sub_county: str
    postal_code: str
    roads: Tuple[str, ...] = ()


@dataclass
class ValidationVerdict:
    is_valid: bool
    severity: Severity
    message: str


@dataclass
class Issue:
    type: IssueType
    severity: Severity
    message: str
    fix: str


@dataclass
class LocationConflict:
    has_conflict: bool
    correct_postal_code: str
    suggested_roads: Tuple[str, ...]
    actual_sub_county: Optional[str] = None
    declared_sub_county: Optional[str] = None


@dataclass
class AddressLines:
    line1: str
    line2: str
    city: str
    postal_code: str
    country: str


@dataclass
class AddressOption:
    label: str
    recommended: bool
    description: str
    lines: AddressLines


@dataclass
class AlternateOptions:
    option_a: AddressOption
    option_b: AddressOption


@dataclass
class StandardAddressFormat:
    address_line1: str
    address_line2: str
    city_town: str
    postal_code: str
    country: str
    full_address: str


@dataclass
class AuditResult:
    jurisdiction: str
    formatted: str
    verdict: ValidationVerdict
    issues: Optional[List[Issue]] = None
    options: Optional[AlternateOptions] = None
