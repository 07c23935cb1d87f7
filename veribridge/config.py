from __future__ import annotations
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "data" / "config.default.json"


@dataclass
class Config:
    default_jurisdiction: str
    report_path: str
    log_level: str = "INFO"
    locations_path: Optional[str] = None
    api_keys: Tuple[str, ...] = field(default_factory=tuple)


def load_config(path: str | Path | None = None) -> Config:
    """Load the JSON config; ``VERIBRIDGE_CONFIG`` overrides the default location."""
    p = Path(path or os.getenv("VERIBRIDGE_CONFIG") or DEFAULT_CONFIG_PATH)
    raw = json.loads(p.read_text(encoding="utf-8"))
    locations_path = raw.get("locations_path")
    if locations_path and not Path(locations_path).is_absolute():
        locations_path = str(p.parent / locations_path)
    return Config(
        default_jurisdiction=str(raw["default_jurisdiction"]),
        report_path=str(raw["report_path"]),
        log_level=str(raw.get("log_level", "INFO")).upper(),
        locations_path=locations_path,
        api_keys=_api_keys_from_env(),
    )


def _api_keys_from_env() -> Tuple[str, ...]:
    raw = os.getenv("VERIBRIDGE_API_KEYS", "")
    return tuple(k.strip() for k in raw.split(",") if k.strip())
