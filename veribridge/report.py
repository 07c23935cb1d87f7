from __future__ import annotations
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from .models import AddressComponents, AddressOption, AuditResult

logger = logging.getLogger(__name__)

COMPONENT_COLUMNS = ["building", "street", "area", "city", "state", "postal_code", "country"]

TABLE_SCHEMAS: Dict[str, List[str]] = {
    "audit_results": [
        "row", "jurisdiction", *COMPONENT_COLUMNS,
        "formatted", "is_valid", "severity", "message", "issue_count",
        "option_a", "option_b", "audited_at",
    ],
    "issues": ["row", "type", "severity", "message", "fix"],
}


def _now_str() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def read_components(path: str | Path) -> List[AddressComponents]:
    """Read an .xlsx/.xls/.csv sheet whose columns name address components (snake_case or camelCase)."""
    p = Path(path)
    if p.suffix.lower() == ".csv":
        df = pd.read_csv(p, dtype=str, keep_default_na=False)
    elif p.suffix.lower() in (".xlsx", ".xls"):
        df = pd.read_excel(p, dtype=str, keep_default_na=False)
    else:
        raise ValueError(f"Unsupported input format: {p.suffix or p.name}")
    df = df.fillna("")
    return [AddressComponents.from_mapping(row.to_dict()) for _, row in df.iterrows()]


def _option_line(opt: AddressOption) -> str:
    lines = opt.lines
    return ", ".join(p for p in (lines.line1, lines.line2, lines.city, lines.postal_code, lines.country) if p)


class AuditWorkbook:
    """Excel workbook holding one sheet per table in TABLE_SCHEMAS; written on save()."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._rows: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLE_SCHEMAS}

    def add_result(self, row: int, components: AddressComponents, result: AuditResult) -> None:
        rec: Dict[str, Any] = {"row": row, "jurisdiction": result.jurisdiction}
        for col in COMPONENT_COLUMNS:
            rec[col] = getattr(components, col)
        rec.update({
            "formatted": result.formatted,
            "is_valid": result.verdict.is_valid,
            "severity": result.verdict.severity.value,
            "message": result.verdict.message,
            "issue_count": len(result.issues) if result.issues is not None else None,
            "option_a": _option_line(result.options.option_a) if result.options else None,
            "option_b": _option_line(result.options.option_b) if result.options else None,
            "audited_at": _now_str(),
        })
        self._rows["audit_results"].append(rec)
        for issue in result.issues or []:
            self._rows["issues"].append({
                "row": row,
                "type": issue.type.value,
                "severity": issue.severity.value,
                "message": issue.message,
                "fix": issue.fix,
            })

    def table(self, name: str) -> pd.DataFrame:
        if name not in TABLE_SCHEMAS:
            raise ValueError(f"Unknown table: {name}")
        return pd.DataFrame(self._rows[name], columns=TABLE_SCHEMAS[name])

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(self.path, engine="openpyxl") as writer:
            for name in TABLE_SCHEMAS:
                self.table(name).to_excel(writer, sheet_name=name, index=False)
        logger.info("Wrote audit workbook %s", self.path)
