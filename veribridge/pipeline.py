from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .base_data import build_location_table
from .config import Config
from .jurisdictions import Jurisdiction, get_jurisdiction
from .models import AddressComponents, AuditResult, Severity
from .normalizer import format_address, validate_address
from .report import AuditWorkbook, read_components

logger = logging.getLogger(__name__)


class AddressAuditPipeline:
    """Address audit flow: format -> validate -> jurisdiction checks -> alternate renderings."""

    def __init__(self, cfg: Config):
        self.cfg = cfg
        self.kenya_locations = build_location_table(cfg.locations_path)

    def jurisdiction(self, code: Optional[str] = None) -> Jurisdiction:
        return get_jurisdiction(code or self.cfg.default_jurisdiction, self.kenya_locations)

    def audit(self, components: AddressComponents, jurisdiction: Optional[str] = None) -> AuditResult:
        j = self.jurisdiction(jurisdiction)
        formatted = format_address(components)
        verdict = validate_address(formatted)
        result = AuditResult(
            jurisdiction=j.code,
            formatted=formatted,
            verdict=verdict,
            issues=j.analyze(components),
            options=j.alternate_options(components),
        )
        logger.debug("Audited %r [%s]: %s", formatted, j.code, verdict.severity.value)
        return result

    def run(self, input_path: str | Path, output_path: Optional[str | Path] = None,
            jurisdiction: Optional[str] = None) -> Dict[str, Any]:
        """Audit every row of a components sheet and write the results workbook."""
        rows = read_components(input_path)
        out = Path(output_path or self.cfg.report_path)
        book = AuditWorkbook(out)

        n_invalid = n_warnings = n_issues = 0
        for i, comps in enumerate(rows, start=1):
            result = self.audit(comps, jurisdiction)
            book.add_result(i, comps, result)
            if not result.verdict.is_valid:
                n_invalid += 1
            elif result.verdict.severity == Severity.WARNING:
                n_warnings += 1
            n_issues += len(result.issues or [])
        book.save()

        summary = {
            "n_records": len(rows),
            "n_invalid": n_invalid,
            "n_warnings": n_warnings,
            "n_issues": n_issues,
            "output_path": str(out),
        }
        logger.info("Audit finished: %s", summary)
        return summary
