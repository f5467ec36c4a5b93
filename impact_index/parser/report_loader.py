"""
Report Loader
=============
Reads an analyzer output document (YAML, so plain JSON works too) into a
Report model.

Accepted top-level shapes:
    - a list of rule sets (what the analyzer writes)
    - a mapping with a "rulesets" key
    - an empty document (→ empty Report)

Forward compatible:
    Unknown keys are ignored at every level.

Failure:
    Any problem (unreadable file, YAML syntax, wrong shape, missing
    required field) raises ReportLoadError.  A partial Report is never
    returned.
"""
import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from impact_index.core.errors import ReportLoadError
from impact_index.models.report import Report

logger = logging.getLogger(__name__)


def parse_report(text: str, source: str = "<string>") -> Report:
    """Parse report text.  `source` only labels errors and log lines."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ReportLoadError(source, f"invalid YAML: {exc}") from exc

    if data is None:
        logger.debug("%s: empty document", source)
        return Report()

    if isinstance(data, list):
        rulesets = data
    elif isinstance(data, dict) and "rulesets" in data:
        rulesets = data["rulesets"] or []
    else:
        raise ReportLoadError(
            source,
            f"expected a list of rule sets or a 'rulesets' mapping, got {type(data).__name__}",
        )

    try:
        report = Report.model_validate({"rulesets": rulesets})
    except ValidationError as exc:
        raise ReportLoadError(source, f"{exc.error_count()} validation error(s): {exc}") from exc

    logger.debug(
        "%s: %d rule sets, %d incidents",
        source, len(report.rulesets), report.incident_count(),
    )
    return report


def load_report(path: Union[str, Path]) -> Report:
    """Load a report file from disk."""
    path = Path(path)
    logger.info("Loading report: %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ReportLoadError(str(path), str(exc)) from exc
    return parse_report(text, source=str(path))
