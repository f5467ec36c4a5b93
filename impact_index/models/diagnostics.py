"""
Index Diagnostic Model
======================
Structured, non-fatal findings produced while building an impact index.

The indexer never logs; it returns these to the caller, who decides
whether to log, print or fail on them.

Fields:
    kind            — MALFORMED_INCIDENT or AMBIGUOUS_RULESET_NAME (core.constants)
    ruleset_index   — 0-based position of the rule set in the report
    ruleset_name    — name of that rule set
    violation_name  — violation key (None for rule-set level findings)
    incident_index  — 0-based position inside the violation's incidents
    location        — affected location, when there is one
    message         — human-readable explanation
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from impact_index.core.constants import ALL_DIAGNOSTIC_KINDS


class IndexDiagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    ruleset_index: int
    ruleset_name: str
    violation_name: Optional[str] = None
    incident_index: Optional[int] = None
    location: Optional[str] = None
    message: str = ""

    @field_validator("kind")
    @classmethod
    def _known_kind(cls, value: str) -> str:
        if value not in ALL_DIAGNOSTIC_KINDS:
            raise ValueError(
                f"Unknown diagnostic kind '{value}'. "
                f"Allowed values: {sorted(ALL_DIAGNOSTIC_KINDS)}"
            )
        return value
