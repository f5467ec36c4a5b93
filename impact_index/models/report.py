"""
Report Model
============
Pydantic models for a parsed static-analysis report.

This is the contract between the report loader and the impact indexer.
Models are frozen and sequence fields are tuples: a Report is read-only
input for the whole lifetime of any index built from it.

Shape:
    Report
      └── rulesets: Tuple[RuleSet, ...]
            ├── violations: Dict[name, Violation]  (indexed)
            ├── insights:   Dict[name, Insight]    (informational, never indexed)
            ├── tags / errors / unmatched
            └── Violation.incidents: Tuple[Incident, ...]

Analyzer output uses its own key names (uri, codeSnip, lineNumber,
variables).  They are accepted as aliases; unknown keys are ignored so
newer analyzer versions still load.
"""
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Incident(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    # An absent location is kept as "" so the indexer can report it.
    location: str = Field(default="", validation_alias=AliasChoices("location", "uri"))
    message: str
    snippet: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("snippet", "codeSnip", "code_snip"),
    )
    line: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("line", "lineNumber", "line_number"),
    )
    attributes: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("attributes", "variables"),
    )


class Violation(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    description: str
    category: Optional[str] = None
    labels: Tuple[str, ...] = ()
    incidents: Tuple[Incident, ...] = ()
    effort: Optional[Union[int, float]] = None

    def stripped(self, incidents: Iterable[Incident] = ()) -> "Violation":
        """Copy with every scalar field kept and only the given incidents."""
        return self.model_copy(update={"incidents": tuple(incidents)})


class Insight(BaseModel):
    """Same shape as a Violation but informational only."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    description: str
    category: Optional[str] = None
    labels: Tuple[str, ...] = ()
    incidents: Tuple[Incident, ...] = ()


class RuleSet(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()
    violations: Dict[str, Violation] = {}
    insights: Dict[str, Insight] = {}
    errors: Dict[str, str] = {}
    unmatched: Tuple[str, ...] = ()

    def stripped(self, violations: Optional[Mapping[str, Violation]] = None) -> "RuleSet":
        """
        Read-only view seeded from this rule set.

        Scalar fields are kept; tags, insights, errors and unmatched are
        cleared and violations holds only the given ones.  The mapping
        fields of the view are MappingProxyType wrappers, so a view cannot
        be changed once it is built.
        """
        return self.model_copy(update={
            "tags": (),
            "violations": MappingProxyType(dict(violations or {})),
            "insights": MappingProxyType({}),
            "errors": MappingProxyType({}),
            "unmatched": (),
        })

    def incident_count(self) -> int:
        return sum(len(v.incidents) for v in self.violations.values())


class Report(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    rulesets: Tuple[RuleSet, ...] = ()

    def incident_count(self) -> int:
        """Total incidents across all violations.  Insights are not counted."""
        return sum(rs.incident_count() for rs in self.rulesets)
