"""
Output Formatter
================
Console lines for an impact index and for variant timings.

DETERMINISM CONTRACT:
  - Never reads environment variables.
  - Rule sets and violations are listed in sorted name order.
  - Given the same index, always returns the same lines.

Location summary format (one block per location):
    URI: `{location}` Impacted rulesets: {n}
    Ruleset: `{name}` # Violations: {n}
    Violation: {violation_name}
    \tdescription: {description}
    \t# incidents: {n}
"""
from typing import List, Sequence

from impact_index.services.indexer import ImpactIndex
from impact_index.services.variants import VariantTiming


def validate_location(location: str) -> None:
    """Raises ValueError if location is empty or not a string."""
    if not isinstance(location, str):
        raise TypeError(f"location must be str, got {type(location).__name__}")
    if not location.strip():
        raise ValueError("location must not be empty or whitespace-only")


def format_location_summary(index: ImpactIndex, location: str) -> List[str]:
    """
    Summarise the rule sets and violations affecting one location.

    Raises
    ------
    KeyError
        If the location is not in the index.
    """
    validate_location(location)
    rulesets = index[location]

    lines = [f"URI: `{location}` Impacted rulesets: {len(rulesets)}"]
    for name in sorted(rulesets):
        view = rulesets[name]
        lines.append(f"Ruleset: `{name}` # Violations: {len(view.violations)}")
        for violation_name in sorted(view.violations):
            violation = view.violations[violation_name]
            lines.append(f"Violation: {violation_name}")
            lines.append(f"\tdescription: {violation.description}")
            lines.append(f"\t# incidents: {len(violation.incidents)}")
    return lines


def format_benchmark(timings: Sequence[VariantTiming]) -> List[str]:
    """One line per variant, fastest first."""
    return [
        f"{t.name}: {t.location_count} locations, "
        f"{t.incident_count} incidents, {t.best_seconds * 1000:.3f}ms"
        for t in sorted(timings, key=lambda t: (t.best_seconds, t.name))
    ]
