"""
Algorithm Variants
==================
Alternate formulations of the impact index, kept as cross-checked
oracles for the single-pass build and for timing comparisons.

    nested       — for each location, rescan every rule set, violation and
                   incident.  O(locations × incidents).
    prefiltered  — pre-compute the location set of each violation, then for
                   each location scan only the violations that mention it.
    single_pass  — services.indexer.build_index (the production build).

Both variants use LAST_WINS for shared rule-set names and skip incidents
without a location, so on any report they produce the same index as
build_index with its default policy.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Set

from impact_index.models.report import Report, RuleSet, Violation
from impact_index.services.indexer import ImpactIndex, IndexData, build_index, location_names

logger = logging.getLogger(__name__)


def _ordered_locations(report: Report) -> List[str]:
    seen: Dict[str, None] = {}
    for ruleset in report.rulesets:
        for violation in ruleset.violations.values():
            for incident in violation.incidents:
                if incident.location:
                    seen.setdefault(incident.location, None)
    return list(seen)


def build_index_nested(report: Report) -> ImpactIndex:
    data: IndexData = {}
    for location in _ordered_locations(report):
        rulesets: Dict[str, RuleSet] = {}
        for ruleset in report.rulesets:
            violations: Dict[str, Violation] = {}
            for violation_name, violation in ruleset.violations.items():
                matching = [i for i in violation.incidents if i.location == location]
                if matching:
                    violations[violation_name] = violation.stripped(matching)
            if violations:
                rulesets[ruleset.name] = ruleset.stripped(violations)
        data[location] = rulesets
    return ImpactIndex(data)


def build_index_prefiltered(report: Report) -> ImpactIndex:
    # (rule set position, violation name) → locations mentioned by that violation
    mentions: Dict[tuple, Set[str]] = {
        (position, violation_name): {i.location for i in violation.incidents if i.location}
        for position, ruleset in enumerate(report.rulesets)
        for violation_name, violation in ruleset.violations.items()
    }

    data: IndexData = {}
    for location in _ordered_locations(report):
        rulesets: Dict[str, RuleSet] = {}
        for position, ruleset in enumerate(report.rulesets):
            violations: Dict[str, Violation] = {}
            for violation_name, violation in ruleset.violations.items():
                if location in mentions[(position, violation_name)]:
                    violations[violation_name] = violation.stripped(
                        i for i in violation.incidents if i.location == location
                    )
            if violations:
                rulesets[ruleset.name] = ruleset.stripped(violations)
        data[location] = rulesets
    return ImpactIndex(data)


def _single_pass(report: Report) -> ImpactIndex:
    return build_index(report).index


VARIANTS: Dict[str, Callable[[Report], ImpactIndex]] = {
    "single_pass": _single_pass,
    "prefiltered": build_index_prefiltered,
    "nested": build_index_nested,
}


@dataclass
class VariantTiming:
    """Best-of-N wall time for one variant."""
    name: str
    best_seconds: float
    location_count: int
    incident_count: int


def benchmark(report: Report, rounds: int = 3) -> List[VariantTiming]:
    """
    Time every variant on the same report.

    Each variant runs `rounds` times; the fastest run is kept.  Location
    and incident counts are returned so callers can confirm agreement.
    """
    if rounds < 1:
        raise ValueError(f"rounds must be >= 1, got {rounds}")

    expected = len(location_names(report))
    timings: List[VariantTiming] = []
    for name, variant in VARIANTS.items():
        best = float("inf")
        index = ImpactIndex()
        for _ in range(rounds):
            start = time.perf_counter()
            index = variant(report)
            best = min(best, time.perf_counter() - start)

        if len(index) != expected:
            logger.warning(
                "%s: %d locations, expected %d", name, len(index), expected,
            )
        logger.info("%s: %d locations in %.6fs", name, len(index), best)
        timings.append(VariantTiming(
            name=name,
            best_seconds=best,
            location_count=len(index),
            incident_count=index.incident_count(),
        ))
    return timings
