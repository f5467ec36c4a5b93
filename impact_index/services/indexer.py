"""
Impact Indexer
==============
Builds the reverse impact index of an analysis report:

    location → rule-set name → RuleSet view → violation name → Violation view

A view is a stripped copy of the source object (see RuleSet.stripped and
Violation.stripped) that holds only the incidents reported at its location.

CONTRACT:
  build_index(report) -> IndexResult
  - Single forward pass over (rule set, violation, incident) triples.
  - Every incident lands under its own location, rule-set name and
    violation name exactly once, in source order.
  - Locations, rule sets and violations without incidents never appear.
  - Pure: the report is never mutated and nothing is logged.  Problems
    that do not abort the build come back as IndexDiagnostic data.
  - The index is immutable: views are frozen models whose incidents are
    tuples and whose violations are read-only mappings.

Rule-set name collisions:
  Names are not unique across rule sets.  When two rule sets with the same
  name both report incidents at one location, the collision policy decides:
  LAST_WINS (default) replaces the earlier view, FIRST_WINS keeps it, and
  STRICT raises RuleSetNameConflictError.  Under LAST_WINS and FIRST_WINS a
  collision is a merge rule, not an error.
"""
import collections.abc
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from impact_index.core.constants import (
    ALL_COLLISION_POLICIES,
    AMBIGUOUS_RULESET_NAME,
    DEFAULT_COLLISION_POLICY,
    FIRST_WINS,
    LAST_WINS,
    MALFORMED_INCIDENT,
    STRICT,
)
from impact_index.core.errors import OversizedInputError, RuleSetNameConflictError
from impact_index.models.diagnostics import IndexDiagnostic
from impact_index.models.report import Incident, Report, RuleSet, Violation

# location → rule-set name → view
IndexData = Dict[str, Dict[str, RuleSet]]

# Working state while a build is in progress:
#   violation name → (source violation, incidents collected so far)
ViolationBucket = Dict[str, Tuple[Violation, List[Incident]]]
#   rule-set name → (source rule set, its violation bucket)
RuleSetSlots = Dict[str, Tuple[RuleSet, ViolationBucket]]


def _freeze(ruleset: RuleSet, bucket: ViolationBucket) -> RuleSet:
    return ruleset.stripped({
        name: violation.stripped(incidents)
        for name, (violation, incidents) in bucket.items()
    })


# ===================================================================
# Read API
# ===================================================================
class ImpactIndex(collections.abc.Mapping):
    """
    Read-only mapping from location to the rule-set views affecting it.

    Every level is read-only: lookups return MappingProxyType wrappers,
    views are frozen, their violations are MappingProxyType wrappers and
    their incidents are tuples.  Views can therefore be shared between an
    index and the indexes its filters return.  Equality is plain mapping
    equality, so an index with no locations compares equal to {}.
    """

    def __init__(self, data: Optional[IndexData] = None) -> None:
        self._data: IndexData = data if data is not None else {}

    @classmethod
    def from_slots(cls, slots: Dict[str, RuleSetSlots]) -> "ImpactIndex":
        """Freeze the working state of a build into an index."""
        return cls({
            location: {name: _freeze(ruleset, bucket) for name, (ruleset, bucket) in rulesets.items()}
            for location, rulesets in slots.items()
        })

    def __getitem__(self, location: str) -> Mapping[str, RuleSet]:
        return MappingProxyType(self._data[location])

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other) -> bool:
        if isinstance(other, ImpactIndex):
            return self._data == other._data
        return super().__eq__(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"ImpactIndex({len(self._data)} locations, {self.incident_count()} incidents)"

    def locations(self) -> List[str]:
        """Locations in first-seen order."""
        return list(self._data)

    def rulesets_for(self, location: str) -> Mapping[str, RuleSet]:
        """Rule-set views for a location; empty mapping for unknown locations."""
        return MappingProxyType(self._data.get(location, {}))

    def violations_for(self, location: str, ruleset_name: str) -> Mapping[str, Violation]:
        view = self._data.get(location, {}).get(ruleset_name)
        if view is None:
            return MappingProxyType({})
        return view.violations

    def incidents_for(self, location: str, ruleset_name: str,
                      violation_name: str) -> Tuple[Incident, ...]:
        violation = self.violations_for(location, ruleset_name).get(violation_name)
        if violation is None:
            return ()
        return violation.incidents

    def incident_count(self) -> int:
        return sum(
            len(violation.incidents)
            for rulesets in self._data.values()
            for view in rulesets.values()
            for violation in view.violations.values()
        )

    def to_dict(self) -> Dict[str, Dict[str, dict]]:
        """Plain nested dicts, for printing and serialisation."""
        result: Dict[str, Dict[str, dict]] = {}
        for location, rulesets in self._data.items():
            result[location] = {}
            for name, view in rulesets.items():
                data = view.model_dump(exclude={"violations", "insights", "errors"})
                data["violations"] = {
                    violation_name: violation.model_dump()
                    for violation_name, violation in view.violations.items()
                }
                data["insights"] = {}
                data["errors"] = {}
                result[location][name] = data
        return result

    # ---------------------------------------------------------------
    # Post-construction filters requested by the caller
    # ---------------------------------------------------------------
    def filter_rulesets(self, names: Iterable[str]) -> "ImpactIndex":
        """New index keeping only the given rule-set names."""
        wanted = set(names)
        data: IndexData = {}
        for location, rulesets in self._data.items():
            kept = {name: view for name, view in rulesets.items() if name in wanted}
            if kept:
                data[location] = kept
        return ImpactIndex(data)

    def filter_locations(self, predicate: Callable[[str], bool]) -> "ImpactIndex":
        """New index keeping only locations for which predicate(location) is true."""
        return ImpactIndex({
            location: dict(rulesets)
            for location, rulesets in self._data.items()
            if predicate(location)
        })


@dataclass
class IndexResult:
    index: ImpactIndex
    diagnostics: List[IndexDiagnostic] = field(default_factory=list)

    @property
    def malformed(self) -> List[IndexDiagnostic]:
        return [d for d in self.diagnostics if d.kind == MALFORMED_INCIDENT]

    @property
    def ok(self) -> bool:
        """True when no incident was rejected.  Name-collision notices do not count."""
        return not self.malformed


# ===================================================================
# Helpers
# ===================================================================
def count_incidents(report: Report) -> int:
    """Total incident count, used for the size ceiling."""
    return report.incident_count()


def location_names(report: Report) -> Set[str]:
    """
    Distinct locations referenced by any incident.

    Agrees exactly with the key set of build_index(report).index: incidents
    with an empty location are excluded here just as they are skipped there.
    """
    return {
        incident.location
        for ruleset in report.rulesets
        for violation in ruleset.violations.values()
        for incident in violation.incidents
        if incident.location
    }


def _check_policy(collision_policy: str) -> None:
    if collision_policy not in ALL_COLLISION_POLICIES:
        raise ValueError(
            f"collision_policy must be one of {sorted(ALL_COLLISION_POLICIES)}, "
            f"got '{collision_policy}'"
        )


def _check_ceiling(report: Report, max_incidents: Optional[int]) -> None:
    if max_incidents is None or max_incidents == 0:
        return
    if max_incidents < 0:
        raise ValueError(f"max_incidents must be >= 0, got {max_incidents}")
    total = count_incidents(report)
    if total > max_incidents:
        raise OversizedInputError(total, max_incidents)


def _malformed(position: int, ruleset: RuleSet, violation_name: str,
               incident_index: int) -> IndexDiagnostic:
    return IndexDiagnostic(
        kind=MALFORMED_INCIDENT,
        ruleset_index=position,
        ruleset_name=ruleset.name,
        violation_name=violation_name,
        incident_index=incident_index,
        message="incident has no location; excluded from the index",
    )


def _ambiguous(position: int, ruleset: RuleSet, location: str,
               other: int, collision_policy: str) -> IndexDiagnostic:
    if collision_policy == LAST_WINS:
        outcome = f"replaces the view of rule set #{other}"
    else:
        outcome = f"dropped in favour of rule set #{other}"
    return IndexDiagnostic(
        kind=AMBIGUOUS_RULESET_NAME,
        ruleset_index=position,
        ruleset_name=ruleset.name,
        location=location,
        message=f"rule-set name '{ruleset.name}' is shared; {outcome}",
    )


def _collect(bucket: ViolationBucket, violation_name: str, violation: Violation,
             incident: Incident) -> None:
    entry = bucket.get(violation_name)
    if entry is None:
        entry = bucket[violation_name] = (violation, [])
    entry[1].append(incident)


# ===================================================================
# Canonical single-pass build
# ===================================================================
def build_index(report: Report, *, max_incidents: Optional[int] = None,
                collision_policy: str = DEFAULT_COLLISION_POLICY) -> IndexResult:
    """
    Build the reverse impact index in one forward pass.

    Parameters
    ----------
    report : Report
        Parsed report.  Read only.
    max_incidents : int, optional
        Ceiling on the total incident count.  None or 0 disables it;
        negative values are rejected.
    collision_policy : str
        LAST_WINS, FIRST_WINS or STRICT.

    Returns
    -------
    IndexResult
        The index plus any diagnostics (malformed incidents, shared
        rule-set names).

    Raises
    ------
    OversizedInputError
        The report exceeds max_incidents.  Checked before indexing.
    RuleSetNameConflictError
        STRICT policy and two same-named rule sets meet at one location.
    ValueError
        Unknown collision policy or negative ceiling.
    """
    _check_policy(collision_policy)
    _check_ceiling(report, max_incidents)

    slots: Dict[str, RuleSetSlots] = {}
    # (location, rule-set name) → position of the rule set owning the slot
    owners: Dict[Tuple[str, str], int] = {}
    # (location, rule-set name, position) triples already reported as dropped
    dropped: Set[Tuple[str, str, int]] = set()
    diagnostics: List[IndexDiagnostic] = []

    for position, ruleset in enumerate(report.rulesets):
        for violation_name, violation in ruleset.violations.items():
            for incident_index, incident in enumerate(violation.incidents):
                location = incident.location
                if not location:
                    diagnostics.append(
                        _malformed(position, ruleset, violation_name, incident_index)
                    )
                    continue

                rulesets = slots.setdefault(location, {})
                key = (location, ruleset.name)
                owner = owners.get(key)

                if owner is None:
                    owners[key] = position
                    slot = rulesets[ruleset.name] = (ruleset, {})
                elif owner == position:
                    slot = rulesets[ruleset.name]
                elif collision_policy == STRICT:
                    raise RuleSetNameConflictError(ruleset.name, location, owner, position)
                elif collision_policy == FIRST_WINS:
                    if (location, ruleset.name, position) not in dropped:
                        dropped.add((location, ruleset.name, position))
                        diagnostics.append(
                            _ambiguous(position, ruleset, location, owner, collision_policy)
                        )
                    continue
                else:
                    diagnostics.append(
                        _ambiguous(position, ruleset, location, owner, collision_policy)
                    )
                    owners[key] = position
                    slot = rulesets[ruleset.name] = (ruleset, {})

                _collect(slot[1], violation_name, violation, incident)

    return IndexResult(index=ImpactIndex.from_slots(slots), diagnostics=diagnostics)


# ===================================================================
# Partitioned build (one partial per rule set, merged in report order)
# ===================================================================
@dataclass
class PartialIndex:
    position: int
    ruleset_name: str
    # location → frozen view of this rule set at that location
    data: Dict[str, RuleSet] = field(default_factory=dict)
    diagnostics: List[IndexDiagnostic] = field(default_factory=list)


def build_partial(ruleset: RuleSet, position: int) -> PartialIndex:
    """Index a single rule set.  Partials never share incidents."""
    partial = PartialIndex(position=position, ruleset_name=ruleset.name)
    buckets: Dict[str, ViolationBucket] = {}
    for violation_name, violation in ruleset.violations.items():
        for incident_index, incident in enumerate(violation.incidents):
            if not incident.location:
                partial.diagnostics.append(
                    _malformed(position, ruleset, violation_name, incident_index)
                )
                continue
            _collect(buckets.setdefault(incident.location, {}),
                     violation_name, violation, incident)
    partial.data = {
        location: _freeze(ruleset, bucket) for location, bucket in buckets.items()
    }
    return partial


def merge_partials(partials: Iterable[PartialIndex], ruleset_lookup: Mapping[int, RuleSet],
                   collision_policy: str = DEFAULT_COLLISION_POLICY) -> IndexResult:
    """
    Merge partial indexes by key union.

    Partials are applied in rule-set position order, never in the order
    they were produced, so the result does not depend on scheduling.
    """
    _check_policy(collision_policy)
    data: IndexData = {}
    owners: Dict[Tuple[str, str], int] = {}
    diagnostics: List[IndexDiagnostic] = []

    for partial in sorted(partials, key=lambda p: p.position):
        diagnostics.extend(partial.diagnostics)
        ruleset = ruleset_lookup[partial.position]
        for location, view in partial.data.items():
            rulesets = data.setdefault(location, {})
            key = (location, partial.ruleset_name)
            owner = owners.get(key)
            if owner is not None:
                if collision_policy == STRICT:
                    raise RuleSetNameConflictError(
                        partial.ruleset_name, location, owner, partial.position,
                    )
                diagnostics.append(
                    _ambiguous(partial.position, ruleset, location, owner, collision_policy)
                )
                if collision_policy == FIRST_WINS:
                    continue
            owners[key] = partial.position
            rulesets[partial.ruleset_name] = view

    return IndexResult(index=ImpactIndex(data), diagnostics=diagnostics)


def build_index_partitioned(report: Report, *, executor=None,
                            max_incidents: Optional[int] = None,
                            collision_policy: str = DEFAULT_COLLISION_POLICY) -> IndexResult:
    """
    Build the index by partitioning on rule set.

    Parameters
    ----------
    executor : concurrent.futures.Executor, optional
        Used to build partials concurrently.  Without one, partials are
        built in the calling thread.

    Produces the same index as build_index for every collision policy.
    """
    _check_policy(collision_policy)
    _check_ceiling(report, max_incidents)

    positions = list(range(len(report.rulesets)))
    if executor is None:
        partials = [build_partial(report.rulesets[p], p) for p in positions]
    else:
        futures = [executor.submit(build_partial, report.rulesets[p], p) for p in positions]
        partials = [f.result() for f in futures]

    lookup = dict(enumerate(report.rulesets))
    return merge_partials(partials, lookup, collision_policy)
