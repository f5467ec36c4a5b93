"""
Shared fixtures — report builders and a seeded random report factory.
"""
import random

import pytest

from impact_index.models.report import Incident, Report, RuleSet, Violation


def make_incident(location, message="found", line=None, **attributes):
    return Incident(location=location, message=message, line=line, attributes=attributes)


def make_violation(*locations, description="desc", **kwargs):
    incidents = [
        make_incident(loc, message=f"hit {n}", line=n + 1)
        for n, loc in enumerate(locations)
    ]
    return Violation(description=description, incidents=incidents, **kwargs)


@pytest.fixture
def incident():
    return make_incident


@pytest.fixture
def violation():
    return make_violation


@pytest.fixture
def random_report():
    """
    Returns build(seed) → Report.

    Rule-set names are drawn from a small pool so shared names happen, and
    locations from a small pool so locations are shared across rule sets.
    Some violations have no incidents.  unique_names=True gives every rule
    set its own name.
    """

    def build(seed, max_rulesets=6, max_violations=5, max_incidents=8,
              location_pool=7, name_pool=4, unique_names=False):
        rng = random.Random(seed)
        locations = [f"file:///src/mod_{n}.java" for n in range(location_pool)]
        rulesets = []
        for r in range(rng.randint(0, max_rulesets)):
            violations = {}
            for v in range(rng.randint(0, max_violations)):
                incidents = [
                    Incident(
                        location=rng.choice(locations),
                        message=f"rs{r} v{v} i{i}",
                        line=rng.randint(1, 500),
                        attributes={"seq": i},
                    )
                    for i in range(rng.randint(0, max_incidents))
                ]
                violations[f"rule-{v:03d}"] = Violation(
                    description=f"rule {v}",
                    category=rng.choice([None, "mandatory", "optional"]),
                    labels=[f"label-{rng.randint(0, 3)}" for _ in range(rng.randint(0, 3))],
                    incidents=incidents,
                    effort=rng.choice([None, 1, 3, 5]),
                )
            rulesets.append(RuleSet(
                name=f"ruleset-{r}" if unique_names else f"ruleset-{rng.randint(0, name_pool - 1)}",
                tags=["tag"],
                violations=violations,
            ))
        return Report(rulesets=rulesets)

    return build
