"""
Unit Tests — Algorithm Variants
================================
The nested and prefiltered formulations are oracles for the single-pass
build: on every report they must produce an identical index.
"""
import pytest

from impact_index.models.report import Incident, Report, RuleSet, Violation
from impact_index.services.indexer import build_index
from impact_index.services.variants import (
    VARIANTS,
    VariantTiming,
    benchmark,
    build_index_nested,
    build_index_prefiltered,
)

U1 = "file:///app/pom.xml"
U2 = "file:///app/src/Main.java"


class TestOracleAgreement:

    @pytest.mark.parametrize("seed", range(25))
    def test_nested_matches_single_pass(self, random_report, seed):
        report = random_report(seed)
        assert build_index_nested(report) == build_index(report).index

    @pytest.mark.parametrize("seed", range(25))
    def test_prefiltered_matches_single_pass(self, random_report, seed):
        report = random_report(seed)
        assert build_index_prefiltered(report) == build_index(report).index

    def test_empty_report(self):
        assert build_index_nested(Report()) == {}
        assert build_index_prefiltered(Report()) == {}

    def test_skip_empty_locations(self):
        report = Report(rulesets=[RuleSet(name="rs", violations={
            "v": Violation(description="d", incidents=[
                Incident(location="", message="bad"),
                Incident(location=U1, message="good"),
            ]),
        })])
        for variant in (build_index_nested, build_index_prefiltered):
            assert variant(report).locations() == [U1]

    def test_shared_names_last_wins(self, violation):
        report = Report(rulesets=[
            RuleSet(name="dup", description="first", violations={"a": violation(U1, U2)}),
            RuleSet(name="dup", description="second", violations={"b": violation(U1)}),
        ])
        for variant in (build_index_nested, build_index_prefiltered):
            index = variant(report)
            assert index[U1]["dup"].description == "second"
            assert index[U2]["dup"].description == "first"


class TestBenchmark:

    def test_times_every_variant(self, random_report):
        report = random_report(3, unique_names=True)
        timings = benchmark(report, rounds=2)
        assert [t.name for t in timings] == list(VARIANTS)
        assert all(isinstance(t, VariantTiming) for t in timings)
        assert all(t.best_seconds >= 0 for t in timings)

    def test_variants_agree_on_counts(self, random_report):
        report = random_report(11, unique_names=True)
        timings = benchmark(report, rounds=1)
        assert len({t.location_count for t in timings}) == 1
        assert {t.incident_count for t in timings} == {report.incident_count()}

    def test_rejects_zero_rounds(self):
        with pytest.raises(ValueError):
            benchmark(Report(), rounds=0)
