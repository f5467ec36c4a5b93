"""
Unit Tests — Entry Script
==========================
run() returns an exit code instead of raising, for bad reports and for bad
build settings taken from the environment.
"""
from pathlib import Path

import pytest

import main
from impact_index.core import config

SAMPLE = Path(__file__).resolve().parent.parent / "samples" / "demo-output.yaml"


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setattr(config, "MAX_INCIDENTS", 0)
    monkeypatch.setattr(config, "COLLISION_POLICY", "last_wins")
    monkeypatch.setattr(config, "BENCHMARK_ROUNDS", 1)
    return monkeypatch


class TestRun:

    def test_sample_report(self, settings, capsys):
        assert main.run(str(SAMPLE)) == 0
        out = capsys.readouterr().out
        assert "URI: `file:///examples/customers-tomcat-legacy/pom.xml` Impacted rulesets: 1" in out
        assert "single_pass:" in out

    def test_unknown_collision_policy(self, settings, capsys):
        settings.setattr(config, "COLLISION_POLICY", "merge")
        assert main.run(str(SAMPLE)) == 1
        assert capsys.readouterr().out == ""

    def test_negative_ceiling(self, settings):
        settings.setattr(config, "MAX_INCIDENTS", -5)
        assert main.run(str(SAMPLE)) == 1

    def test_oversized_report(self, settings):
        settings.setattr(config, "MAX_INCIDENTS", 2)
        assert main.run(str(SAMPLE)) == 1

    def test_missing_report(self, settings, tmp_path):
        assert main.run(str(tmp_path / "absent.yaml")) == 1
