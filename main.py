import logging
import sys

from impact_index.core import config
from impact_index.core.errors import ReportLoadError
from impact_index.core.output_formatter import format_benchmark, format_location_summary
from impact_index.parser.report_loader import load_report
from impact_index.services.indexer import build_index
from impact_index.services.variants import benchmark
from impact_index.utils.logging_config import setup_logging

logger = logging.getLogger("main")


def run(report_path: str) -> int:
    try:
        report = load_report(report_path)
    except ReportLoadError as exc:
        logger.error("%s", exc)
        return 1

    # OversizedInputError and RuleSetNameConflictError are ValueErrors too;
    # a bad policy or ceiling from the environment lands here as well.
    try:
        result = build_index(
            report,
            max_incidents=config.MAX_INCIDENTS,
            collision_policy=config.COLLISION_POLICY,
        )
    except ValueError as exc:
        logger.error("Index build rejected: %s", exc)
        return 1

    for diagnostic in result.diagnostics:
        logger.warning("%s: %s (rule set #%d '%s', violation %s, incident %s)",
                       diagnostic.kind, diagnostic.message, diagnostic.ruleset_index,
                       diagnostic.ruleset_name, diagnostic.violation_name,
                       diagnostic.incident_index)

    index = result.index
    logger.info("Impacted locations: %d", len(index))
    for location in index.locations():
        print("\n".join(format_location_summary(index, location)))

    print("\n".join(format_benchmark(benchmark(report, rounds=config.BENCHMARK_ROUNDS))))
    return 0


if __name__ == "__main__":
    setup_logging(level=config.LOG_LEVEL, log_dir=config.LOG_DIR)
    sys.exit(run(sys.argv[1] if len(sys.argv) > 1 else config.REPORT_PATH))
