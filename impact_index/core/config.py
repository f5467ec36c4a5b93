"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    IMPACT_REPORT_PATH       — Report loaded by main.py (default: samples/demo-output.yaml)
    IMPACT_MAX_INCIDENTS     — Incident ceiling for a single build, 0 disables (default: 0)
    IMPACT_COLLISION_POLICY  — last_wins | first_wins | strict (default: last_wins)
    IMPACT_BENCHMARK_ROUNDS  — Timing rounds per algorithm variant (default: 3)
    IMPACT_LOG_LEVEL         — Root log level name (default: INFO)
    IMPACT_LOG_DIR           — Directory for the dated log file (default: logs)

Ceiling:
    The ceiling is checked against the total incident count before any
    indexing starts.  An oversized report is rejected as a whole; a
    partially built index is never returned.
"""
import os
from dotenv import load_dotenv

from impact_index.core.constants import DEFAULT_COLLISION_POLICY

load_dotenv()

REPORT_PATH = os.getenv("IMPACT_REPORT_PATH", "samples/demo-output.yaml")
MAX_INCIDENTS = int(os.getenv("IMPACT_MAX_INCIDENTS", 0))
COLLISION_POLICY = os.getenv("IMPACT_COLLISION_POLICY", DEFAULT_COLLISION_POLICY)
BENCHMARK_ROUNDS = int(os.getenv("IMPACT_BENCHMARK_ROUNDS", 3))

LOG_LEVEL = os.getenv("IMPACT_LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("IMPACT_LOG_DIR", "logs")
