"""Run one periodic job, e.g. from cron.

Suggested crontab (server local time):

    30 7 * * 1-5  python scripts/run_job.py daily-reminder
    15 8 * * 1-5  python scripts/run_job.py late-arrivals
    0 17 * * 1-5  python scripts/run_job.py clock-out-reminder
    0 18 * * 5    python scripts/run_job.py weekly-summary
    0 10 1 * *    python scripts/run_job.py monthly-report
    0 2 * * *     python scripts/run_job.py clean-notifications
    30 2 * * *    python scripts/run_job.py purge-credentials
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.geo_attendance.geo_attendance.main import build_app_container

JOB_NAMES = (
    "daily-reminder",
    "late-arrivals",
    "clock-out-reminder",
    "weekly-summary",
    "monthly-report",
    "clean-notifications",
    "purge-credentials",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run a periodic attendance job")
    parser.add_argument("job", choices=JOB_NAMES)
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    container = build_app_container(settings)
    count = container.jobs.run(args.job)
    print(f"OK: {args.job} -> {count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
