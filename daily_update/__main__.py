"""Command-line entry: serve the API, or run one update and exit."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from daily_update.calendar_provider import FixedCalendar
from daily_update.config import ConfigError, load_config
from daily_update.logging_setup import configure_logging
from daily_update.notices import NoticeBoard
from daily_update.orchestrator import build_updater, run_guarded
from daily_update.task_parser import parse_iso_date

logger = logging.getLogger("daily_update")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="daily_update")
    parser.add_argument("--once", action="store_true", help="Run one update and exit.")
    parser.add_argument("--today", help="Pretend today is YYYY-MM-DD (with --once).")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def run_once(today_raw: str | None) -> int:
    try:
        config = load_config()
    except ConfigError as exc:
        configure_logging()
        logger.error("%s", exc)
        return 1
    configure_logging(config.log_level)

    calendar = None
    if today_raw:
        today = parse_iso_date(today_raw)
        if today is None:
            logger.error("--today must be a YYYY-MM-DD date, got %r", today_raw)
            return 1
        calendar = FixedCalendar(today)

    notices = NoticeBoard()
    summary = run_guarded(build_updater(config, notices, calendar).run, notices)
    return 0 if summary is not None else 1


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.once:
        return run_once(args.today)
    uvicorn.run("daily_update.main:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
