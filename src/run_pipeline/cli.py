"""CLI for running the pipeline and inspecting its state."""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import print_json, setup_logging
from run_pipeline.config import load_config
from run_pipeline.orchestrator import run_once
from store.connection import get_engine, get_session
from store.health import get_last_run, get_top_failing_sources
from store.models import init_db
from store.publications_repo import reset_fb_status

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="newsdesk")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="Run the pipeline once.")
    subparsers.add_parser("init-db", help="Create missing tables.")

    status = subparsers.add_parser("status", help="Show the last run and failing sources.")
    status.add_argument("--hours", type=int, default=24)

    reset = subparsers.add_parser(
        "reset-crosspost", help="Make a story eligible for Facebook posting again."
    )
    reset.add_argument("story_id")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    load_dotenv()
    config = load_config()

    if args.command == "init-db":
        init_db(get_engine(config.database_url))
        logger.info("Database initialized")
        return 0

    if args.command == "run":
        counters = run_once(config)
        if counters is None:
            logger.info("Another run is in progress; nothing to do")
            return 0
        print_json(counters.to_dict())
        return 0

    with get_session(config.database_url) as session:
        if args.command == "status":
            print_json({
                "last_run": get_last_run(session),
                "top_failing_sources": get_top_failing_sources(session, args.hours),
            })
            return 0

        if args.command == "reset-crosspost":
            if reset_fb_status(session, args.story_id):
                logger.info("Reset Facebook status for %s", args.story_id)
                return 0
            logger.warning("No resettable publication for %s", args.story_id)
            return 1

    return 2


if __name__ == "__main__":
    sys.exit(main())
