"""CLI entrypoint for scheduled and manual noticeboard scrapes."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from config import get_settings
from models import Section
from orchestrator.scheduler import ScraperScheduler
from storage import SnapshotStore
from utils.exceptions import ConfigurationError
from utils.logger import setup_logging


logger = logging.getLogger(__name__)


def _store(settings) -> SnapshotStore:
    return SnapshotStore(
        settings.storage.data_dir,
        stale_minutes=settings.storage.stale_minutes,
        unhealthy_minutes=settings.storage.unhealthy_minutes,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Club noticeboard scraper")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Scrape every section once")
    run.add_argument("--force", action="store_true", help="Ignore the schedule windows")

    sub.add_parser("schedule", help="Keep running on the configured schedule")
    sub.add_parser("status", help="Show snapshot ages")

    serve = sub.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=3000)

    args = parser.parse_args()
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(2)

    if args.command == "run":
        scheduler = ScraperScheduler(settings, store=_store(settings))
        result = asyncio.run(scheduler.run_scraper(force=args.force))
        print(json.dumps(result.to_status(), ensure_ascii=False, indent=2))
        # Only a scheduled invocation turns an exhausted retry budget into a failing exit code
        if not result.success and not result.skipped:
            sys.exit(1)
        return

    if args.command == "schedule":
        scheduler = ScraperScheduler(settings, store=_store(settings))
        try:
            asyncio.run(scheduler.run_forever())
        except KeyboardInterrupt:
            logger.info("Scheduler stopped")
        return

    if args.command == "status":
        store = _store(settings)
        payload = {section.value: store.data_age(section) for section in Section}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    if args.command == "serve":
        import uvicorn

        from webapp.runtime import configure

        configure(settings)
        uvicorn.run("webapp.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
