"""
Open-jobs ingestion from the command line (cron, CI schedules).
Usage: python -m jobtrack.scripts.run_ingestion --once --title "Backend Engineer" --location "Seattle, WA"
"""
import argparse
import json
import logging
import sys
import time

from jobtrack.config import settings
from jobtrack.database import SessionLocal, init_db
from jobtrack.logging_config import setup_logging
from jobtrack.services.open_jobs_ingestion import (
    IngestionConfigError,
    build_ingestion_config,
    run_ingestion,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch open jobs from SerpAPI and upsert them (once or on an interval)")
    parser.add_argument("--once", action="store_true", help="Run once and exit (no schedule)")
    parser.add_argument("--title", action="append", dest="titles", help="Job title to search (repeatable)")
    parser.add_argument("--location", action="append", dest="locations", help="Location to search (repeatable)")
    parser.add_argument("--max-results", type=int, default=None, help="Max results per title (1-100)")
    return parser


def run_once(args: argparse.Namespace) -> dict:
    config = build_ingestion_config(
        settings,
        job_titles=args.titles,
        locations=args.locations,
        max_results_per_title=args.max_results,
    )
    db = SessionLocal()
    try:
        return run_ingestion(db, config).to_dict()
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    init_db()

    if args.once:
        try:
            summary = run_once(args)
        except IngestionConfigError as e:
            logger.error("Ingestion not configured: %s", e)
            print(json.dumps({"ok": False, "error": str(e)}))
            return 1
        print(json.dumps(summary, indent=2, default=str))
        return 0

    interval = settings.ingest_interval_seconds
    while True:
        try:
            summary = run_once(args)
            logger.info("Ingestion result: upserted=%d skipped_no_url=%d", summary["upsert_success"], summary["skipped_no_url"])
        except IngestionConfigError as e:
            logger.error("Ingestion not configured: %s", e)
            return 1
        except Exception as e:
            logger.exception("Ingestion failed: %s", e)
        logger.info("Sleeping %d seconds until next run", interval)
        time.sleep(interval)


if __name__ == "__main__":
    sys.exit(main())
