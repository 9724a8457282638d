"""
Background scheduler that runs the open-jobs ingestion every
`INGEST_INTERVAL_SECONDS`. Start/stop via API; state is in-process only
(resets on server restart).

Scheduled runs and manual triggers share one run lock, so two batches never
overlap inside a single process.
"""
import logging
import threading
import time
from datetime import datetime, timezone, timedelta

from jobtrack.config import settings
from jobtrack.database import SessionLocal, init_db
from jobtrack.services.open_jobs_ingestion import build_ingestion_config, run_ingestion

logger = logging.getLogger(__name__)

INTERVAL_SECONDS = settings.ingest_interval_seconds

_lock = threading.Lock()
_run_lock = threading.Lock()
_running = False
_thread: threading.Thread | None = None
_last_run: datetime | None = None
_next_run: datetime | None = None
_last_summary: dict | None = None


class IngestionAlreadyRunning(RuntimeError):
    pass


def run_locked(db, config) -> dict:
    """Run one ingestion batch under the process-wide run lock."""
    global _last_summary
    if not _run_lock.acquire(blocking=False):
        raise IngestionAlreadyRunning("An ingestion run is already in progress")
    try:
        summary = run_ingestion(db, config).to_dict()
    finally:
        _run_lock.release()
    with _lock:
        _last_summary = summary
    return summary


def _run_ingestion_once() -> dict:
    """Run ingestion once with the configured defaults. Uses its own DB session."""
    init_db()
    db = SessionLocal()
    try:
        summary = run_locked(db, build_ingestion_config(settings))
        logger.info(
            "Scheduled ingestion run: upserted=%d skipped_no_url=%d errors=%d",
            summary["upsert_success"], summary["skipped_no_url"],
            len(summary["serpapi_errors"]) + len(summary["upsert_errors"]),
        )
        return summary
    finally:
        db.close()


def _scheduler_loop() -> None:
    global _last_run, _next_run
    logger.info("Ingestion scheduler thread started")
    while True:
        with _lock:
            if not _running:
                break
        try:
            _run_ingestion_once()
        except IngestionAlreadyRunning:
            logger.info("Skipping scheduled ingestion: a run is already in progress")
        except Exception as e:
            logger.exception("Scheduled ingestion run failed: %s", e)
        with _lock:
            _last_run = datetime.now(timezone.utc)
            if not _running:
                _next_run = None
                break
            _next_run = datetime.now(timezone.utc) + timedelta(seconds=INTERVAL_SECONDS)
        time.sleep(INTERVAL_SECONDS)
    logger.info("Ingestion scheduler thread stopped")


def start_scheduler() -> tuple[bool, str]:
    """
    Start recurring ingestion (run now, then every configured interval).
    Returns (success, message).
    """
    global _running, _thread
    with _lock:
        if _running:
            return False, "Ingestion scheduler is already running"
        _running = True
        _thread = threading.Thread(target=_scheduler_loop, daemon=True)
        _thread.start()
    if INTERVAL_SECONDS % 3600 == 0:
        human = f"{INTERVAL_SECONDS // 3600} hours"
    else:
        human = f"{INTERVAL_SECONDS} seconds"
    return True, f"Ingestion scheduler started (runs every {human})"


def stop_scheduler() -> tuple[bool, str]:
    """Stop recurring ingestion. The current run finishes; the next one is skipped."""
    global _running, _next_run
    with _lock:
        if not _running:
            return False, "Ingestion scheduler is not running"
        _running = False
        _next_run = None
    return True, "Ingestion scheduler stop requested (will stop after current run)"


def get_status() -> dict:
    with _lock:
        return {
            "running": _running,
            "in_progress": _run_lock.locked(),
            "last_run": _last_run.isoformat() if _last_run else None,
            "next_run": _next_run.isoformat() if _next_run else None,
            "interval_seconds": INTERVAL_SECONDS,
            "last_summary": _last_summary,
        }
