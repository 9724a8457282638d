"""
Open-jobs ingestion: for every (title, location) pair, query SerpAPI Google
Jobs, normalize each result and upsert it into ``open_jobs`` keyed on
(source, source_job_id).

Runs sequentially. A failed pair or a failed row is recorded in the summary
and the batch continues; only missing configuration is fatal.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobtrack.config import Settings
from jobtrack.repos.open_job_repo import supports_upsert, upsert_one
from jobtrack.services.job_search_client import JobSearchError, search_google_jobs
from jobtrack.services.posting_normalizer import as_string, normalize_posting

logger = logging.getLogger(__name__)

MIN_RESULTS_PER_TITLE = 1
MAX_RESULTS_PER_TITLE = 100


class IngestionConfigError(RuntimeError):
    """Required configuration (API key, endpoint, an upsert-capable database) is missing."""


@dataclass(frozen=True)
class IngestionConfig:
    job_titles: list[str]
    locations: list[str]
    max_results_per_title: int
    api_key: str
    endpoint: str
    source: str = "serpapi_google_jobs"
    timeout_seconds: float = 20.0


def clamp_max_results(value) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return 25
    return min(max(n, MIN_RESULTS_PER_TITLE), MAX_RESULTS_PER_TITLE)


def _split(raw: str, sep: str) -> list[str]:
    return [s.strip() for s in (raw or "").split(sep) if s.strip()]


def build_ingestion_config(
    settings: Settings,
    *,
    job_titles: list[str] | None = None,
    location: str | None = None,
    locations: list[str] | None = None,
    max_results_per_title: int | None = None,
) -> IngestionConfig:
    """
    Resolve request overrides against the configured defaults.
    Locations: explicit list wins, then a single location, then the default metro set.
    """
    titles = [as_string(t) for t in job_titles or [] if as_string(t)]
    if not titles:
        titles = _split(settings.ingest_job_titles, ",")

    locs: list[str] = []
    if locations:
        locs = [as_string(loc) for loc in locations if as_string(loc)]
    if not locs and as_string(location):
        locs = [as_string(location)]
    if not locs:
        locs = _split(settings.ingest_locations, ";")

    if max_results_per_title is None:
        max_results_per_title = settings.ingest_max_results_per_title

    return IngestionConfig(
        job_titles=titles,
        locations=locs,
        max_results_per_title=clamp_max_results(max_results_per_title),
        api_key=settings.serpapi_key,
        endpoint=settings.serpapi_endpoint,
        source=settings.ingest_source,
        timeout_seconds=settings.serpapi_timeout_seconds,
    )


@dataclass
class PairCounts:
    query: str
    location: str
    fetched: int = 0
    attempted: int = 0
    upserted: int = 0
    skipped_no_url: int = 0
    serpapi_http: int | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        out = {
            "query": self.query,
            "location": self.location,
            "fetched": self.fetched,
            "attempted": self.attempted,
            "upserted": self.upserted,
            "skipped_no_url": self.skipped_no_url,
        }
        if self.serpapi_http is not None:
            out["serpapi_http"] = self.serpapi_http
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class IngestionSummary:
    source: str
    requested_titles: list[str]
    requested_locations: list[str]
    max_results_per_title: int
    searched_requests: int = 0
    fetched_jobs_total: int = 0
    upsert_success: int = 0
    skipped_no_url: int = 0
    per_query_counts: list[PairCounts] = field(default_factory=list)
    upsert_errors: list[dict] = field(default_factory=list)
    serpapi_errors: list[dict] = field(default_factory=list)
    ms: int = 0

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "source": self.source,
            "requested_titles": list(self.requested_titles),
            "requested_locations": list(self.requested_locations),
            "max_results_per_title": self.max_results_per_title,
            "searched_requests": self.searched_requests,
            "fetched_jobs_total": self.fetched_jobs_total,
            "upsert_success": self.upsert_success,
            "skipped_no_url": self.skipped_no_url,
            "per_query_counts": [p.to_dict() for p in self.per_query_counts],
            "upsert_errors": list(self.upsert_errors),
            "serpapi_errors": list(self.serpapi_errors),
            "ms": self.ms,
        }


SearchFn = Callable[[str, str], list[dict]]
UpsertFn = Callable[[Session, dict], None]


def run_ingestion(
    db: Session,
    config: IngestionConfig,
    *,
    search: SearchFn | None = None,
    upsert: UpsertFn = upsert_one,
) -> IngestionSummary:
    """
    Run one ingestion batch. ``search(query, location)`` defaults to a SerpAPI
    call over a single httpx client for the whole run.
    """
    if not config.api_key and search is None:
        raise IngestionConfigError("Missing SERPAPI_KEY")
    if not config.endpoint and search is None:
        raise IngestionConfigError("Missing SERPAPI_ENDPOINT")
    if upsert is upsert_one and not supports_upsert(db):
        raise IngestionConfigError(
            f"open_jobs upsert not supported for dialect {db.get_bind().dialect.name!r}"
        )

    if search is not None:
        return _run(db, config, search, upsert)

    with httpx.Client(timeout=config.timeout_seconds) as client:
        def _serpapi(query: str, location: str) -> list[dict]:
            return search_google_jobs(
                client,
                endpoint=config.endpoint,
                api_key=config.api_key,
                query=query,
                location=location,
            )

        return _run(db, config, _serpapi, upsert)


def _run(db: Session, config: IngestionConfig, search: SearchFn, upsert: UpsertFn) -> IngestionSummary:
    started = time.monotonic()
    summary = IngestionSummary(
        source=config.source,
        requested_titles=list(config.job_titles),
        requested_locations=list(config.locations),
        max_results_per_title=config.max_results_per_title,
    )
    logger.info(
        "Ingestion started: %d titles x %d locations, max_results_per_title=%d",
        len(config.job_titles), len(config.locations), config.max_results_per_title,
    )

    for query in config.job_titles:
        for location in config.locations:
            summary.searched_requests += 1
            per = PairCounts(query=query, location=location)
            summary.per_query_counts.append(per)

            try:
                jobs = search(query, location)
            except JobSearchError as e:
                per.serpapi_http = e.status_code
                if e.status_code is None:
                    per.error = e.reason
                summary.serpapi_errors.append({"query": query, "location": location, "reason": e.reason})
                logger.warning("Search failed for query=%r location=%r: %s", query, location, e.reason)
                continue

            per.fetched = len(jobs)
            summary.fetched_jobs_total += len(jobs)

            for job in jobs[: config.max_results_per_title]:
                row = normalize_posting(job, source=config.source, location=location)
                if row is None:
                    per.skipped_no_url += 1
                    summary.skipped_no_url += 1
                    continue

                per.attempted += 1
                try:
                    upsert(db, row)
                except SQLAlchemyError as e:
                    db.rollback()
                    summary.upsert_errors.append({
                        "query": query,
                        "location": location,
                        "role": row["role"],
                        "company": row["company"],
                        "reason": str(getattr(e, "orig", None) or e),
                    })
                    logger.warning(
                        "Upsert failed for %r at %r (query=%r location=%r): %s",
                        row["role"], row["company"], query, location, e,
                    )
                    continue

                per.upserted += 1
                summary.upsert_success += 1

    summary.ms = int((time.monotonic() - started) * 1000)
    logger.info(
        "Ingestion done: requests=%d fetched=%d upserted=%d skipped_no_url=%d search_errors=%d upsert_errors=%d",
        summary.searched_requests, summary.fetched_jobs_total, summary.upsert_success,
        summary.skipped_no_url, len(summary.serpapi_errors), len(summary.upsert_errors),
    )
    return summary
