"""
Turn one raw SerpAPI Google Jobs result into an ``open_jobs`` row.

Field lookups go through ordered accessor paths: each path is a tuple of
dict keys / list indexes, and the first path that resolves to a non-empty
value wins. This keeps the "try A, else B, else C" rules in data and lets
them be tested without any network call.
"""
import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

logger = logging.getLogger(__name__)

Accessor = tuple[str | int, ...]

JOB_URL_ACCESSORS: tuple[Accessor, ...] = (
    ("job_url",),
    ("apply_options", 0, "link"),
    ("related_links", 0, "link"),
    ("share_link",),
    ("google_jobs_link",),
)

DATE_POSTED_ACCESSORS: tuple[Accessor, ...] = (
    ("detected_extensions", "posted_at_date"),
    ("detected_extensions", "posted_at"),
    ("detected_extensions", "posted"),
)

COMPANY_ACCESSORS: tuple[Accessor, ...] = (("company_name",), ("company",))
ROLE_ACCESSORS: tuple[Accessor, ...] = (("title",),)
LOCATION_ACCESSORS: tuple[Accessor, ...] = (("location",),)

# Calendar formats accepted besides ISO 8601 and RFC 2822. Relative phrases
# ("3 days ago", "yesterday") are never matched.
_CALENDAR_FORMATS = (
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%m/%d/%Y",
    "%Y/%m/%d",
)


def resolve_path(obj, path: Accessor):
    """Follow ``path`` into nested dicts/lists; None when any step is missing."""
    cur = obj
    for step in path:
        if isinstance(step, int):
            if not isinstance(cur, list) or not -len(cur) <= step < len(cur):
                return None
            cur = cur[step]
        else:
            if not isinstance(cur, dict):
                return None
            cur = cur.get(step)
        if cur is None:
            return None
    return cur


def first_present(obj, accessors: tuple[Accessor, ...]):
    """Return the first accessor value that is not None / empty string."""
    for path in accessors:
        value = resolve_path(obj, path)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def as_string(value, fallback: str = "") -> str:
    if value is None:
        return fallback
    s = str(value).strip()
    return s or fallback


def pick_job_url(job: dict) -> str | None:
    url = first_present(job, JOB_URL_ACCESSORS)
    return as_string(url) or None


def build_source_job_id(job: dict, job_url: str) -> str:
    """Native ``job_id`` when present, else the posting URL (natural dedupe key)."""
    native = as_string(job.get("job_id") if isinstance(job, dict) else None)
    return native or job_url


def parse_posted_date(raw) -> datetime | None:
    """
    Strictly parse a posted-date value to an aware UTC datetime.
    Anything that is not an unambiguous calendar date/timestamp returns None.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        dt = raw
    else:
        s = str(raw).strip()
        if not s or not re.search(r"\d", s):
            return None
        dt = _parse_date_string(s)
        if dt is None:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _parse_date_string(s: str) -> datetime | None:
    iso = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(s)
    except (TypeError, ValueError, IndexError):
        pass
    for fmt in _CALENDAR_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def parse_date_posted(job: dict) -> datetime | None:
    raw = first_present(job, DATE_POSTED_ACCESSORS)
    parsed = parse_posted_date(raw)
    if raw is not None and parsed is None:
        logger.debug("Unparseable date_posted %r; storing null", raw)
    return parsed


def normalize_posting(job: dict, *, source: str, location: str) -> dict | None:
    """Build an ``open_jobs`` row dict, or None when no usable URL exists."""
    job_url = pick_job_url(job)
    if not job_url:
        return None
    native_id = as_string(job.get("job_id")) or None
    return {
        "source": source,
        "source_job_id": build_source_job_id(job, job_url),
        "serpapi_job_id": native_id,
        "company": as_string(first_present(job, COMPANY_ACCESSORS), "Unknown"),
        "role": as_string(first_present(job, ROLE_ACCESSORS), "Unknown"),
        "location": as_string(first_present(job, LOCATION_ACCESSORS), location),
        "job_url": job_url,
        "date_posted": parse_date_posted(job),
    }
