import logging

import httpx

logger = logging.getLogger(__name__)


class JobSearchError(RuntimeError):
    """Transport failure or non-2xx response from the job-search API."""

    def __init__(self, reason: str, status_code: int | None = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


def search_google_jobs(
    client: httpx.Client,
    *,
    endpoint: str,
    api_key: str,
    query: str,
    location: str,
) -> list[dict]:
    """
    One SerpAPI Google Jobs request for a (query, location) pair.
    Returns the raw ``jobs_results`` list (empty when absent or malformed).
    Raises JobSearchError on any transport or HTTP status failure; no retries.
    """
    params = {
        "engine": "google_jobs",
        "q": query,
        "location": location,
        "hl": "en",
        "gl": "us",
        "api_key": api_key,
    }
    try:
        resp = client.get(endpoint, params=params)
    except httpx.HTTPError as e:
        raise JobSearchError(str(e) or e.__class__.__name__) from e

    if not resp.is_success:
        raise JobSearchError(f"SerpAPI HTTP {resp.status_code}", status_code=resp.status_code)

    try:
        data = resp.json()
    except ValueError as e:
        raise JobSearchError(f"Invalid JSON from SerpAPI: {e}") from e

    jobs = data.get("jobs_results") if isinstance(data, dict) else None
    if not isinstance(jobs, list):
        logger.debug("No jobs_results for query=%r location=%r", query, location)
        return []
    return jobs
