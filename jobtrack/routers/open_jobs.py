import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobtrack.config import settings
from jobtrack.database import get_db
from jobtrack.dependencies import get_current_admin, get_current_user, get_ingest_caller
from jobtrack.models.user import User
from jobtrack.repos.open_job_repo import get_all_paginated
from jobtrack.schemas.open_job import IngestRequest, OpenJobPage, OpenJobResult
from jobtrack.services.ingestion_scheduler import (
    IngestionAlreadyRunning,
    run_locked,
    start_scheduler,
    stop_scheduler,
    get_status as get_scheduler_status,
)
from jobtrack.services.open_jobs_ingestion import build_ingestion_config

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/open-jobs", tags=["open-jobs"])


def _open_job_to_result(j) -> OpenJobResult:
    return OpenJobResult(
        id=j.id,
        company=j.company or "",
        role=j.role or "",
        location=j.location or "",
        date_posted=j.date_posted or j.created_at,
        job_url=j.job_url,
    )


async def _read_ingest_request(request: Request) -> IngestRequest:
    """
    Absent, malformed or non-object bodies all mean "use defaults".
    Each override is validated on its own; an invalid field falls back to its
    default without discarding the valid ones.
    """
    try:
        payload = await request.json()
    except ValueError:
        return IngestRequest()
    if not isinstance(payload, dict):
        return IngestRequest()
    valid = {}
    for name in IngestRequest.model_fields:
        if name not in payload:
            continue
        try:
            IngestRequest.model_validate({name: payload[name]})
        except ValidationError:
            logger.info("Ignoring invalid ingestion override %s=%r", name, payload[name])
            continue
        valid[name] = payload[name]
    return IngestRequest.model_validate(valid)


@router.get("", response_model=OpenJobPage)
def list_open_jobs(
    page: int = 0,
    size: int = 20,
    q: str | None = None,
    location: str | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Shared postings feed, newest first."""
    page = max(0, page)
    size = min(max(1, size), 100)
    items, total = get_all_paginated(db, search=q, location=location, limit=size, offset=page * size)
    return OpenJobPage(items=[_open_job_to_result(j) for j in items], total=total)


@router.post("/fetch")
async def fetch_open_jobs(
    request: Request,
    db: Session = Depends(get_db),
    caller: str = Depends(get_ingest_caller),
):
    """
    Run one ingestion batch now. Optional JSON body overrides titles,
    location(s) and max results per title. Always answers with JSON.
    """
    body = await _read_ingest_request(request)
    logger.info("Ingestion triggered by %s", caller)
    try:
        config = build_ingestion_config(
            settings,
            job_titles=body.job_titles,
            location=body.location,
            locations=body.locations,
            max_results_per_title=body.max_results_per_title,
        )
        summary = await run_in_threadpool(run_locked, db, config)
    except IngestionAlreadyRunning as e:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"ok": False, "error": str(e)})
    except Exception as e:
        logger.exception("Ingestion run failed: %s", e)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"ok": False, "error": str(e)})
    return summary


@router.post("/scheduler/start")
def start_ingestion_scheduler(user: User = Depends(get_current_admin)):
    logger.info("Start ingestion scheduler requested by admin %s", user.email)
    ok, message = start_scheduler()
    return {"started": ok, "message": message}


@router.post("/scheduler/stop")
def stop_ingestion_scheduler(user: User = Depends(get_current_admin)):
    logger.info("Stop ingestion scheduler requested by admin %s", user.email)
    ok, message = stop_scheduler()
    return {"stopped": ok, "message": message}


@router.get("/scheduler/status")
def ingestion_scheduler_status(user: User = Depends(get_current_admin)):
    return get_scheduler_status()
