import logging

from sqlalchemy import func, or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from jobtrack.core.security import generate_id
from jobtrack.models.open_job import OpenJob

logger = logging.getLogger(__name__)

# Columns overwritten when (source, source_job_id) already exists
_UPSERT_COLUMNS = ("serpapi_job_id", "company", "role", "location", "job_url", "date_posted")

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def supports_upsert(db: Session) -> bool:
    return db.get_bind().dialect.name in _INSERTS


def upsert_one(db: Session, row: dict) -> None:
    """
    Insert an open job or overwrite the existing one with the same
    (source, source_job_id). Commits on success; the caller rolls back on error.
    source_job_id and job_url are stored untruncated.
    """
    dialect = db.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Upsert not supported for dialect {dialect!r}")

    values = {
        "id": generate_id(),
        "source": row["source"],
        "source_job_id": str(row["source_job_id"]),
        "serpapi_job_id": row.get("serpapi_job_id"),
        "company": str(row.get("company") or "Unknown")[:500],
        "role": str(row.get("role") or "Unknown")[:500],
        "location": (row.get("location") or "")[:500] or None,
        "job_url": str(row["job_url"]),
        "date_posted": row.get("date_posted"),
    }
    stmt = insert(OpenJob).values(**values)
    update_set = {col: stmt.excluded[col] for col in _UPSERT_COLUMNS}
    update_set["updated_at"] = func.now()
    stmt = stmt.on_conflict_do_update(
        index_elements=["source", "source_job_id"],
        set_=update_set,
    )
    db.execute(stmt)
    db.commit()


def get_by_id(db: Session, open_job_id: str) -> OpenJob | None:
    return db.query(OpenJob).filter(OpenJob.id == open_job_id).first()


def get_by_source_key(db: Session, source: str, source_job_id: str) -> OpenJob | None:
    return (
        db.query(OpenJob)
        .filter(OpenJob.source == source, OpenJob.source_job_id == source_job_id)
        .first()
    )


def get_all_paginated(
    db: Session,
    search: str | None = None,
    location: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[OpenJob], int]:
    """Newest postings first (undated last). Optional role/company and location search. Returns (items, total)."""
    q = db.query(OpenJob)
    if search and search.strip():
        term = f"%{search.strip().replace('%', '')}%"
        q = q.filter(
            or_(
                OpenJob.role.ilike(term),
                OpenJob.company.ilike(term),
            )
        )
    if location and location.strip():
        q = q.filter(OpenJob.location.ilike(f"%{location.strip().replace('%', '')}%"))
    total = q.count()
    items = (
        q.order_by(OpenJob.date_posted.desc().nulls_last(), OpenJob.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return items, total
