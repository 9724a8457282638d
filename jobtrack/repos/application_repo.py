import logging
import math
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.orm import Session

from jobtrack.core.security import generate_id
from jobtrack.models.application import Application

logger = logging.getLogger(__name__)

# Fields a caller may set on create/update; everything else is server-owned
EDITABLE_FIELDS = (
    "company",
    "role",
    "location",
    "status",
    "priority",
    "date_applied",
    "job_url",
    "archived",
    "salary_min",
    "salary_max",
    "salary_currency",
    "salary_period",
)


def get_for_user(db: Session, application_id: str, user_id: str) -> Application | None:
    """Owner-scoped lookup: another user's application reads as missing."""
    return (
        db.query(Application)
        .filter(Application.id == application_id, Application.user_id == user_id)
        .first()
    )


def list_for_user(
    db: Session,
    user_id: str,
    *,
    status: str | None = None,
    search: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    include_archived: bool = True,
    page: int = 0,
    size: int = 50,
) -> tuple[list[Application], int, int]:
    """Returns (items, total_elements, total_pages)."""
    q = db.query(Application).filter(Application.user_id == user_id)
    if status:
        q = q.filter(Application.status == status)
    if search and search.strip():
        term = f"%{search.strip().replace('%', '')}%"
        q = q.filter(
            or_(
                Application.company.ilike(term),
                Application.role.ilike(term),
                Application.location.ilike(term),
            )
        )
    if created_from is not None:
        q = q.filter(Application.created_at >= created_from)
    if created_to is not None:
        q = q.filter(Application.created_at <= created_to)
    if not include_archived:
        q = q.filter(Application.archived == False)  # noqa: E712
    total = q.count()
    items = (
        q.order_by(Application.updated_at.desc())
        .offset(page * size)
        .limit(size)
        .all()
    )
    total_pages = max(1, math.ceil(total / size)) if size else 1
    return items, total, total_pages


def all_for_user(db: Session, user_id: str) -> list[Application]:
    return db.query(Application).filter(Application.user_id == user_id).all()


def create(db: Session, user_id: str, data: dict) -> Application:
    now = datetime.now(timezone.utc)
    app = Application(id=generate_id(), user_id=user_id, created_at=now, updated_at=now)
    for key in EDITABLE_FIELDS:
        if key in data and data[key] is not None:
            setattr(app, key, data[key])
    db.add(app)
    db.commit()
    db.refresh(app)
    return app


def update(db: Session, application_id: str, user_id: str, changes: dict) -> Application | None:
    """Apply only the provided fields. Bumps updated_at."""
    app = get_for_user(db, application_id, user_id)
    if not app:
        return None
    for key, value in changes.items():
        if key in EDITABLE_FIELDS:
            setattr(app, key, value)
    app.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(app)
    return app


def delete(db: Session, application_id: str, user_id: str) -> bool:
    app = get_for_user(db, application_id, user_id)
    if not app:
        return False
    db.delete(app)
    db.commit()
    return True
