import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from jobtrack.database import get_db
from jobtrack.dependencies import get_current_user
from jobtrack.models.user import User
from jobtrack.repos import application_repo, contact_repo, note_repo, reminder_repo
from jobtrack.repos.open_job_repo import get_by_id as get_open_job_by_id
from jobtrack.schemas.application import (
    ApplicationCreate,
    ApplicationPage,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationUpdate,
    NoteCreate,
    NoteResponse,
)
from jobtrack.schemas.contact import ContactIn, ContactResponse
from jobtrack.schemas.reminder import ReminderCreate, ReminderResponse
from jobtrack.routers.reminders import reminder_to_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/applications", tags=["applications"])

MAX_PAGE_SIZE = 2000

# Columns that are NOT NULL; an explicit null in a patch is ignored for these
_NON_NULLABLE = {"company", "role", "status", "priority", "archived", "salary_currency", "salary_period"}


def _require_application(db: Session, application_id: str, user: User):
    app = application_repo.get_for_user(db, application_id, user.id)
    if not app:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return app


def _note_to_response(n) -> NoteResponse:
    return NoteResponse(id=n.id, application_id=n.application_id, content=n.body or "", created_at=n.created_at)


def _contact_to_response(c) -> ContactResponse:
    return ContactResponse(
        id=c.id,
        application_id=c.application_id,
        name=c.name or "",
        title=c.title,
        email=c.email,
        phone=c.phone,
        notes=c.notes,
        created_at=c.created_at,
    )


@router.get("", response_model=ApplicationPage)
def list_applications(
    status_filter: str | None = Query(default=None, alias="status"),
    q: str | None = None,
    created_from: datetime | None = Query(default=None, alias="from"),
    created_to: datetime | None = Query(default=None, alias="to"),
    include_archived: bool = True,
    page: int = 0,
    size: int = 50,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """List the caller's applications, most recently updated first."""
    page = max(0, page)
    size = min(max(1, size), MAX_PAGE_SIZE)
    items, total, total_pages = application_repo.list_for_user(
        db,
        user.id,
        status=status_filter,
        search=q,
        created_from=created_from,
        created_to=created_to,
        include_archived=include_archived,
        page=page,
        size=size,
    )
    return ApplicationPage(
        content=[ApplicationResponse.model_validate(a) for a in items],
        total_pages=total_pages,
        total_elements=total,
    )


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def create_application(
    data: ApplicationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    app = application_repo.create(db, user.id, data.model_dump())
    logger.info("Application created: user=%s id=%s", user.id, app.id)
    return ApplicationResponse.model_validate(app)


@router.post("/from-open-job/{open_job_id}", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def create_from_open_job(
    open_job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Save a feed posting as a new SAVED application."""
    job = get_open_job_by_id(db, open_job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Open job not found")
    data = ApplicationCreate(
        company=job.company or "Unknown",
        role=job.role or "Unknown",
        location=job.location,
        job_url=job.job_url,
    )
    app = application_repo.create(db, user.id, data.model_dump())
    logger.info("Application created from open job %s: user=%s id=%s", open_job_id, user.id, app.id)
    return ApplicationResponse.model_validate(app)


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return ApplicationResponse.model_validate(_require_application(db, application_id, user))


@router.patch("/{application_id}", response_model=ApplicationResponse)
def update_application(
    application_id: str,
    data: ApplicationUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    current = _require_application(db, application_id, user)
    changes = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if not (v is None and k in _NON_NULLABLE)
    }
    salary_min = changes.get("salary_min", current.salary_min)
    salary_max = changes.get("salary_max", current.salary_max)
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="salary_min must not exceed salary_max",
        )
    app = application_repo.update(db, application_id, user.id, changes)
    if not app:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return ApplicationResponse.model_validate(app)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Board drag-and-drop: move an application to another status column."""
    app = application_repo.update(db, application_id, user.id, {"status": data.status})
    if not app:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    logger.debug("Application %s moved to %s", application_id, data.status)
    return ApplicationResponse.model_validate(app)


@router.delete("/{application_id}")
def delete_application(
    application_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not application_repo.delete(db, application_id, user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    logger.info("Application deleted: user=%s id=%s", user.id, application_id)
    return {"ok": True}


# Notes

@router.get("/{application_id}/notes", response_model=list[NoteResponse])
def list_notes(application_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    _require_application(db, application_id, user)
    return [_note_to_response(n) for n in note_repo.list_for_application(db, application_id, user.id)]


@router.post("/{application_id}/notes", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def create_note(
    application_id: str,
    data: NoteCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _require_application(db, application_id, user)
    return _note_to_response(note_repo.create(db, application_id, user.id, data.content))


@router.delete("/{application_id}/notes/{note_id}")
def delete_note(application_id: str, note_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if not note_repo.delete(db, application_id, note_id, user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return {"ok": True}


# Contacts

@router.get("/{application_id}/contacts", response_model=list[ContactResponse])
def list_contacts(application_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    _require_application(db, application_id, user)
    return [_contact_to_response(c) for c in contact_repo.list_for_application(db, application_id, user.id)]


@router.post("/{application_id}/contacts", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def create_contact(
    application_id: str,
    data: ContactIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _require_application(db, application_id, user)
    return _contact_to_response(contact_repo.create(db, application_id, user.id, data.model_dump()))


@router.patch("/{application_id}/contacts/{contact_id}", response_model=ContactResponse)
def update_contact(
    application_id: str,
    contact_id: str,
    data: ContactIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    contact = contact_repo.update(db, application_id, contact_id, user.id, data.model_dump(exclude_unset=True))
    if not contact:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
    return _contact_to_response(contact)


@router.delete("/{application_id}/contacts/{contact_id}")
def delete_contact(application_id: str, contact_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if not contact_repo.delete(db, application_id, contact_id, user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
    return {"ok": True}


# Reminders

@router.get("/{application_id}/reminders", response_model=list[ReminderResponse])
def list_reminders(application_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    _require_application(db, application_id, user)
    return [reminder_to_response(r) for r in reminder_repo.list_for_application(db, application_id, user.id)]


@router.post("/{application_id}/reminders", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
def create_reminder(
    application_id: str,
    data: ReminderCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _require_application(db, application_id, user)
    reminder = reminder_repo.create(db, application_id, user.id, data.remind_at, data.message)
    return reminder_to_response(reminder, with_application=False)


@router.delete("/{application_id}/reminders/{reminder_id}")
def delete_reminder(application_id: str, reminder_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if not reminder_repo.delete(db, application_id, reminder_id, user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return {"ok": True}
