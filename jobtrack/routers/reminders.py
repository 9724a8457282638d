import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobtrack.database import get_db
from jobtrack.dependencies import get_current_user
from jobtrack.models.user import User
from jobtrack.repos import reminder_repo
from jobtrack.schemas.reminder import ReminderApplication, ReminderResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reminders", tags=["reminders"])


def reminder_to_response(r, with_application: bool = True) -> ReminderResponse:
    app = getattr(r, "application", None) if with_application else None
    return ReminderResponse(
        id=r.id,
        application_id=r.application_id,
        remind_at=r.remind_at,
        message=r.message or "",
        completed=bool(r.completed),
        created_at=r.created_at,
        application=ReminderApplication(company=app.company, role=app.role) if app else None,
    )


@router.get("/upcoming", response_model=list[ReminderResponse])
def upcoming_reminders(
    days: int = 14,
    include_overdue: bool = True,
    limit: int = 25,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Incomplete reminders across all of the caller's applications, soonest first."""
    days = min(max(0, days), 365)
    limit = min(max(1, limit), 200)
    reminders = reminder_repo.get_upcoming(db, user.id, days=days, include_overdue=include_overdue, limit=limit)
    return [reminder_to_response(r) for r in reminders]


@router.post("/{reminder_id}/complete", response_model=ReminderResponse)
def complete_reminder(
    reminder_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    reminder = reminder_repo.complete(db, reminder_id, user.id)
    if not reminder:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return reminder_to_response(reminder)
