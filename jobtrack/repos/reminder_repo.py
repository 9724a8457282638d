from datetime import datetime, timezone, timedelta

from sqlalchemy.orm import Session, joinedload

from jobtrack.core.security import generate_id
from jobtrack.models.reminder import Reminder

OVERDUE_LOOKBACK_DAYS = 365


def list_for_application(db: Session, application_id: str, user_id: str) -> list[Reminder]:
    return (
        db.query(Reminder)
        .filter(Reminder.application_id == application_id, Reminder.user_id == user_id)
        .order_by(Reminder.remind_at.asc())
        .all()
    )


def get_upcoming(
    db: Session,
    user_id: str,
    *,
    days: int = 14,
    include_overdue: bool = True,
    limit: int = 25,
) -> list[Reminder]:
    """Incomplete reminders due within `days`, optionally including the past year's overdue ones."""
    now = datetime.now(timezone.utc)
    start = now - timedelta(days=OVERDUE_LOOKBACK_DAYS) if include_overdue else now
    end = now + timedelta(days=days)
    return (
        db.query(Reminder)
        .options(joinedload(Reminder.application))
        .filter(
            Reminder.user_id == user_id,
            Reminder.completed == False,  # noqa: E712
            Reminder.remind_at >= start,
            Reminder.remind_at <= end,
        )
        .order_by(Reminder.remind_at.asc())
        .limit(limit)
        .all()
    )


def create(db: Session, application_id: str, user_id: str, remind_at: datetime, message: str) -> Reminder:
    reminder = Reminder(
        id=generate_id(),
        application_id=application_id,
        user_id=user_id,
        remind_at=remind_at,
        message=message,
        completed=False,
    )
    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    return reminder


def complete(db: Session, reminder_id: str, user_id: str) -> Reminder | None:
    reminder = db.query(Reminder).filter(Reminder.id == reminder_id, Reminder.user_id == user_id).first()
    if not reminder:
        return None
    reminder.completed = True
    db.commit()
    db.refresh(reminder)
    return reminder


def delete(db: Session, application_id: str, reminder_id: str, user_id: str) -> bool:
    reminder = (
        db.query(Reminder)
        .filter(
            Reminder.id == reminder_id,
            Reminder.application_id == application_id,
            Reminder.user_id == user_id,
        )
        .first()
    )
    if not reminder:
        return False
    db.delete(reminder)
    db.commit()
    return True
