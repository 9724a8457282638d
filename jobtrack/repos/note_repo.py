from sqlalchemy.orm import Session

from jobtrack.core.security import generate_id
from jobtrack.models.note import ApplicationNote


def list_for_application(db: Session, application_id: str, user_id: str) -> list[ApplicationNote]:
    return (
        db.query(ApplicationNote)
        .filter(ApplicationNote.application_id == application_id, ApplicationNote.user_id == user_id)
        .order_by(ApplicationNote.created_at.desc())
        .all()
    )


def create(db: Session, application_id: str, user_id: str, body: str) -> ApplicationNote:
    note = ApplicationNote(id=generate_id(), application_id=application_id, user_id=user_id, body=body)
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


def delete(db: Session, application_id: str, note_id: str, user_id: str) -> bool:
    note = (
        db.query(ApplicationNote)
        .filter(
            ApplicationNote.id == note_id,
            ApplicationNote.application_id == application_id,
            ApplicationNote.user_id == user_id,
        )
        .first()
    )
    if not note:
        return False
    db.delete(note)
    db.commit()
    return True
