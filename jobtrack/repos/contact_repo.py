from sqlalchemy.orm import Session

from jobtrack.core.security import generate_id
from jobtrack.models.contact import ApplicationContact

CONTACT_FIELDS = ("name", "title", "email", "phone", "notes")


def list_for_application(db: Session, application_id: str, user_id: str) -> list[ApplicationContact]:
    return (
        db.query(ApplicationContact)
        .filter(ApplicationContact.application_id == application_id, ApplicationContact.user_id == user_id)
        .order_by(ApplicationContact.created_at.desc())
        .all()
    )


def get_for_user(db: Session, application_id: str, contact_id: str, user_id: str) -> ApplicationContact | None:
    return (
        db.query(ApplicationContact)
        .filter(
            ApplicationContact.id == contact_id,
            ApplicationContact.application_id == application_id,
            ApplicationContact.user_id == user_id,
        )
        .first()
    )


def create(db: Session, application_id: str, user_id: str, data: dict) -> ApplicationContact:
    contact = ApplicationContact(
        id=generate_id(),
        application_id=application_id,
        user_id=user_id,
        **{k: data.get(k) for k in CONTACT_FIELDS},
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def update(db: Session, application_id: str, contact_id: str, user_id: str, changes: dict) -> ApplicationContact | None:
    contact = get_for_user(db, application_id, contact_id, user_id)
    if not contact:
        return None
    for key, value in changes.items():
        if key in CONTACT_FIELDS:
            setattr(contact, key, value)
    db.commit()
    db.refresh(contact)
    return contact


def delete(db: Session, application_id: str, contact_id: str, user_id: str) -> bool:
    contact = get_for_user(db, application_id, contact_id, user_id)
    if not contact:
        return False
    db.delete(contact)
    db.commit()
    return True
