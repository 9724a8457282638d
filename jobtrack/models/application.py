from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, Integer, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from jobtrack.database import Base

APPLICATION_STATUSES = ("SAVED", "APPLIED", "OA", "INTERVIEW", "OFFER", "REJECTED")
PRIORITIES = ("LOW", "MEDIUM", "HIGH")
SALARY_PERIODS = ("YEAR", "HOUR", "MONTH", "WEEK")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Application(Base):
    __tablename__ = "applications"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company = Column(String, nullable=False)
    role = Column(String, nullable=False)
    location = Column(String)
    status = Column(String, nullable=False, default="SAVED")
    priority = Column(String, nullable=False, default="MEDIUM")
    date_applied = Column(Date, nullable=True)
    job_url = Column(String, nullable=True)
    archived = Column(Boolean, default=False)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    salary_currency = Column(String, default="USD")
    salary_period = Column(String, default="YEAR")
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user = relationship("User", back_populates="applications")
    notes = relationship(
        "ApplicationNote",
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    contacts = relationship(
        "ApplicationContact",
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reminders = relationship(
        "Reminder",
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
