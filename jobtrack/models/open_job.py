from sqlalchemy import Column, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func

from jobtrack.database import Base


class OpenJob(Base):
    """Shared feed of externally sourced postings - not user-specific."""

    __tablename__ = "open_jobs"
    __table_args__ = (
        UniqueConstraint("source", "source_job_id", name="uq_open_jobs_source_job"),
    )

    id = Column(String, primary_key=True, index=True)
    source = Column(String, nullable=False)
    source_job_id = Column(String, nullable=False)
    serpapi_job_id = Column(String, nullable=True)
    company = Column(String, nullable=False)
    role = Column(String, nullable=False)
    location = Column(String)
    job_url = Column(String, nullable=False)
    date_posted = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
