from datetime import datetime

from pydantic import BaseModel


class IngestRequest(BaseModel):
    """Optional overrides for one ingestion run; omitted fields use configured defaults."""

    job_titles: list[str] | None = None
    location: str | None = None
    locations: list[str] | None = None
    max_results_per_title: int | None = None


class OpenJobResult(BaseModel):
    id: str
    company: str
    role: str
    location: str | None
    date_posted: datetime | None
    job_url: str


class OpenJobPage(BaseModel):
    items: list[OpenJobResult]
    total: int
