import math
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

ApplicationStatus = Literal["SAVED", "APPLIED", "OA", "INTERVIEW", "OFFER", "REJECTED"]
Priority = Literal["LOW", "MEDIUM", "HIGH"]
SalaryPeriod = Literal["YEAR", "HOUR", "MONTH", "WEEK"]


def _normalize_int(v):
    """Blank -> None, numeric -> truncated int, non-finite -> None."""
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    try:
        n = float(v)
    except (TypeError, ValueError):
        raise ValueError("Salary must be a number")
    if not math.isfinite(n):
        return None
    return math.trunc(n)


class _SalaryFields(BaseModel):
    salary_min: int | None = None
    salary_max: int | None = None

    @field_validator("salary_min", "salary_max", mode="before")
    @classmethod
    def salary_to_int(cls, v):
        return _normalize_int(v)

    @model_validator(mode="after")
    def salary_range_ordered(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salary_min must not exceed salary_max")
        return self


class ApplicationCreate(_SalaryFields):
    company: str = Field(max_length=500)
    role: str = Field(max_length=500)
    location: str | None = Field(default=None, max_length=500)
    status: ApplicationStatus = "SAVED"
    priority: Priority = "MEDIUM"
    date_applied: date | None = None
    job_url: str | None = Field(default=None, max_length=2000)
    archived: bool = False
    salary_currency: str = Field(default="USD", max_length=8)
    salary_period: SalaryPeriod = "YEAR"

    @field_validator("company", "role")
    @classmethod
    def required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v


class ApplicationUpdate(_SalaryFields):
    company: str | None = Field(default=None, max_length=500)
    role: str | None = Field(default=None, max_length=500)
    location: str | None = Field(default=None, max_length=500)
    status: ApplicationStatus | None = None
    priority: Priority | None = None
    date_applied: date | None = None
    job_url: str | None = Field(default=None, max_length=2000)
    archived: bool | None = None
    salary_currency: str | None = Field(default=None, max_length=8)
    salary_period: SalaryPeriod | None = None

    @field_validator("company", "role")
    @classmethod
    def not_blank_when_given(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicationResponse(BaseModel):
    id: str
    company: str
    role: str
    location: str | None = None
    status: str
    priority: str
    date_applied: date | None = None
    job_url: str | None = None
    archived: bool = False
    salary_min: int | None = None
    salary_max: int | None = None
    salary_currency: str = "USD"
    salary_period: str = "YEAR"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ApplicationPage(BaseModel):
    content: list[ApplicationResponse]
    total_pages: int
    total_elements: int


class NoteCreate(BaseModel):
    content: str = Field(min_length=1, max_length=20000)


class NoteResponse(BaseModel):
    id: str
    application_id: str
    content: str
    created_at: datetime | None = None


class AnalyticsResponse(BaseModel):
    status_counts: dict[str, int]
    apps_per_week: dict[str, int]
    conversion_rates: dict[str, float]
    avg_time_in_stage: dict[str, float]
    total: int
