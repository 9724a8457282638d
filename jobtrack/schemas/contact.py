from datetime import datetime

from pydantic import BaseModel, Field


class ContactIn(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    title: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=5000)


class ContactResponse(BaseModel):
    id: str
    application_id: str
    name: str = ""
    title: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
