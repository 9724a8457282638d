from datetime import datetime

from pydantic import BaseModel, Field


class ReminderCreate(BaseModel):
    remind_at: datetime
    message: str = Field(default="", max_length=2000)


class ReminderApplication(BaseModel):
    company: str | None = None
    role: str | None = None


class ReminderResponse(BaseModel):
    id: str
    application_id: str
    remind_at: datetime
    message: str = ""
    completed: bool = False
    created_at: datetime | None = None
    application: ReminderApplication | None = None
