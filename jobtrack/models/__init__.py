from jobtrack.models.user import User
from jobtrack.models.open_job import OpenJob
from jobtrack.models.application import Application
from jobtrack.models.note import ApplicationNote
from jobtrack.models.contact import ApplicationContact
from jobtrack.models.reminder import Reminder

__all__ = [
    "User",
    "OpenJob",
    "Application",
    "ApplicationNote",
    "ApplicationContact",
    "Reminder",
]
