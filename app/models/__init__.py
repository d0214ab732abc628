from app.models.base import Base
from app.models.users import User, UserRole, UserStatus
from app.models.student_profiles import StudentProfile
from app.models.company_profiles import CompanyProfile
from app.models.jobs import Job
from app.models.applications import Application, ApplicationStatusEnum
from app.models.notifications import Notification
from app.models.outbox_events import OutboxEvent, OutboxStatusEnum

__all__ = [
    "Base",
    "User",
    "UserRole",
    "UserStatus",
    "StudentProfile",
    "CompanyProfile",
    "Job",
    "Application",
    "ApplicationStatusEnum",
    "Notification",
    "OutboxEvent",
    "OutboxStatusEnum",
]
