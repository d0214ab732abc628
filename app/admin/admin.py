import datetime

from fastapi import FastAPI
from sqladmin import Admin, ModelView

from app.admin.auth import AdminAuth
from app.core.config import SECRET_KEY
from app.core.datetime_utils import IST
from app.core.db import engine
from app.core.utils import hash_password
from app.models import Application, CompanyProfile, Job, Notification, OutboxEvent, StudentProfile, User


def format_datetime_ist(model, name: str) -> str:
    """Show stored UTC timestamps in India Standard Time."""
    value = getattr(model, name, None)
    if value is None:
        return ""
    if isinstance(value, datetime.datetime):
        return value.astimezone(IST).strftime("%Y-%m-%d %H:%M:%S IST")
    return str(value)


TIMESTAMP_FORMATTERS = {
    "created_at": format_datetime_ist,
    "updated_at": format_datetime_ist,
}


# Hash plain passwords typed into the admin forms
class PasswordHashMixin:
    async def insert_model(self, request, data):
        if data.get("password") and not self._is_hashed(data["password"]):
            data["password"] = hash_password(data["password"])
        return await super().insert_model(request, data)

    async def update_model(self, request, pk, data):
        if data.get("password") and not self._is_hashed(data["password"]):
            data["password"] = hash_password(data["password"])
        return await super().update_model(request, pk, data)

    def _is_hashed(self, password: str) -> bool:
        return password.startswith("$2b$") or password.startswith("$2a$")


class UserAdmin(PasswordHashMixin, ModelView, model=User):
    column_list = ["id", "full_name", "email", "role", "status", "is_deleted", "created_at"]
    column_searchable_list = ["full_name", "email"]
    column_sortable_list = ["created_at", "email"]
    name = "User"
    name_plural = "Users"
    column_labels = {
        "full_name": "Name",
        "is_deleted": "Deleted",
        "created_at": "Joined (IST)",
        "updated_at": "Updated (IST)",
    }
    column_formatters = TIMESTAMP_FORMATTERS
    column_details_exclude_list = ["password"]
    form_excluded_columns = ["notifications", "student_profile", "company_profile"]


class StudentProfileAdmin(ModelView, model=StudentProfile):
    column_list = ["id", "user.email", "course", "branch", "year", "created_at"]
    column_searchable_list = ["course", "branch"]
    name = "Student Profile"
    name_plural = "Student Profiles"
    column_labels = {"user.email": "Student Email", "created_at": "Created (IST)"}
    column_formatters = TIMESTAMP_FORMATTERS
    form_excluded_columns = ["applications"]


class CompanyProfileAdmin(ModelView, model=CompanyProfile):
    column_list = ["id", "company_name", "hr_email", "industry", "is_active", "created_at"]
    column_searchable_list = ["company_name", "hr_email"]
    name = "Company Profile"
    name_plural = "Company Profiles"
    column_labels = {"hr_email": "HR Email", "created_at": "Created (IST)"}
    column_formatters = TIMESTAMP_FORMATTERS
    form_excluded_columns = ["jobs"]


class JobAdmin(ModelView, model=Job):
    column_list = ["id", "title", "company.company_name", "location", "package_lpa", "deadline", "is_active"]
    column_searchable_list = ["title", "location"]
    column_sortable_list = ["deadline", "created_at"]
    name = "Job"
    name_plural = "Jobs"
    column_labels = {
        "company.company_name": "Company",
        "package_lpa": "Package (LPA)",
        "deadline": "Deadline (IST)",
    }
    column_formatters = {**TIMESTAMP_FORMATTERS, "deadline": format_datetime_ist}
    form_excluded_columns = ["applications"]


class ApplicationAdmin(ModelView, model=Application):
    column_list = ["id", "student_id", "job.title", "status", "created_at", "updated_at"]
    column_sortable_list = ["created_at", "updated_at"]
    name = "Application"
    name_plural = "Applications"
    column_labels = {
        "job.title": "Job",
        "decision_history": "Decision History",
        "created_at": "Applied (IST)",
        "updated_at": "Updated (IST)",
    }
    column_formatters = TIMESTAMP_FORMATTERS
    # status changes go through the API so that history and events stay consistent
    can_create = False
    can_edit = False


class NotificationAdmin(ModelView, model=Notification):
    column_list = ["id", "user_id", "title", "is_read", "created_at"]
    column_searchable_list = ["title"]
    name = "Notification"
    name_plural = "Notifications"
    column_labels = {"is_read": "Read", "created_at": "Created (IST)"}
    column_formatters = TIMESTAMP_FORMATTERS
    can_create = False


class OutboxEventAdmin(ModelView, model=OutboxEvent):
    column_list = ["id", "event_type", "status", "attempts", "last_error", "created_at", "processed_at"]
    column_sortable_list = ["created_at", "attempts"]
    name = "Outbox Event"
    name_plural = "Outbox Events"
    column_formatters = {"created_at": format_datetime_ist, "processed_at": format_datetime_ist}
    can_create = False
    can_edit = False


def setup_admin(app: FastAPI):
    admin = Admin(
        app,
        engine,
        base_url="/admin",
        authentication_backend=AdminAuth(secret_key=SECRET_KEY),
    )
    admin.add_view(UserAdmin)
    admin.add_view(StudentProfileAdmin)
    admin.add_view(CompanyProfileAdmin)
    admin.add_view(JobAdmin)
    admin.add_view(ApplicationAdmin)
    admin.add_view(NotificationAdmin)
    admin.add_view(OutboxEventAdmin)
    return admin
