from datetime import datetime
from typing import Any

from app.models import Application

APPLICATION_SUBMITTED = "application.submitted"
APPLICATION_STATUS_CHANGED = "application.status_changed"


def application_submitted_payload(application: Application, occurred_at: datetime) -> dict[str, Any]:
    return {
        "application_id": application.id,
        "job_id": application.job_id,
        "student_id": application.student_id,
        "occurred_at": occurred_at.isoformat(),
    }


def status_changed_payload(application: Application, status: str, occurred_at: datetime) -> dict[str, Any]:
    # status is captured here; later transitions must not change what this event announces
    return {
        "application_id": application.id,
        "job_id": application.job_id,
        "student_id": application.student_id,
        "status": status,
        "occurred_at": occurred_at.isoformat(),
    }
