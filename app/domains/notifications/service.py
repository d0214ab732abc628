"""
Consumers of application lifecycle events.

Each handler stages an in-app notification and emails the student. The
dispatcher commits the staged rows only after the student email went out, so
a failed delivery leaves nothing behind and the event is retried whole.
"""
import asyncio
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.datetime_utils import format_display_date, get_now_utc
from app.core.email_utils.mail_send import send_email
from app.core.email_utils.mail_service import render_email
from app.core.logger import logger
from app.domains.applications.events import APPLICATION_STATUS_CHANGED, APPLICATION_SUBMITTED
from app.domains.applications.repository import ApplicationRepository
from app.domains.notifications.repository import NotificationRepository
from app.domains.users.repository import UserRepository
from app.domains.users.service import find_active_admins
from app.models import Application, Job, User

SIGNATURE = "Training & Placement Officer"

# wording of the in-app notice and the student email per decision
STATUS_MESSAGES: Dict[str, Dict[str, str]] = {
    "shortlisted": {
        "title": "Application Shortlisted",
        "message": "Your application has been shortlisted.",
        "alert_type": "success",
        "status_message": "Congratulations! You have been shortlisted for the next round of selection.",
    },
    "rejected": {
        "title": "Application Rejected",
        "message": "Your application has been rejected.",
        "alert_type": "warning",
        "status_message": "We regret to inform you that your application has not been selected at this time.",
    },
    "selected": {
        "title": "Application Selected",
        "message": "Congratulations. You have been selected.",
        "alert_type": "success",
        "status_message": "Congratulations! You have been selected for the position. Please check your dashboard for further details.",
    },
}


class EventPayloadError(Exception):
    """Event refers to rows that no longer exist"""


def create_notification(
    session: AsyncSession,
    user_id: str,
    title: str,
    message: str,
    metadata: Optional[Dict[str, Any]] = None,
):
    """Stage an in-app notification; the dispatcher commits it with the event"""
    return NotificationRepository(session).add(user_id=user_id, title=title, message=message, metadata=metadata)


def _parse_occurred_at(payload: Dict[str, Any]) -> datetime:
    value = payload.get("occurred_at")
    if not value:
        return get_now_utc()
    return datetime.fromisoformat(value)


def _format_package(job: Job) -> str:
    return f"{job.package_lpa} LPA" if job.package_lpa is not None else "N/A"


def job_details(job: Job, status: str, dated: Tuple[str, datetime]) -> List[Tuple[str, str]]:
    """Rows of the details box shown in every application email"""
    label, at = dated
    return [
        ("Position", job.title),
        ("Company", job.company.company_name if job.company else "N/A"),
        ("Location", job.location or "N/A"),
        ("Package", _format_package(job)),
        ("Status", status.capitalize()),
        (label, format_display_date(at)),
    ]


async def _load_application(session: AsyncSession, payload: Dict[str, Any]) -> Application:
    application = await ApplicationRepository(session).get(payload["application_id"])
    if application is None:
        raise EventPayloadError(f"Application {payload.get('application_id')} not found")
    return application


def _student_user(application: Application) -> Optional[User]:
    """The applicant's account, or None when it no longer exists"""
    if application.student is None or application.student.user is None:
        logger.warning(f"Application {application.id} has no student account; student notice skipped")
        return None
    return application.student.user


async def handle_application_submitted(session: AsyncSession, payload: Dict[str, Any]) -> None:
    application = await _load_application(session, payload)
    student_user = _student_user(application)
    if student_user is None:
        return
    job = application.job
    company_name = job.company.company_name if job.company else "the company"

    create_notification(
        session,
        user_id=student_user.id,
        title="Job Application Submitted",
        message="Your application has been submitted.",
        metadata={"application_id": application.id},
    )

    subject = f"Job Application Submitted - {job.title}"
    html = render_email(
        "application_submitted.html",
        subject,
        heading="Application Submitted Successfully",
        recipient_name=student_user.full_name,
        job_title=job.title,
        company_name=company_name,
        details_title="Application Details:",
        details=job_details(job, "applied", ("Applied On", application.created_at)),
        signature=SIGNATURE,
    )
    await send_email(student_user.email, subject, html)
    logger.info(f"Submission notice sent for application {application.id}")


async def handle_status_changed(session: AsyncSession, payload: Dict[str, Any]) -> None:
    status = payload["status"]
    content = STATUS_MESSAGES.get(status)
    if content is None:
        raise EventPayloadError(f"No notification defined for status '{status}'")

    application = await _load_application(session, payload)
    occurred_at = _parse_occurred_at(payload)

    student_user = _student_user(application)
    if student_user is not None:
        await _notify_student_of_status(session, application, student_user, status, content, occurred_at)

    # admins hear about a selection even when the student could not be reached
    if status == "selected":
        try:
            await notify_admins_of_selection(session, application, occurred_at)
        except Exception:
            logger.exception(f"Admin selection notices failed for application {application.id}")


async def _notify_student_of_status(
    session: AsyncSession,
    application: Application,
    student_user: User,
    status: str,
    content: Dict[str, str],
    occurred_at: datetime,
) -> None:
    job = application.job
    create_notification(
        session,
        user_id=student_user.id,
        title=content["title"],
        message=content["message"],
        metadata={"application_id": application.id, "status": status},
    )

    subject = content["title"]
    html = render_email(
        "application_status.html",
        subject,
        alert_type=content["alert_type"],
        heading=content["title"],
        recipient_name=student_user.full_name,
        alert_title=content["title"],
        status_message=content["status_message"],
        details_title="Application Details:",
        details=job_details(job, status, ("Updated On", occurred_at)),
        signature=SIGNATURE,
    )
    await send_email(student_user.email, subject, html)
    logger.info(f"Status notice ({status}) sent for application {application.id}")


async def notify_admins_of_selection(
    session: AsyncSession,
    application: Application,
    selected_at: Optional[datetime] = None,
) -> None:
    """Best effort: one admin's failed delivery never fails the event"""
    admins = await find_active_admins(UserRepository(session))
    if not admins:
        logger.info(f"No active admins to notify for application {application.id}")
        return

    student_user = application.student.user if application.student else None
    candidate_name = student_user.full_name if student_user else "N/A"
    job = application.job
    subject = "Candidate Selected - Placement Portal"
    details = [
        ("Candidate", candidate_name),
        ("Candidate Email", student_user.email if student_user else "N/A"),
        *job_details(job, "selected", ("Selected On", selected_at or get_now_utc())),
    ]

    async def _send(admin) -> None:
        html = render_email(
            "candidate_selected.html",
            subject,
            alert_type="info",
            heading="Candidate Selected",
            recipient_name=admin.full_name,
            candidate_name=candidate_name,
            job_title=job.title,
            details_title="Selection Details:",
            details=details,
            signature=SIGNATURE,
        )
        await send_email(admin.email, subject, html)

    results = await asyncio.gather(*(_send(admin) for admin in admins), return_exceptions=True)
    for admin, result in zip(admins, results):
        if isinstance(result, Exception):
            logger.error(f"Selection notice to admin {admin.email} failed: {result}")


EventHandler = Callable[[AsyncSession, Dict[str, Any]], Awaitable[None]]

EVENT_HANDLERS: Dict[str, EventHandler] = {
    APPLICATION_SUBMITTED: handle_application_submitted,
    APPLICATION_STATUS_CHANGED: handle_status_changed,
}
