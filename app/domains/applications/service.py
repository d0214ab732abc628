from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError

from app.core.datetime_utils import ensure_aware, get_now_utc
from app.core.exceptions import Conflict, InvalidState, NotFound
from app.core.logger import logger
from app.core.pagination import PaginationMeta, PaginationParams
from app.core.utils import ensure_uuid
from app.domains.applications.actors import Actor
from app.domains.applications.events import (
    APPLICATION_STATUS_CHANGED,
    APPLICATION_SUBMITTED,
    application_submitted_payload,
    status_changed_payload,
)
from app.domains.applications.repository import ApplicationRepository
from app.domains.applications.schemas import (
    ApplicationCreate,
    ApplicationDetail,
    ApplicationListResponse,
    ApplicationStatusUpdate,
)
from app.domains.jobs.repository import JobRepository
from app.models import Application, ApplicationStatusEnum, OutboxEvent
from app.models.base import generate_uuid

DUPLICATE_APPLICATION_MESSAGE = "Duplicate application is not allowed"


def _history_entry(status: ApplicationStatusEnum, at) -> dict:
    return {"status": status.value, "updated_at": at.isoformat()}


# Student applies to an open job
async def apply_to_job(
    actor: Actor,
    payload: ApplicationCreate,
    repository: ApplicationRepository,
    jobs: JobRepository,
) -> Tuple[Application, OutboxEvent]:
    """
    Create an 'applied' application for the calling student.

    The submission event is committed together with the application; the
    caller hands it to the notification dispatcher afterwards.
    """
    job_id = ensure_uuid(payload.job_id, "jobId")
    student_id = actor.require_student_profile()

    job = await jobs.find_job(job_id)
    if job is None or not job.is_active:
        raise InvalidState("Job is not open for applications")

    now = get_now_utc()
    if ensure_aware(job.deadline) < now:
        raise InvalidState("Application deadline has passed")

    existing = await repository.find_by_student_and_job(student_id, job_id)
    if existing is not None:
        raise Conflict(DUPLICATE_APPLICATION_MESSAGE)

    application = Application(
        id=generate_uuid(),
        student_id=student_id,
        job_id=job_id,
        status=ApplicationStatusEnum.applied,
        resume_url=payload.resume_url,
        cover_letter=payload.cover_letter,
        decision_history=[_history_entry(ApplicationStatusEnum.applied, now)],
        created_at=now,
        updated_at=now,
    )
    repository.add(application)
    event = repository.add_event(APPLICATION_SUBMITTED, application_submitted_payload(application, now))

    try:
        await repository.commit()
    except IntegrityError:
        # a concurrent request won the unique (student, job) race
        await repository.rollback()
        logger.info(f"Duplicate application rejected: student={student_id} job={job_id}")
        raise Conflict(DUPLICATE_APPLICATION_MESSAGE)

    logger.info(f"Application {application.id} submitted: student={student_id} job={job_id}")
    return application, event


async def get_application(
    actor: Actor,
    application_id: str,
    repository: ApplicationRepository,
) -> ApplicationDetail:
    application_id = ensure_uuid(application_id, "application id")
    application = await repository.get(application_id)
    if application is None:
        raise NotFound("Application not found")

    actor.authorize_view(application)
    return ApplicationDetail.model_validate(application)


async def list_applications(
    actor: Actor,
    pagination: PaginationParams,
    repository: ApplicationRepository,
    jobs: JobRepository,
    job_id: Optional[str] = None,
) -> ApplicationListResponse:
    """Page of applications visible to the actor, newest first"""
    if job_id is not None:
        job_id = ensure_uuid(job_id, "jobId")

    scope = await actor.scope(jobs)
    items = await repository.list_page(scope, job_id, skip=pagination.skip, limit=pagination.limit)
    total = await repository.count(scope, job_id)

    return ApplicationListResponse(
        items=[ApplicationDetail.model_validate(item) for item in items],
        pagination=PaginationMeta.build(pagination, total),
    )


# Reviewer moves an application through the decision pipeline
async def update_application_status(
    actor: Actor,
    application_id: str,
    payload: ApplicationStatusUpdate,
    repository: ApplicationRepository,
) -> Tuple[Application, OutboxEvent]:
    """
    Set a new status and append it to the decision history.

    Any target status is accepted from any current status. Concurrent updates
    are last-write-wins on the status column.
    """
    application_id = ensure_uuid(application_id, "application id")
    application = await repository.get(application_id)
    if application is None:
        raise NotFound("Application not found")

    actor.authorize_status_change(application)

    now = get_now_utc()
    new_status = ApplicationStatusEnum(payload.status.value)
    previous = application.status

    # reassign so the JSON column is marked dirty
    application.decision_history = [
        *(application.decision_history or []),
        _history_entry(new_status, now),
    ]
    application.status = new_status
    application.updated_at = now

    event = repository.add_event(
        APPLICATION_STATUS_CHANGED,
        status_changed_payload(application, new_status.value, now),
    )
    await repository.commit()

    logger.info(
        f"Application {application.id} status changed: "
        f"{previous.value if previous else None} -> {new_status.value} by {actor.role.value} {actor.user_id}"
    )
    return application, event
