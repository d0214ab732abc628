from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db_session
from app.core.pagination import PaginationParams, get_pagination_params
from app.core.utils import require_roles
from app.domains.applications import service
from app.domains.applications.actors import Actor
from app.domains.applications.repository import ApplicationRepository
from app.domains.applications.schemas import (
    ApplicationCreate,
    ApplicationDetail,
    ApplicationListResponse,
    ApplicationStatusUpdate,
    ApplyResponse,
)
from app.domains.jobs.repository import JobRepository
from app.domains.notifications.dispatcher import OutboxDispatcher, get_event_dispatcher
from app.models.users import UserRole

router = APIRouter(prefix="/applications", tags=["Applications"])

student_only = require_roles(UserRole.student)
any_member = require_roles(UserRole.student, UserRole.company, UserRole.admin)
reviewers = require_roles(UserRole.company, UserRole.admin)


def get_application_repository(db: AsyncSession = Depends(get_db_session)) -> ApplicationRepository:
    return ApplicationRepository(db)


def get_job_repository(db: AsyncSession = Depends(get_db_session)) -> JobRepository:
    return JobRepository(db)


@router.post(
    "",
    response_model=ApplyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to a job",
    description="The logged-in student applies to an active job before its deadline.",
)
async def apply_to_job(
    payload: ApplicationCreate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(student_only),
    repository: ApplicationRepository = Depends(get_application_repository),
    jobs: JobRepository = Depends(get_job_repository),
    dispatcher: OutboxDispatcher = Depends(get_event_dispatcher),
):
    application, event = await service.apply_to_job(actor, payload, repository, jobs)
    # notifications run after the response; the relay retries failures
    background_tasks.add_task(dispatcher.dispatch, event.id)
    return ApplyResponse(id=application.id, message="Application submitted successfully")


@router.get(
    "",
    response_model=ApplicationListResponse,
    summary="List applications",
    description="Students see their own applications, companies see applications to their jobs, admins see all.",
)
async def list_applications(
    job_id: Optional[str] = Query(None, alias="jobId", description="Only applications to this job"),
    pagination: PaginationParams = Depends(get_pagination_params),
    actor: Actor = Depends(any_member),
    repository: ApplicationRepository = Depends(get_application_repository),
    jobs: JobRepository = Depends(get_job_repository),
):
    return await service.list_applications(actor, pagination, repository, jobs, job_id=job_id)


@router.get(
    "/{application_id}",
    response_model=ApplicationDetail,
    summary="Application detail",
)
async def read_application(
    application_id: str,
    actor: Actor = Depends(any_member),
    repository: ApplicationRepository = Depends(get_application_repository),
):
    return await service.get_application(actor, application_id, repository)


@router.patch(
    "/{application_id}/status",
    response_model=ApplicationDetail,
    summary="Update application status",
    description="The owning company or an admin shortlists, rejects or selects an application.",
)
async def update_application_status(
    application_id: str,
    payload: ApplicationStatusUpdate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(reviewers),
    repository: ApplicationRepository = Depends(get_application_repository),
    dispatcher: OutboxDispatcher = Depends(get_event_dispatcher),
):
    application, event = await service.update_application_status(actor, application_id, payload, repository)
    background_tasks.add_task(dispatcher.dispatch, event.id)
    return ApplicationDetail.model_validate(application)
