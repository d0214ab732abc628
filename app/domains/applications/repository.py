from typing import Any, List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.applications.actors import ApplicationScope
from app.models import Application, OutboxEvent
from app.models.base import generate_uuid


class ApplicationRepository:
    """Database access for applications and the events they emit"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, application_id: str) -> Optional[Application]:
        """Application with student (and user) and job (and company) loaded."""
        return await self.session.get(Application, application_id)

    async def find_by_student_and_job(self, student_id: str, job_id: str) -> Optional[Application]:
        result = await self.session.execute(
            select(Application).where(
                Application.student_id == student_id,
                Application.job_id == job_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _conditions(scope: ApplicationScope, job_id: Optional[str]) -> List[Any]:
        conditions = []
        if scope.student_id is not None:
            conditions.append(Application.student_id == scope.student_id)
        # a job scope replaces the caller's job filter
        if scope.job_ids is not None:
            conditions.append(Application.job_id.in_(list(scope.job_ids)))
        elif job_id is not None:
            conditions.append(Application.job_id == job_id)
        return conditions

    async def list_page(
        self,
        scope: ApplicationScope,
        job_id: Optional[str],
        skip: int,
        limit: int,
    ) -> List[Application]:
        """Newest first, offset pagination."""
        query = (
            select(Application)
            .where(*self._conditions(scope, job_id))
            .order_by(desc(Application.created_at), desc(Application.id))
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self, scope: ApplicationScope, job_id: Optional[str]) -> int:
        query = select(func.count(Application.id)).where(*self._conditions(scope, job_id))
        return await self.session.scalar(query) or 0

    def add(self, application: Application) -> None:
        self.session.add(application)

    def add_event(self, event_type: str, payload: dict[str, Any]) -> OutboxEvent:
        """Stage an outbox event in the current transaction."""
        event = OutboxEvent(id=generate_uuid(), event_type=event_type, payload=payload)
        self.session.add(event)
        return event

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
