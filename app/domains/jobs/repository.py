from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.jobs import Job


class JobRepository:
    """Read-only access to job postings used by the application lifecycle"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_job(self, job_id: str) -> Optional[Job]:
        """Job with its company loaded, or None."""
        return await self.session.get(Job, job_id)

    async def find_job_ids_by_company(self, company_id: str) -> List[str]:
        """IDs of every job owned by the company, active or not."""
        result = await self.session.execute(
            select(Job.id).where(Job.company_id == company_id)
        )
        return list(result.scalars().all())
