from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import CompanyProfile, StudentProfile, User
from app.models.users import UserRole, UserStatus


class UserRepository:
    """Users and their role profiles"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_student_profile(self, user_id: str) -> Optional[StudentProfile]:
        result = await self.session.execute(
            select(StudentProfile).where(StudentProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_company_profile(self, user_id: str) -> Optional[CompanyProfile]:
        result = await self.session.execute(
            select(CompanyProfile).where(CompanyProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def find_active_admins(self) -> List[User]:
        result = await self.session.execute(
            select(User).where(
                User.role == UserRole.admin,
                User.status == UserStatus.active,
                User.is_deleted.is_(False),
            )
        )
        return list(result.scalars().all())
