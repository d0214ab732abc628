import logging
from typing import List, Optional

from app.core.exceptions import Unauthorized
from app.domains.applications.actors import Actor, AdminActor, CompanyActor, StudentActor
from app.domains.users.repository import UserRepository
from app.models import User
from app.models.users import UserRole

logger = logging.getLogger(__name__)


async def resolve_actor(
    user_id: str,
    repository: UserRepository,
    claimed_role: Optional[str] = None,
) -> Actor:
    """Load the user behind a token and build the matching actor variant"""
    user = await repository.get_by_id(user_id)
    if user is None or not user.is_active:
        raise Unauthorized("Account is not authorized")

    # a token minted for another role is not honoured
    if claimed_role is not None and claimed_role != user.role.value:
        logger.warning(f"Role claim mismatch for user {user_id}: {claimed_role} != {user.role.value}")
        raise Unauthorized("Account is not authorized")

    if user.role == UserRole.student:
        profile = await repository.get_student_profile(user.id)
        return StudentActor(user_id=user.id, student_profile_id=profile.id if profile else None)

    if user.role == UserRole.company:
        profile = await repository.get_company_profile(user.id)
        return CompanyActor(user_id=user.id, company_profile_id=profile.id if profile else None)

    return AdminActor(user_id=user.id)


async def find_active_admins(repository: UserRepository) -> List[User]:
    """Admins who should hear about selections"""
    return await repository.find_active_admins()
