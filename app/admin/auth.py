from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from app.core.db import AsyncSessionFactory
from app.core.utils import verify_password
from app.domains.users.repository import UserRepository
from app.models.users import UserRole

TOKEN_PREFIX = "admin-"


class AdminAuth(AuthenticationBackend):
    """Admin console login for active admin users"""

    async def login(self, request: Request) -> bool:
        form = await request.form()
        email = form.get("username")
        password = form.get("password")
        if not email or not password:
            return False

        async with AsyncSessionFactory() as session:
            user = await UserRepository(session).get_by_email(str(email))

            if (
                user
                and user.role == UserRole.admin
                and user.is_active
                and verify_password(str(password), user.password)
            ):
                request.session.update({"token": f"{TOKEN_PREFIX}{user.id}"})
                return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        token = request.session.get("token")
        if not token or not token.startswith(TOKEN_PREFIX):
            return False

        # a deactivated admin loses the console on the next request
        async with AsyncSessionFactory() as session:
            user = await UserRepository(session).get_by_id(token[len(TOKEN_PREFIX):])
        return bool(user and user.role == UserRole.admin and user.is_active)
