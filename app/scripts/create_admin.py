import asyncio

from app.core.config import ADMIN_EMAIL, ADMIN_FULL_NAME, ADMIN_PASSWORD
from app.core.db import AsyncSessionFactory
from app.core.logger import logger
from app.core.utils import hash_password
from app.domains.users.repository import UserRepository
from app.models.users import User, UserRole, UserStatus


async def create_admin():
    """Create the first admin account from ADMIN_EMAIL / ADMIN_PASSWORD."""
    if not ADMIN_EMAIL or not ADMIN_PASSWORD:
        raise SystemExit("ADMIN_EMAIL and ADMIN_PASSWORD must be set")

    email = ADMIN_EMAIL.strip().lower()
    async with AsyncSessionFactory() as session:
        existing = await UserRepository(session).get_by_email(email)
        if existing:
            logger.info(f"Admin already exists: {email}")
            return

        admin = User(
            full_name=ADMIN_FULL_NAME,
            email=email,
            password=hash_password(ADMIN_PASSWORD),
            role=UserRole.admin,
            status=UserStatus.active,
        )
        session.add(admin)
        await session.commit()
        logger.info(f"Admin account created: {email}")


if __name__ == "__main__":
    asyncio.run(create_admin())


'''
docker compose exec app bash
# inside the container
PYTHONPATH=/app python app/scripts/create_admin.py
'''
