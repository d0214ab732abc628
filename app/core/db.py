import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)

from app.core.config import DATABASE_URL

if not DATABASE_URL:
    raise ValueError(
        "DATABASE_URL is not set and could not be loaded from the .env file."
    )

logger = logging.getLogger(__name__)

# Async engine; recycle pooled connections every 10 minutes
engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    pool_recycle=600
)

AsyncSessionFactory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields one async DB session per request"""
    async with AsyncSessionFactory() as session:
        try:
            yield session
            # no implicit commit here, services commit explicitly
        except Exception as e:
            logger.error(f"DB Session rollback due to exception: {e}", exc_info=True)
            await session.rollback()
            raise
