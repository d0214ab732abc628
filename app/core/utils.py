import uuid
from datetime import timedelta
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from app.core.datetime_utils import get_now_utc
from app.core.db import get_db_session
from app.core.exceptions import Forbidden, InvalidReference, Unauthorized
from app.domains.applications.actors import Actor
from app.domains.users.repository import UserRepository
from app.domains.users.service import resolve_actor
from app.models.users import UserRole


def hash_password(password: str) -> str:
    """Hash a password with bcrypt"""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against its bcrypt hash"""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


async def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a JWT access token; data should carry 'sub' (user id) and 'role'"""
    to_encode = data.copy()
    expire = get_now_utc() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Access token has expired")
    except jwt.PyJWTError:
        raise Unauthorized("Invalid access token")


def ensure_uuid(value: str, field_name: str) -> str:
    """Reject identifiers that are not UUIDs before they reach the database"""
    try:
        return str(uuid.UUID(str(value)))
    except (ValueError, TypeError, AttributeError):
        raise InvalidReference(f"Invalid {field_name}")


# Authenticated caller (JWT 'sub' claim -> user id)
async def get_current_actor(
    Authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db_session),
) -> Actor:
    """
    Validate the Bearer token from the Authorization header and resolve the
    caller into a student, company or admin actor.
    """
    if not Authorization or not Authorization.startswith("Bearer "):
        raise Unauthorized("Access token is missing")

    token = Authorization.split(" ", 1)[1].strip()
    payload = decode_access_token(token)

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Invalid access token")

    return await resolve_actor(str(user_id), UserRepository(db), claimed_role=payload.get("role"))


def require_roles(*roles: UserRole):
    """Route-level role gate"""

    async def _checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in roles:
            raise Forbidden()
        return actor

    return _checker
