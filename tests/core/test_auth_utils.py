from datetime import timedelta

import jwt
import pytest

from app.core import utils
from app.core.config import ALGORITHM, SECRET_KEY
from app.core.exceptions import Forbidden, InvalidReference, Unauthorized
from app.domains.applications.actors import AdminActor, StudentActor
from app.models.users import UserRole


def test_password_hash_roundtrip():
    hashed = utils.hash_password("s3cret!")

    assert hashed.startswith("$2b$")
    assert utils.verify_password("s3cret!", hashed)
    assert not utils.verify_password("wrong", hashed)


def test_ensure_uuid_normalizes_and_rejects():
    value = "9F1C2A9D-7B10-4C3E-8A11-2B7C0E5D4F60"

    assert utils.ensure_uuid(value, "job_id") == value.lower()
    with pytest.raises(InvalidReference) as exc:
        utils.ensure_uuid("507f1f77bcf86cd799439011", "job_id")
    assert exc.value.message == "Invalid job_id"


@pytest.mark.asyncio
async def test_token_carries_subject_and_role():
    token = await utils.create_access_token({"sub": "user-1", "role": "student"})

    payload = utils.decode_access_token(token)
    assert payload["sub"] == "user-1"
    assert payload["role"] == "student"
    assert "exp" in payload


@pytest.mark.asyncio
async def test_expired_token_is_unauthorized():
    token = await utils.create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(Unauthorized) as exc:
        utils.decode_access_token(token)
    assert exc.value.message == "Access token has expired"


def test_foreign_signature_is_unauthorized():
    token = jwt.encode({"sub": "user-1"}, SECRET_KEY + "-other", algorithm=ALGORITHM)

    with pytest.raises(Unauthorized):
        utils.decode_access_token(token)


@pytest.mark.asyncio
@pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer not-a-jwt"])
async def test_current_actor_rejects_bad_headers(header):
    with pytest.raises(Unauthorized):
        await utils.get_current_actor(Authorization=header, db=None)


@pytest.mark.asyncio
async def test_current_actor_resolves_token_subject(monkeypatch):
    seen = {}

    async def fake_resolve_actor(user_id, repository, claimed_role=None):
        seen.update(user_id=user_id, claimed_role=claimed_role)
        return StudentActor(user_id=user_id, student_profile_id="p-1")

    monkeypatch.setattr(utils, "resolve_actor", fake_resolve_actor)
    token = await utils.create_access_token({"sub": "user-1", "role": "student"})

    actor = await utils.get_current_actor(Authorization=f"Bearer {token}", db=None)

    assert actor == StudentActor(user_id="user-1", student_profile_id="p-1")
    assert seen == {"user_id": "user-1", "claimed_role": "student"}


@pytest.mark.asyncio
async def test_role_gate():
    gate = utils.require_roles(UserRole.company, UserRole.admin)
    admin = AdminActor(user_id="a-1")

    assert await gate(actor=admin) is admin
    with pytest.raises(Forbidden):
        await gate(actor=StudentActor(user_id="s-1"))
