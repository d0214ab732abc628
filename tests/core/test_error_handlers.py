import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from app.core.exceptions import (
    Conflict,
    Forbidden,
    InvalidReference,
    InvalidState,
    NotFound,
    Unauthorized,
    ValidationFailed,
    register_exception_handlers,
)


class Body(BaseModel):
    name: str


def build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/raise/{kind}")
    async def raise_kind(kind: str):
        errors = {
            "unauthorized": Unauthorized(),
            "forbidden": Forbidden(),
            "invalid-reference": InvalidReference("Invalid job_id"),
            "not-found": NotFound("Application not found"),
            "invalid-state": InvalidState("Job is not open for applications"),
            "conflict": Conflict("Duplicate application is not allowed"),
            "validation": ValidationFailed(issues=[{"loc": ["query", "page"], "msg": "too small"}]),
        }
        raise errors[kind]

    @app.get("/crash")
    async def crash():
        raise RuntimeError("secret internals")

    @app.post("/body")
    async def body(payload: Body):
        return payload

    return app


@pytest.fixture
async def client():
    transport = ASGITransport(app=build_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind, status_code, message",
    [
        ("unauthorized", 401, "Unauthorized"),
        ("forbidden", 403, "Forbidden"),
        ("invalid-reference", 400, "Invalid job_id"),
        ("not-found", 404, "Application not found"),
        ("invalid-state", 400, "Job is not open for applications"),
        ("conflict", 409, "Duplicate application is not allowed"),
    ],
)
async def test_domain_errors_render_message(client, kind, status_code, message):
    response = await client.get(f"/raise/{kind}")

    assert response.status_code == status_code
    assert response.json() == {"message": message}


@pytest.mark.asyncio
async def test_validation_failed_carries_issues(client):
    response = await client.get("/raise/validation")

    assert response.status_code == 400
    assert response.json() == {
        "message": "Validation failed",
        "issues": [{"loc": ["query", "page"], "msg": "too small"}],
    }


@pytest.mark.asyncio
async def test_request_validation_is_400(client):
    response = await client.post("/body", json={})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert body["issues"][0]["loc"] == ["body", "name"]


@pytest.mark.asyncio
async def test_unexpected_error_hides_details(client):
    response = await client.get("/crash")

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}
    assert "secret" not in response.text
