"""Tests for auth endpoints: validation, generic 401s, successful login and /me."""

from httpx import AsyncClient
from sqlalchemy import select

from app.domain.enums import AuditCategory
from app.infrastructure.persistence.models import AuditLog
from app.infrastructure.security.jwt import decode_access_token


async def test_login_missing_body_returns_422(client: AsyncClient) -> None:
    """POST /api/v1/auth/login with no body returns 422."""
    response = await client.post("/api/v1/auth/login", json={})
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_login_empty_tenant_code_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"tenant_code": "", "email": "user@example.com", "password": "password123"},
    )
    assert response.status_code == 422


async def test_login_short_password_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"tenant_code": "acme-cpa", "email": "user@example.com", "password": "short"},
    )
    assert response.status_code == 422


async def test_login_invalid_email_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"tenant_code": "acme-cpa", "email": "not-an-email", "password": "password123"},
    )
    assert response.status_code == 422


async def test_login_unknown_tenant_returns_401(client: AsyncClient) -> None:
    """Unknown tenant and wrong password both answer 401."""
    response = await client.post(
        "/api/v1/auth/login",
        json={
            "tenant_code": "nonexistent-firm",
            "email": "nobody@example.com",
            "password": "password123",
        },
    )
    assert response.status_code == 401
    assert response.json()["error"] == "HTTP_ERROR"


async def test_login_wrong_password_returns_401(client: AsyncClient, firm) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={
            "tenant_code": firm.tenant.code,
            "email": firm.staff.email,
            "password": "definitely-wrong",
        },
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


async def test_login_success_audits_session(client: AsyncClient, firm, database) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={
            "tenant_code": firm.tenant.code,
            "email": firm.staff.email,
            "password": firm.password,
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] > 0
    claims = decode_access_token(body["access_token"])
    assert claims.user_id == firm.staff.id
    assert claims.tenant_id == firm.tenant.id
    assert claims.role == "staff"
    assert claims.session_id

    async with database() as session:
        rows = (
            await session.execute(select(AuditLog).where(AuditLog.action == "login"))
        ).scalars().all()
    assert len(rows) == 1
    assert rows[0].session_id == claims.session_id
    assert rows[0].user_id == firm.staff.id
    assert rows[0].resource_type == "auth"
    assert rows[0].category == AuditCategory.AUTHENTICATION.value


async def test_each_login_gets_a_new_session(client: AsyncClient, firm) -> None:
    payload = {
        "tenant_code": firm.tenant.code,
        "email": firm.staff.email,
        "password": firm.password,
    }
    first = await client.post("/api/v1/auth/login", json=payload)
    second = await client.post("/api/v1/auth/login", json=payload)
    sid_1 = decode_access_token(first.json()["access_token"]).session_id
    sid_2 = decode_access_token(second.json()["access_token"]).session_id
    assert sid_1 != sid_2


async def test_me_returns_current_user(client: AsyncClient, firm) -> None:
    response = await client.get("/api/v1/auth/me", headers=firm.headers(firm.manager))
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == firm.manager.id
    assert data["display_name"] == "Max Manager"
    assert data["role"] == "manager"
    assert "hashed_password" not in data


async def test_me_without_token_returns_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
