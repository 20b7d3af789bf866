"""Seed a development firm: tenant, owner, staff members, default action types and clients.

Everything comes from the environment (or .env); nothing has a fallback value.

    DATABASE_URL            target database (run `alembic upgrade head` first)
    SECRET_KEY              required by Settings
    SEED_TENANT_CODE        firm code used at login, e.g. acme-cpa
    SEED_TENANT_NAME        display name
    SEED_OWNER_EMAIL        owner account email
    SEED_OWNER_PASSWORD     owner account password (min 8 characters)
    SEED_STAFF_EMAILS       optional, comma-separated staff emails
    SEED_STAFF_PASSWORD     required when SEED_STAFF_EMAILS is set
    SEED_CLIENT_NAMES       optional, comma-separated client names

Usage:
    python -m scripts.seed_dev_data

Re-running is safe: existing tenant, users, action types and clients are kept.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.domain.enums import UserRole
from app.infrastructure.persistence import database as db_mod
from app.infrastructure.persistence.models.client import Client
from app.infrastructure.persistence.repositories import (
    ActionTypeRepository,
    TenantRepository,
    UserRepository,
)

_REQUIRED = (
    "SEED_TENANT_CODE",
    "SEED_TENANT_NAME",
    "SEED_OWNER_EMAIL",
    "SEED_OWNER_PASSWORD",
)


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_* when run as script."""
    load_dotenv(_project_root() / ".env", override=False)


def _csv(name: str) -> list[str]:
    return [v.strip() for v in os.environ.get(name, "").split(",") if v.strip()]


def _require_env() -> dict[str, str]:
    missing = [name for name in _REQUIRED if not os.environ.get(name)]
    if os.environ.get("SEED_STAFF_EMAILS") and not os.environ.get("SEED_STAFF_PASSWORD"):
        missing.append("SEED_STAFF_PASSWORD")
    if missing:
        print(f"Missing environment variables: {', '.join(missing)}", file=sys.stderr)
        sys.exit(1)
    return {name: os.environ[name] for name in _REQUIRED}


async def _ensure_user(
    user_repo: UserRepository,
    tenant_id: str,
    email: str,
    password: str,
    role: UserRole,
) -> None:
    if await user_repo.get_by_email_and_tenant(email, tenant_id):
        print(f"  User {email} already exists, skip")
        return
    user = await user_repo.create_user(tenant_id, email, password, role=role)
    print(f"  User {user.email} ({role.value}) -> {user.id}")


async def _ensure_clients(session: AsyncSession, tenant_id: str, names: list[str]) -> None:
    result = await session.execute(select(Client.name).where(Client.tenant_id == tenant_id))
    existing = set(result.scalars().all())
    for name in names:
        if name in existing:
            continue
        session.add(Client(tenant_id=tenant_id, name=name))
        print(f"  Client {name}")
    await session.flush()


async def run() -> None:
    _load_env()
    env = _require_env()
    db_mod.ensure_engine()
    if db_mod.AsyncSessionLocal is None:
        print("Database not configured. Set DATABASE_URL and run: alembic upgrade head", file=sys.stderr)
        sys.exit(1)

    async with db_mod.AsyncSessionLocal() as session:
        async with session.begin():
            tenant_repo = TenantRepository(session)
            tenant = await tenant_repo.get_by_code(env["SEED_TENANT_CODE"])
            if tenant is None:
                tenant = await tenant_repo.create_tenant(
                    code=env["SEED_TENANT_CODE"], name=env["SEED_TENANT_NAME"]
                )
            print(f"Tenant {tenant.code} -> {tenant.id}")
            if get_settings().is_postgres:
                # tenant-scoped tables have row-level security
                await session.execute(
                    text("SELECT set_config('app.current_tenant_id', :tid, true)"),
                    {"tid": tenant.id},
                )

            user_repo = UserRepository(session)
            await _ensure_user(
                user_repo,
                tenant.id,
                env["SEED_OWNER_EMAIL"],
                env["SEED_OWNER_PASSWORD"],
                UserRole.OWNER,
            )
            for email in _csv("SEED_STAFF_EMAILS"):
                await _ensure_user(
                    user_repo, tenant.id, email, os.environ["SEED_STAFF_PASSWORD"], UserRole.STAFF
                )

            action_types = await ActionTypeRepository(session).ensure_defaults(tenant.id)
            print(f"  Action types: {len(action_types)} active")

            await _ensure_clients(session, tenant.id, _csv("SEED_CLIENT_NAMES"))
    print("Done.")


if __name__ == "__main__":
    asyncio.run(run())
