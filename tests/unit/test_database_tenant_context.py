"""SET LOCAL app.current_tenant_id is issued only on PostgreSQL for a valid tenant id."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from app.core import tenant_context
from app.infrastructure.persistence import database


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def postgres(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(database, "get_settings", lambda: SimpleNamespace(is_postgres=True))


@pytest.fixture
def tenant():
    def _set(value):
        token = tenant_context.current_tenant_id.set(value)
        tokens.append(token)

    tokens: list = []
    yield _set
    for token in reversed(tokens):
        tenant_context.current_tenant_id.reset(token)


async def test_sets_tenant_on_postgres(session, postgres, tenant) -> None:
    tenant("ckv0tenant01")
    await database._set_tenant_context(session)
    session.execute.assert_awaited_once()
    statement = session.execute.await_args.args[0]
    assert str(statement) == "SET LOCAL app.current_tenant_id = 'ckv0tenant01'"


async def test_skips_without_tenant(session, postgres, tenant) -> None:
    tenant(None)
    await database._set_tenant_context(session)
    session.execute.assert_not_awaited()


@pytest.mark.parametrize("bad", ["x'; DROP TABLE tasks; --", "a" * 65, "has space"])
async def test_skips_malformed_tenant(session, postgres, tenant, bad: str) -> None:
    tenant(bad)
    await database._set_tenant_context(session)
    session.execute.assert_not_awaited()


async def test_skips_on_sqlite(session, monkeypatch, tenant) -> None:
    monkeypatch.setattr(database, "get_settings", lambda: SimpleNamespace(is_postgres=False))
    tenant("ckv0tenant01")
    await database._set_tenant_context(session)
    session.execute.assert_not_awaited()


def test_tenant_id_format() -> None:
    assert tenant_context.is_valid_tenant_id_format("ckv0tenant01")
    assert tenant_context.is_valid_tenant_id_format("a-b_c")
    assert not tenant_context.is_valid_tenant_id_format("")
    assert not tenant_context.is_valid_tenant_id_format(None)
    assert not tenant_context.is_valid_tenant_id_format("a" * 65)
