"""Audit log reads: permission gate, filters, recent and per-session views."""

from httpx import AsyncClient


async def _touch(client: AsyncClient, headers: dict, title: str) -> str:
    response = await client.post("/api/v1/tasks", json={"title": title}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


async def test_staff_cannot_read_audit_log(client: AsyncClient, firm) -> None:
    headers = firm.headers(firm.staff)
    for path in ("/api/v1/audit-log", "/api/v1/audit-log/recent", "/api/v1/audit-log/sessions/x"):
        response = await client.get(path, headers=headers)
        assert response.status_code == 403, path


async def test_list_and_filter(client: AsyncClient, firm, auth_headers) -> None:
    task_id = await _touch(client, auth_headers, "Payroll")
    await client.patch(
        f"/api/v1/tasks/{task_id}", json={"priority": "low"}, headers=auth_headers
    )
    await client.post(
        f"/api/v1/taskpool/tasks/{task_id}/claim", headers=firm.headers(firm.staff)
    )

    everything = (await client.get("/api/v1/audit-log", headers=auth_headers)).json()
    assert everything["total"] == 3
    assert [e["action"] for e in everything["items"]] == ["claim", "update", "create"]
    assert all(e["resource_type"] == "tasks" for e in everything["items"])
    assert everything["items"][0]["resource_id"] == task_id

    claims = (
        await client.get("/api/v1/audit-log", params={"action": "claim"}, headers=auth_headers)
    ).json()
    assert [e["user_id"] for e in claims["items"]] == [firm.staff.id]

    by_user = (
        await client.get(
            "/api/v1/audit-log", params={"user_id": firm.owner.id}, headers=auth_headers
        )
    ).json()
    assert by_user["total"] == 2


async def test_recent_is_bounded(client: AsyncClient, firm, auth_headers) -> None:
    for i in range(3):
        await _touch(client, auth_headers, f"Task {i}")
    recent = await client.get(
        "/api/v1/audit-log/recent", params={"n": 2}, headers=firm.headers(firm.manager)
    )
    assert recent.status_code == 200
    assert len(recent.json()) == 2


async def test_session_view(client: AsyncClient, firm, auth_headers) -> None:
    await _touch(client, auth_headers, "Owner task")
    other_session = firm.headers(firm.manager, session_id="sess-test-0002")
    first = await _touch(client, other_session, "Manager task")
    await client.patch(
        f"/api/v1/tasks/{first}", json={"priority": "high"}, headers=other_session
    )

    response = await client.get("/api/v1/audit-log/sessions/sess-test-0002", headers=auth_headers)
    assert response.status_code == 200
    assert [e["action"] for e in response.json()] == ["create", "update"]
    assert {e["user_id"] for e in response.json()} == {firm.manager.id}
