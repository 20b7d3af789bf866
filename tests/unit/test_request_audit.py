"""Audit metadata derived from request paths and methods."""

import pytest

from app.domain.enums import AuditCategory
from app.shared.request_audit import (
    get_audit_action,
    get_audit_category,
    get_audit_resource_from_path,
)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/api/v1/tasks", ("tasks", None, None)),
        ("/api/v1/tasks/abc", ("tasks", "abc", None)),
        ("/api/v1/tasks/abc/subtasks", ("tasks", "abc", "subtasks")),
        ("/api/v1/taskpool/tasks/abc/claim", ("tasks", "abc", "claim")),
        ("/api/v1/users/u1/privacy", ("users", "u1", "privacy")),
        ("/api/v1/auth/login", ("auth", "login", None)),
        ("/api/v1/", ("", None, None)),
        ("/health", ("", None, None)),
    ],
)
def test_resource_from_path(path: str, expected: tuple) -> None:
    assert get_audit_resource_from_path(path) == expected


@pytest.mark.parametrize(
    ("method", "trailing", "action"),
    [
        ("POST", "claim", "claim"),
        ("DELETE", "claim", "release"),
        ("POST", "assign", "assign"),
        ("DELETE", "assign", "unassign"),
        ("POST", "complete", "complete"),
        ("POST", "status", "status_change"),
        ("POST", "handoff", "handoff"),
        ("DELETE", "handoff", "accept_handoff"),
        ("PUT", "privacy", "privacy_update"),
        ("POST", None, "create"),
        ("PATCH", None, "update"),
        ("PUT", None, "update"),
        ("DELETE", None, "delete"),
        ("POST", "subtasks", "create"),
    ],
)
def test_action_from_method(method: str, trailing: str | None, action: str) -> None:
    assert get_audit_action(method, trailing) == action


def test_categories() -> None:
    assert get_audit_category("tasks") == AuditCategory.TASK
    assert get_audit_category("auth") == AuditCategory.AUTHENTICATION
    assert get_audit_category("users") == AuditCategory.USER_MANAGEMENT
    assert get_audit_category("activity") == AuditCategory.API
