"""Domain value objects for the PracticeDesk application.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

# Shared slug pattern: lowercase alphanumeric with optional hyphens (e.g. acme-cpa).
_SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class TenantCode:
    """Value object for tenant code (firm slug used at login).

    Tenant codes must be 3-32 characters, lowercase alphanumeric with
    optional hyphens (e.g. 'acme', 'acme-cpa').
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Tenant code must be a non-empty string")
        if not 3 <= len(self.value) <= 32:
            raise ValueError("Tenant code must be 3-32 characters")
        if not _SLUG_RE.match(self.value):
            raise ValueError(
                "Tenant code must be lowercase alphanumeric with optional hyphens "
                "(e.g., 'acme', 'acme-cpa')"
            )


@dataclass(frozen=True)
class HexColor:
    """Value object for an action type colour (#RRGGBB)."""

    value: str

    def __post_init__(self) -> None:
        if not _HEX_COLOR_RE.match(self.value):
            raise ValueError(f"Color must be #RRGGBB, got {self.value!r}")


@dataclass(frozen=True)
class ActionItemType:
    """Value object for the type of an inbound action item.

    Normalizes the many spellings used by call and email intake into one of
    the action type codes seeded for every tenant.
    """

    value: str

    _ACTION_TYPE_CODES: ClassVar[dict[str, str]] = {
        "call": "RESPOND",
        "call_back": "RESPOND",
        "callback": "RESPOND",
        "send_email": "RESPOND",
        "email": "RESPOND",
        "response": "RESPOND",
        "schedule_appointment": "SCHEDULE",
        "appointment": "SCHEDULE",
        "calendar": "SCHEDULE",
        "document_request": "REQUEST",
        "document": "PREPARE",
        "follow_up": "REQUEST",
        "followup": "REQUEST",
        "review": "REVIEW",
        "filing": "FILE",
        "task": "PROCESS",
    }
    DEFAULT_CODE: ClassVar[str] = "PROCESS"

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("Action item type must be a non-empty string")

    @property
    def action_type_code(self) -> str:
        """Return the action type code for this item (general when unknown)."""
        key = self.value.strip().lower().replace("-", "_")
        return self._ACTION_TYPE_CODES.get(key, self.DEFAULT_CODE)
