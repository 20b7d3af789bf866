"""Tagged payloads for task provenance and activity details.

Each variant carries its own typed fields, selected by a discriminator
(source_type for task provenance, kind for activity details). Keys a
variant does not declare are collected into its ``extra`` map so
provider-specific data is preserved without loosening the typed fields.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class _TaggedPayload(BaseModel):
    """Base for tagged variants: undeclared keys move into ``extra``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    extra: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_extra(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = set(cls.model_fields)
        extra = dict(data.get("extra") or {})
        typed: dict[str, Any] = {}
        for key, value in data.items():
            if key == "extra":
                continue
            if key in known:
                typed[key] = value
            else:
                extra[key] = value
        typed["extra"] = extra
        return typed


# ---- Task provenance (source_type) ----


class ManualSource(_TaggedPayload):
    source_type: Literal["manual"] = "manual"


class PhoneCallSource(_TaggedPayload):
    source_type: Literal["phone_call"] = "phone_call"
    call_id: str | None = None
    caller_name: str | None = None
    caller_phone: str | None = None
    direction: Literal["inbound", "outbound"] | None = None
    duration_seconds: int | None = Field(default=None, ge=0)
    action_item_type: str | None = None
    created_from_action_item: bool = False


class EmailSource(_TaggedPayload):
    source_type: Literal["email"] = "email"
    email_id: str | None = None
    thread_id: str | None = None
    from_address: str | None = None
    subject: str | None = None
    action_item_type: str | None = None
    created_from_action_item: bool = False


class DocumentIntakeSource(_TaggedPayload):
    source_type: Literal["document_intake"] = "document_intake"
    document_id: str | None = None
    document_name: str | None = None
    action_item_type: str | None = None
    created_from_action_item: bool = False


class RoutedSource(_TaggedPayload):
    """Follow-up task created when another task was completed with routing."""

    source_type: Literal["routed"] = "routed"
    routed_from_task_id: str
    routed_by: str | None = None


SourceMetadata = Annotated[
    Union[ManualSource, PhoneCallSource, EmailSource, DocumentIntakeSource, RoutedSource],
    Field(discriminator="source_type"),
]
_source_adapter: TypeAdapter[SourceMetadata] = TypeAdapter(SourceMetadata)


def parse_source_metadata(
    source_type: str, raw: dict[str, Any] | None = None
) -> SourceMetadata:
    """Build the typed provenance variant for source_type from a raw dict.

    Raises:
        pydantic.ValidationError: If source_type is unknown or a typed field is invalid.
    """
    data = dict(raw or {})
    data["source_type"] = source_type
    return _source_adapter.validate_python(data)


# ---- Activity details (kind) ----


class FieldChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    old: Any = None
    new: Any = None


class ChangeSetDetails(_TaggedPayload):
    """Field-level changes from an update (field name -> old/new)."""

    kind: Literal["change_set"] = "change_set"
    changes: dict[str, FieldChange] = Field(default_factory=dict)


class AssignmentDetails(_TaggedPayload):
    kind: Literal["assignment"] = "assignment"
    assigned_to: str | None = None
    previous_assignee: str | None = None
    assigned_by: str | None = None


class RoutingDetails(_TaggedPayload):
    kind: Literal["routing"] = "routing"
    routed_to_task_id: str
    action_type_id: str


class HandoffDetails(_TaggedPayload):
    kind: Literal["handoff"] = "handoff"
    from_user_id: str | None = None
    to_user_id: str
    notes: str | None = None


class SubtaskDetails(_TaggedPayload):
    kind: Literal["subtask"] = "subtask"
    subtask_id: str
    title: str


class CommentDetails(_TaggedPayload):
    kind: Literal["comment"] = "comment"
    mentions: list[str] = Field(default_factory=list)


class GenericDetails(_TaggedPayload):
    kind: Literal["generic"] = "generic"


ActivityDetails = Annotated[
    Union[
        ChangeSetDetails,
        AssignmentDetails,
        RoutingDetails,
        HandoffDetails,
        SubtaskDetails,
        CommentDetails,
        GenericDetails,
    ],
    Field(discriminator="kind"),
]
_details_adapter: TypeAdapter[ActivityDetails] = TypeAdapter(ActivityDetails)


def parse_activity_details(raw: dict[str, Any] | None) -> ActivityDetails:
    """Parse stored activity details; rows without a kind are generic."""
    data = dict(raw or {})
    data.setdefault("kind", "generic")
    return _details_adapter.validate_python(data)


def dump_payload(payload: BaseModel) -> dict[str, Any]:
    """Serialize a payload variant for a JSON column."""
    return payload.model_dump(mode="json")
