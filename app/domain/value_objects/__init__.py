"""Domain value objects (immutable, self-validating)."""

from app.domain.value_objects.core import ActionItemType, HexColor, TenantCode
from app.domain.value_objects.payloads import (
    ActivityDetails,
    AssignmentDetails,
    ChangeSetDetails,
    CommentDetails,
    DocumentIntakeSource,
    EmailSource,
    FieldChange,
    GenericDetails,
    HandoffDetails,
    ManualSource,
    PhoneCallSource,
    RoutedSource,
    RoutingDetails,
    SourceMetadata,
    SubtaskDetails,
    dump_payload,
    parse_activity_details,
    parse_source_metadata,
)

__all__ = [
    "ActionItemType",
    "ActivityDetails",
    "AssignmentDetails",
    "ChangeSetDetails",
    "CommentDetails",
    "DocumentIntakeSource",
    "EmailSource",
    "FieldChange",
    "GenericDetails",
    "HandoffDetails",
    "HexColor",
    "ManualSource",
    "PhoneCallSource",
    "RoutedSource",
    "RoutingDetails",
    "SourceMetadata",
    "SubtaskDetails",
    "TenantCode",
    "dump_payload",
    "parse_activity_details",
    "parse_source_metadata",
]
