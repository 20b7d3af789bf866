"""Tests for domain value objects (TenantCode, HexColor, ActionItemType) and tagged payloads."""

import pytest
from pydantic import ValidationError

from app.domain.value_objects.core import ActionItemType, HexColor, TenantCode
from app.domain.value_objects.payloads import (
    AssignmentDetails,
    EmailSource,
    GenericDetails,
    PhoneCallSource,
    RoutedSource,
    dump_payload,
    parse_activity_details,
    parse_source_metadata,
)


class TestTenantCode:
    """TenantCode: 3-32 chars, lowercase alphanumeric with optional hyphens."""

    def test_valid_codes(self) -> None:
        TenantCode("acme")
        TenantCode("acme-cpa")
        TenantCode("a12")
        TenantCode("a" * 32)

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            TenantCode("")

    def test_length_limits(self) -> None:
        with pytest.raises(ValueError, match="3-32"):
            TenantCode("ab")
        with pytest.raises(ValueError, match="3-32"):
            TenantCode("a" * 33)

    def test_invalid_format_rejected(self) -> None:
        for bad in ("ACME", "acme_cpa", "-acme", "acme-", "acme--cpa"):
            with pytest.raises(ValueError, match="lowercase"):
                TenantCode(bad)


class TestHexColor:
    def test_valid(self) -> None:
        assert HexColor("#3B82F6").value == "#3B82F6"
        HexColor("#abcdef")

    @pytest.mark.parametrize("bad", ["3B82F6", "#3B82F", "#3B82F6FF", "#GGGGGG", ""])
    def test_invalid(self, bad: str) -> None:
        with pytest.raises(ValueError, match="#RRGGBB"):
            HexColor(bad)


class TestActionItemType:
    """Inbound item types map onto the seeded action type codes."""

    @pytest.mark.parametrize(
        ("raw", "code"),
        [
            ("callback", "RESPOND"),
            ("call-back", "RESPOND"),
            ("Send_Email", "RESPOND"),
            ("appointment", "SCHEDULE"),
            ("document_request", "REQUEST"),
            ("follow-up", "REQUEST"),
            ("review", "REVIEW"),
            ("filing", "FILE"),
        ],
    )
    def test_known_types(self, raw: str, code: str) -> None:
        assert ActionItemType(raw).action_type_code == code

    def test_unknown_type_falls_back_to_process(self) -> None:
        assert ActionItemType("carrier_pigeon").action_type_code == "PROCESS"

    def test_blank_rejected(self) -> None:
        with pytest.raises(ValueError):
            ActionItemType("   ")


class TestSourceMetadata:
    def test_variant_selected_by_source_type(self) -> None:
        meta = parse_source_metadata("phone_call", {"caller_name": "Dana", "duration_seconds": 90})
        assert isinstance(meta, PhoneCallSource)
        assert meta.caller_name == "Dana"
        assert meta.duration_seconds == 90

    def test_undeclared_keys_kept_in_extra(self) -> None:
        meta = parse_source_metadata("email", {"subject": "W-2", "mailbox": "intake"})
        assert isinstance(meta, EmailSource)
        assert meta.subject == "W-2"
        assert meta.extra == {"mailbox": "intake"}
        assert dump_payload(meta)["extra"] == {"mailbox": "intake"}

    def test_routed_requires_origin(self) -> None:
        with pytest.raises(ValidationError):
            parse_source_metadata("routed", {})
        meta = parse_source_metadata("routed", {"routed_from_task_id": "t1"})
        assert isinstance(meta, RoutedSource)

    def test_invalid_typed_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_source_metadata("phone_call", {"duration_seconds": -5})

    def test_unknown_source_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_source_metadata("carrier_pigeon", {})


class TestActivityDetails:
    def test_round_trip_keeps_kind(self) -> None:
        stored = dump_payload(AssignmentDetails(assigned_to="u1", previous_assignee="u0"))
        parsed = parse_activity_details(stored)
        assert isinstance(parsed, AssignmentDetails)
        assert parsed.previous_assignee == "u0"

    def test_rows_without_kind_are_generic(self) -> None:
        parsed = parse_activity_details({"note": "imported"})
        assert isinstance(parsed, GenericDetails)
        assert parsed.extra == {"note": "imported"}
