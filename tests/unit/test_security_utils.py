"""JWT claims, request id checks and text sanitization."""

from datetime import timedelta

import pytest

from app.infrastructure.security.jwt import create_access_token, decode_access_token
from app.middleware.request_id import resolve_request_id
from app.shared.utils.sanitization import escape_like, sanitize_text


class TestAccessToken:
    def test_round_trip_claims(self) -> None:
        token = create_access_token(
            {"sub": "u1", "tenant_id": "t1", "role": "staff", "sid": "sess-1"}
        )
        claims = decode_access_token(token)
        assert claims.user_id == "u1"
        assert claims.tenant_id == "t1"
        assert claims.role == "staff"
        assert claims.session_id == "sess-1"

    def test_missing_tenant_rejected(self) -> None:
        token = create_access_token({"sub": "u1"})
        with pytest.raises(ValueError, match="tenant_id"):
            decode_access_token(token)

    def test_expired_rejected(self) -> None:
        token = create_access_token(
            {"sub": "u1", "tenant_id": "t1"}, expires_delta=timedelta(seconds=-30)
        )
        with pytest.raises(ValueError, match="Invalid token"):
            decode_access_token(token)

    def test_tampered_rejected(self) -> None:
        token = create_access_token({"sub": "u1", "tenant_id": "t1"})
        head, body, sig = token.split(".")
        forged = ".".join([head, body, sig[::-1]])
        with pytest.raises(ValueError):
            decode_access_token(forged)

    def test_garbage_rejected(self) -> None:
        with pytest.raises(ValueError):
            decode_access_token("not-a-jwt")


class TestRequestId:
    @pytest.mark.parametrize("raw", ["abc123", "req_01-XY", "a" * 64])
    def test_safe_ids_forwarded(self, raw: str) -> None:
        assert resolve_request_id(raw) == raw

    @pytest.mark.parametrize("raw", [None, "", "a" * 65, "bad id", "x\r\ninjected", "../etc"])
    def test_unsafe_ids_replaced(self, raw: str | None) -> None:
        rid = resolve_request_id(raw)
        assert rid != raw
        assert len(rid) == 32
        int(rid, 16)


class TestSanitization:
    def test_strips_tags(self) -> None:
        assert sanitize_text("  <script>alert(1)</script>Call <b>Dana</b> ") == "Call Dana"

    def test_none_passthrough(self) -> None:
        assert sanitize_text(None) is None

    def test_escape_like(self) -> None:
        assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
