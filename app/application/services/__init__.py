"""Application services: authorization and privacy filtering."""

from app.application.services.authorization_service import AuthorizationService, grants
from app.application.services.privacy_filter import PrivacyFilter, apply_privacy, is_visible

__all__ = [
    "AuthorizationService",
    "PrivacyFilter",
    "apply_privacy",
    "grants",
    "is_visible",
]
