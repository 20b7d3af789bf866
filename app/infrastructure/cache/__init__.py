"""Cache: Redis service and cache key builders."""

from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import (
    tenant_code_key,
    tenant_key,
    tenant_valid_key,
)
from app.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheProtocol",
    "CacheService",
    "tenant_code_key",
    "tenant_key",
    "tenant_valid_key",
]
