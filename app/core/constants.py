"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure. Used by infrastructure
cache and the authorization/tenant dependencies.
"""

# Cache key prefixes (used with :id or :tenant_id:user_id etc.)
CACHE_PREFIX_TENANT = "tenant"
CACHE_PREFIX_PERMISSION = "permission"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Tenant header validation cache
TENANT_VALIDATION_CACHE_TTL = 60
TENANT_CACHE_MISS_MARKER = "__missing__"
