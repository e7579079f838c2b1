"""
In-memory response caching for n8n API lookups.
"""

from .ttl_cache import CacheEntry, TimeBoundCache
from .coordinator import (
    ALL_KEY,
    CacheDomain,
    DEFAULT_DOMAIN_CONFIG,
    DomainCacheConfig,
    DomainCacheCoordinator,
    resolve_domain,
)

__all__ = [
    "CacheEntry",
    "TimeBoundCache",
    "ALL_KEY",
    "CacheDomain",
    "DEFAULT_DOMAIN_CONFIG",
    "DomainCacheConfig",
    "DomainCacheCoordinator",
    "resolve_domain",
]
