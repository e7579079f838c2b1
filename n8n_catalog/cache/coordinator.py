"""
Cache coordinator for n8n API responses.

Keeps one TimeBoundCache per domain, each with its own TTL and capacity:
node types rarely change, workflows change often, executions are ephemeral.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from n8n_catalog.cache.ttl_cache import TimeBoundCache
from n8n_catalog.exceptions import UnknownCacheDomainError
from n8n_catalog.logging_config import get_logger

logger = get_logger(__name__)

ALL_KEY = "all"


class CacheDomain(str, Enum):
    """Named partitions of the response cache"""
    NODE_TYPES = "nodeTypes"
    WORKFLOWS = "workflows"
    CREDENTIALS = "credentials"
    EXECUTIONS = "executions"

    @property
    def entity(self) -> str:
        """Prefix used for single-entity keys, e.g. ``workflow:123``"""
        return _ENTITY_NAMES[self]


_ENTITY_NAMES = {
    CacheDomain.NODE_TYPES: "nodeType",
    CacheDomain.WORKFLOWS: "workflow",
    CacheDomain.CREDENTIALS: "credential",
    CacheDomain.EXECUTIONS: "execution",
}


@dataclass(frozen=True)
class DomainCacheConfig:
    """TTL (seconds) and capacity for one cache domain"""
    ttl: float
    max_size: int


DEFAULT_DOMAIN_CONFIG: Dict[CacheDomain, DomainCacheConfig] = {
    CacheDomain.NODE_TYPES: DomainCacheConfig(ttl=3600.0, max_size=50),
    CacheDomain.WORKFLOWS: DomainCacheConfig(ttl=120.0, max_size=100),
    CacheDomain.CREDENTIALS: DomainCacheConfig(ttl=600.0, max_size=50),
    CacheDomain.EXECUTIONS: DomainCacheConfig(ttl=30.0, max_size=200),
}

DomainName = Union[CacheDomain, str]


def resolve_domain(domain: DomainName) -> CacheDomain:
    """Map a domain name to CacheDomain, failing fast on anything unknown"""
    if isinstance(domain, CacheDomain):
        return domain
    try:
        return CacheDomain(domain)
    except ValueError:
        raise UnknownCacheDomainError(domain) from None


class DomainCacheCoordinator:
    """Multiplexes one TimeBoundCache per CacheDomain."""

    def __init__(
        self,
        domain_config: Optional[Mapping[DomainName, DomainCacheConfig]] = None,
        clock: Callable[[], float] = time.time,
        debug: bool = False,
    ):
        config = dict(DEFAULT_DOMAIN_CONFIG)
        for domain, overrides in (domain_config or {}).items():
            config[resolve_domain(domain)] = overrides

        self.debug = debug
        self._caches: Dict[CacheDomain, TimeBoundCache[Any]] = {
            domain: TimeBoundCache(
                ttl=domain_settings.ttl,
                max_size=domain_settings.max_size,
                name=domain.value,
                clock=clock,
                debug=debug,
            )
            for domain, domain_settings in config.items()
        }

        if debug:
            logger.debug(
                "Initialized domain caches: "
                + ", ".join(f"{d.value}(ttl={c.ttl}s, max={c.max_size})" for d, c in config.items())
            )

    @classmethod
    def from_settings(cls, app_settings=None, clock: Callable[[], float] = time.time) -> "DomainCacheCoordinator":
        """Build a coordinator from application settings"""
        if app_settings is None:
            from n8n_catalog.config import settings as app_settings

        domain_config = {
            CacheDomain.NODE_TYPES: DomainCacheConfig(
                ttl=app_settings.node_types_cache_ttl,
                max_size=app_settings.node_types_cache_max_size,
            ),
            CacheDomain.WORKFLOWS: DomainCacheConfig(
                ttl=app_settings.workflows_cache_ttl,
                max_size=app_settings.workflows_cache_max_size,
            ),
            CacheDomain.CREDENTIALS: DomainCacheConfig(
                ttl=app_settings.credentials_cache_ttl,
                max_size=app_settings.credentials_cache_max_size,
            ),
            CacheDomain.EXECUTIONS: DomainCacheConfig(
                ttl=app_settings.executions_cache_ttl,
                max_size=app_settings.executions_cache_max_size,
            ),
        }
        return cls(domain_config=domain_config, clock=clock, debug=app_settings.debug)

    def cache_for(self, domain: DomainName) -> TimeBoundCache[Any]:
        """Get the underlying cache of a domain"""
        return self._caches[resolve_domain(domain)]

    # Aggregate entries

    def get(self, domain: DomainName, key: str = ALL_KEY) -> Optional[Any]:
        return self.cache_for(domain).get(key)

    def set(self, domain: DomainName, value: Any, key: str = ALL_KEY, ttl: Optional[float] = None) -> None:
        self.cache_for(domain).set(key, value, ttl)

    def delete(self, domain: DomainName, key: str = ALL_KEY) -> bool:
        return self.cache_for(domain).delete(key)

    async def get_or_set(
        self,
        domain: DomainName,
        fetcher: Callable[[], Union[Any, Awaitable[Any]]],
        key: str = ALL_KEY,
        ttl: Optional[float] = None,
    ) -> Any:
        """Read-through lookup; see TimeBoundCache.get_or_set"""
        return await self.cache_for(domain).get_or_set(key, fetcher, ttl)

    # Single entities

    @staticmethod
    def item_key(domain: DomainName, item_id: Union[str, int]) -> str:
        return f"{resolve_domain(domain).entity}:{item_id}"

    def get_item(self, domain: DomainName, item_id: Union[str, int]) -> Optional[Any]:
        return self.get(domain, self.item_key(domain, item_id))

    def set_item(self, domain: DomainName, item_id: Union[str, int], value: Any, ttl: Optional[float] = None) -> None:
        self.set(domain, value, self.item_key(domain, item_id), ttl)

    # Invalidation and maintenance

    def invalidate_workflow(self, workflow_id: Union[str, int]) -> None:
        """Drop a cached workflow along with the cached workflow list"""
        workflows = self.cache_for(CacheDomain.WORKFLOWS)
        workflows.delete(self.item_key(CacheDomain.WORKFLOWS, workflow_id))
        workflows.delete(ALL_KEY)
        if self.debug:
            logger.debug(f"Invalidated workflow {workflow_id} and the workflow list")

    def clear_all(self) -> None:
        for cache in self._caches.values():
            cache.clear()
        logger.info("🗑️  All response caches cleared")

    def cleanup(self) -> None:
        """Sweep expired entries from every domain"""
        for cache in self._caches.values():
            cache.cleanup()

    def stats(self) -> Dict[str, Dict[str, Any]]:
        return {domain.value: cache.stats() for domain, cache in self._caches.items()}
