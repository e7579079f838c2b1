"""
Catalog service for n8n node discovery.
"""

import time
from typing import Callable, Dict, List, Optional

from n8n_catalog.logging_config import get_logger
from .builder import CatalogBuilder, DEFAULT_REFRESH_INTERVAL
from .fetchers import CachedNodeTypeFetcher, NodeTypeFetcher
from .models import CatalogEntry, CatalogSnapshot, DiscoveryStats
from .query import CatalogQueryEngine

logger = get_logger(__name__)


class CatalogService:
    """Discovery and query surface for the node catalog."""

    def __init__(
        self,
        fetcher: NodeTypeFetcher,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        clock: Callable[[], float] = time.time,
        debug: bool = False,
    ):
        self.fetcher = fetcher
        self.builder = CatalogBuilder(fetcher, refresh_interval=refresh_interval, clock=clock, debug=debug)
        self.query = CatalogQueryEngine(self.builder)

    @classmethod
    def from_settings(cls, fetcher: NodeTypeFetcher, app_settings=None, clock: Callable[[], float] = time.time) -> "CatalogService":
        if app_settings is None:
            from n8n_catalog.config import settings as app_settings
        return cls(
            fetcher,
            refresh_interval=app_settings.catalog_refresh_interval,
            clock=clock,
            debug=app_settings.debug,
        )

    async def discover_nodes(self, force_refresh: bool = False) -> CatalogSnapshot:
        if force_refresh and isinstance(self.fetcher, CachedNodeTypeFetcher):
            # a forced refresh must reach the n8n API, not the response cache
            self.fetcher.invalidate()
        return await self.builder.discover_nodes(force_refresh=force_refresh)

    def get_nodes_by_category(self) -> Dict[str, List[CatalogEntry]]:
        return self.query.get_nodes_by_category()

    def get_nodes_in_category(self, category: str) -> List[CatalogEntry]:
        return self.query.get_nodes_in_category(category)

    def get_core_nodes(self) -> List[CatalogEntry]:
        return self.query.get_core_nodes()

    def get_community_nodes(self) -> List[CatalogEntry]:
        return self.query.get_community_nodes()

    def search_nodes(self, query: str) -> List[CatalogEntry]:
        return self.query.search_nodes(query)

    def get_node(self, name: str) -> Optional[CatalogEntry]:
        return self.query.get_node(name)

    def get_discovery_stats(self) -> DiscoveryStats:
        return self.query.get_discovery_stats()

    def generate_node_documentation(self, entry: CatalogEntry) -> str:
        return self.query.generate_node_documentation(entry)

    def generate_documentation_for(self, name: str) -> str:
        """Render documentation for a node type by name"""
        entry = self.get_node(name)
        if entry is None:
            return f'# Node Not Found\n\nNode type "{name}" was not found in the discovery catalog.'
        return self.generate_node_documentation(entry)
