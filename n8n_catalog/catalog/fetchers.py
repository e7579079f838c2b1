from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import httpx

from n8n_catalog.cache.coordinator import ALL_KEY, CacheDomain, DomainCacheCoordinator
from n8n_catalog.exceptions import NodeTypeFetchError
from n8n_catalog.logging_config import get_logger

logger = get_logger(__name__)

NODE_TYPES_PATH = "/node-types"


class NodeTypeFetcher(ABC):
    """Abstract base class for node type sources"""

    @abstractmethod
    async def fetch_node_types(self) -> Sequence[Any]:
        """Fetch raw node type descriptors; raise on failure"""
        pass

    async def health_check(self) -> bool:
        """Check if the source is reachable"""
        return True


class N8nApiFetcher(NodeTypeFetcher):
    """Fetches node types from the n8n public REST API"""

    # The node types endpoint answers to different verbs across n8n versions
    METHODS = ("GET", "PUT", "POST")

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, app_settings=None) -> "N8nApiFetcher":
        if app_settings is None:
            from n8n_catalog.config import settings as app_settings
        return cls(
            base_url=app_settings.n8n_base_url,
            api_key=app_settings.n8n_api_key,
            timeout=app_settings.request_timeout,
        )

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-N8N-API-KEY"] = self.api_key
        return headers

    async def fetch_node_types(self) -> List[Any]:
        url = f"{self.base_url}/api/v1{NODE_TYPES_PATH}"
        last_error: Optional[Exception] = None

        for method in self.METHODS:
            try:
                response = await self.client.request(
                    method,
                    url,
                    headers=self.headers,
                    json=None if method == "GET" else {},
                )
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.debug(f"{method} {url} failed: {e}")
                last_error = e
                continue

            return self._unwrap(payload)

        status_code = None
        if isinstance(last_error, httpx.HTTPStatusError):
            status_code = last_error.response.status_code
        raise NodeTypeFetchError(f"Node types endpoint not available: {last_error}", status_code=status_code)

    @staticmethod
    def _unwrap(payload: Any) -> List[Any]:
        if isinstance(payload, dict) and "data" in payload:
            payload = payload["data"]
        if not isinstance(payload, list):
            raise NodeTypeFetchError(f"Unexpected node types payload: {type(payload).__name__}")
        return payload

    async def health_check(self) -> bool:
        """Check the n8n health endpoint"""
        try:
            response = await self.client.get(f"{self.base_url}/healthz", timeout=self.timeout)
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"n8n health check failed: {e}")
            return False

    async def aclose(self) -> None:
        await self.client.aclose()


class CachedNodeTypeFetcher(NodeTypeFetcher):
    """Serves node types from the ``nodeTypes`` cache domain, fetching on a miss"""

    def __init__(self, fetcher: NodeTypeFetcher, cache: DomainCacheCoordinator, key: str = ALL_KEY):
        self.fetcher = fetcher
        self.cache = cache
        self.key = key

    async def fetch_node_types(self) -> Sequence[Any]:
        return await self.cache.get_or_set(CacheDomain.NODE_TYPES, self.fetcher.fetch_node_types, key=self.key)

    async def health_check(self) -> bool:
        return await self.fetcher.health_check()

    def invalidate(self) -> bool:
        return self.cache.delete(CacheDomain.NODE_TYPES, self.key)
