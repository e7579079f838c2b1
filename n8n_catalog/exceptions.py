"""
Exceptions raised by the catalog and cache layers.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog and cache errors"""


class UnknownCacheDomainError(CatalogError, ValueError):
    """Raised when a cache operation names a domain that does not exist"""

    def __init__(self, domain: object):
        self.domain = domain
        super().__init__(f"Unknown cache domain: {domain!r}")


class NodeTypeFetchError(CatalogError):
    """Raised when node types cannot be fetched from the n8n API"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
