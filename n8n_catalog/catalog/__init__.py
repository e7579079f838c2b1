"""
n8n node catalog.
Node type discovery, classification and queries.
"""

from .models import (
    # Raw descriptor models
    NodeTypeDescriptor,
    NodeProperty,
    ParameterOption,
    CredentialReference,
    Codex,

    # Catalog models
    CatalogEntry,
    NodeParameter,
    CatalogSnapshot,
    DiscoveryStats,
)

from .fetchers import (
    NodeTypeFetcher,
    N8nApiFetcher,
    CachedNodeTypeFetcher,
)

from .builder import CatalogBuilder, CATEGORY_KEYWORDS, CORE_PACKAGE_PREFIXES
from .query import CatalogQueryEngine
from .service import CatalogService

__all__ = [
    # Models
    "NodeTypeDescriptor",
    "NodeProperty",
    "ParameterOption",
    "CredentialReference",
    "Codex",
    "CatalogEntry",
    "NodeParameter",
    "CatalogSnapshot",
    "DiscoveryStats",

    # Fetchers
    "NodeTypeFetcher",
    "N8nApiFetcher",
    "CachedNodeTypeFetcher",

    # Catalog
    "CatalogBuilder",
    "CatalogQueryEngine",
    "CatalogService",
    "CATEGORY_KEYWORDS",
    "CORE_PACKAGE_PREFIXES",
]
