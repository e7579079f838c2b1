"""
Node catalog builder.

Turns the raw node type listing of an n8n instance into classified
CatalogEntry records and keeps the last good CatalogSnapshot around for
``refresh_interval`` seconds.
"""

import time
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from n8n_catalog.exceptions import CatalogError
from n8n_catalog.logging_config import get_logger
from .fetchers import NodeTypeFetcher
from .models import (
    CatalogEntry,
    CatalogSnapshot,
    NodeParameter,
    NodeProperty,
    NodeTypeDescriptor,
)

logger = get_logger(__name__)

DEFAULT_REFRESH_INTERVAL = 5 * 60  # seconds

FALLBACK_CATEGORY = "Miscellaneous"

# Checked in order against the lowercased node type name; first match wins
CATEGORY_KEYWORDS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("trigger", "webhook"), "Triggers"),
    (("http", "api"), "Communication"),
    (("database", "sql", "mongo"), "Data"),
    (("file", "csv", "json"), "Files"),
    (("email", "slack", "discord"), "Communication"),
    (("schedule", "cron", "interval"), "Scheduling"),
    (("transform", "filter", "merge"), "Data"),
)

CORE_PACKAGE_PREFIXES: Tuple[str, ...] = (
    "n8n-nodes-base",
    "@n8n/n8n-nodes-langchain",
)


def determine_category(descriptor: NodeTypeDescriptor) -> str:
    """Codex categories first, then the node group, then name keywords"""
    if descriptor.codex and descriptor.codex.categories:
        return descriptor.codex.categories[0]

    if descriptor.group:
        return descriptor.group[0]

    name = descriptor.name.lower()
    for keywords, category in CATEGORY_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return category

    return FALLBACK_CATEGORY


def is_custom_node(node_name: str) -> bool:
    return not node_name.startswith(CORE_PACKAGE_PREFIXES)


def extract_package_name(node_name: str) -> Optional[str]:
    """``@n8n/n8n-nodes-langchain.vectorStorePinecone`` -> ``@n8n/n8n-nodes-langchain``"""
    if "." in node_name:
        return node_name.split(".", 1)[0]
    return None


def extract_parameters(properties: Sequence[NodeProperty]) -> List[NodeParameter]:
    parameters = []
    for prop in properties:
        fields = {
            "name": prop.name,
            "display_name": prop.display_name,
            "type": prop.type,
            "required": prop.required,
            "description": prop.description,
            "options": prop.options,
        }
        # keep "declared as null" apart from "not declared"
        if "default" in prop.model_fields_set:
            fields["default"] = prop.default
        parameters.append(NodeParameter(**fields))
    return parameters


def resolve_version(version: Union[int, float, List[Union[int, float]], None]) -> Union[int, float]:
    if isinstance(version, list):
        return max(version) if version else 1
    return version or 1


def convert_descriptor(descriptor: NodeTypeDescriptor) -> CatalogEntry:
    """Classify one raw node type descriptor"""
    display_name = descriptor.display_name or descriptor.name
    return CatalogEntry(
        name=descriptor.name,
        display_name=display_name,
        description=descriptor.description or f"{display_name} node",
        category=determine_category(descriptor),
        version=resolve_version(descriptor.version),
        inputs=list(descriptor.inputs),
        outputs=list(descriptor.outputs),
        parameters=extract_parameters(descriptor.properties),
        credentials=[cred.name for cred in descriptor.credentials],
        is_custom=is_custom_node(descriptor.name),
        package_name=extract_package_name(descriptor.name),
    )


class CatalogBuilder:
    """Maintains a debounced, classified snapshot of the node types of an n8n instance."""

    def __init__(
        self,
        fetcher: NodeTypeFetcher,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        clock: Callable[[], float] = time.time,
        debug: bool = False,
    ):
        self.fetcher = fetcher
        self.refresh_interval = refresh_interval
        self.debug = debug
        self._clock = clock
        self._snapshot: Optional[CatalogSnapshot] = None
        self._last_built_at: Optional[float] = None

    @property
    def snapshot(self) -> CatalogSnapshot:
        """The last published snapshot, or an empty one before the first build"""
        return self._snapshot if self._snapshot is not None else CatalogSnapshot()

    @property
    def last_built_at(self) -> Optional[float]:
        return self._last_built_at

    def is_fresh(self) -> bool:
        # an empty catalog is always refetched
        if self._snapshot is None or self._snapshot.is_empty or self._last_built_at is None:
            return False
        return self._clock() - self._last_built_at < self.refresh_interval

    async def discover_nodes(self, force_refresh: bool = False) -> CatalogSnapshot:
        """
        Return the current snapshot, rebuilding it when stale or forced.

        A failed fetch is logged and the previous snapshot is returned
        unchanged; this method does not raise fetch errors.
        """
        if not force_refresh and self.is_fresh():
            return self._snapshot

        now = self._clock()
        try:
            raw_descriptors = await self.fetcher.fetch_node_types()
            entries = self._convert_all(raw_descriptors)
        except Exception as e:
            logger.error(f"❌ Failed to discover n8n nodes: {e}")
            return self.snapshot

        self._snapshot = CatalogSnapshot(
            entries=tuple(entries),
            built_at=datetime.fromtimestamp(now, tz=timezone.utc),
        )
        self._last_built_at = now

        if self.debug:
            logger.info(f"✅ Discovered {len(entries)} n8n nodes")
        return self._snapshot

    def _convert_all(self, raw_descriptors: Sequence[Any]) -> List[CatalogEntry]:
        entries = []
        for raw in raw_descriptors:
            try:
                descriptor = raw if isinstance(raw, NodeTypeDescriptor) else NodeTypeDescriptor.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"⚠️  Skipping malformed node type descriptor: {e.error_count()} validation error(s)")
                continue
            entries.append(convert_descriptor(descriptor))

        if raw_descriptors and not entries:
            raise CatalogError(f"none of the {len(raw_descriptors)} node type descriptors could be converted")
        return entries
