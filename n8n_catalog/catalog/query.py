"""
Read-only views over the current node catalog snapshot.
"""

import json
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .builder import CatalogBuilder
from .models import CatalogEntry, CatalogSnapshot, DiscoveryStats, NodeParameter


class CatalogQueryEngine:
    """Filtering, grouping, search and documentation over a CatalogBuilder's snapshot"""

    def __init__(self, builder: CatalogBuilder):
        self.builder = builder

    def get_nodes_by_category(self) -> Dict[str, List[CatalogEntry]]:
        categories: Dict[str, List[CatalogEntry]] = {}
        for entry in self.builder.snapshot.entries:
            categories.setdefault(entry.category, []).append(entry)
        return categories

    def get_nodes_in_category(self, category: str) -> List[CatalogEntry]:
        return [entry for entry in self.builder.snapshot.entries if entry.category == category]

    def get_core_nodes(self) -> List[CatalogEntry]:
        return [entry for entry in self.builder.snapshot.entries if not entry.is_custom]

    def get_community_nodes(self) -> List[CatalogEntry]:
        return [entry for entry in self.builder.snapshot.entries if entry.is_custom]

    def search_nodes(self, query: str) -> List[CatalogEntry]:
        """Case-insensitive substring search over name, display name and description"""
        needle = query.lower()
        return [
            entry for entry in self.builder.snapshot.entries
            if needle in entry.name.lower()
            or needle in entry.display_name.lower()
            or needle in entry.description.lower()
        ]

    def get_node(self, name: str) -> Optional[CatalogEntry]:
        return next((entry for entry in self.builder.snapshot.entries if entry.name == name), None)

    def get_discovery_stats(self) -> DiscoveryStats:
        snapshot: CatalogSnapshot = self.builder.snapshot
        core = sum(1 for entry in snapshot.entries if not entry.is_custom)
        last_built_at = self.builder.last_built_at

        return DiscoveryStats(
            total=len(snapshot.entries),
            core_nodes=core,
            community_nodes=len(snapshot.entries) - core,
            categories=sorted({entry.category for entry in snapshot.entries}),
            last_discovery=(
                datetime.fromtimestamp(last_built_at, tz=timezone.utc) if last_built_at is not None else None
            ),
        )

    def generate_node_documentation(self, entry: CatalogEntry) -> str:
        """Render a markdown page for a catalog entry"""
        doc = f"# {entry.display_name}\n\n"
        doc += f"**Type:** {entry.name}\n"
        doc += f"**Category:** {entry.category}\n"
        doc += f"**Version:** {entry.version}\n"

        if entry.is_custom and entry.package_name:
            doc += f"**Package:** {entry.package_name}\n"

        if entry.description:
            doc += f"\n## Description\n{entry.description}\n\n"
        else:
            doc += "\n"

        if entry.parameters:
            doc += "## Parameters\n\n"
            for param in entry.parameters:
                doc += _render_parameter(param)

        if entry.credentials:
            doc += "## Required Credentials\n"
            doc += _bullets(entry.credentials)

        if entry.inputs:
            doc += "## Inputs\n"
            doc += _bullets(entry.inputs)

        if entry.outputs:
            doc += "## Outputs\n"
            doc += _bullets(entry.outputs)

        return doc


def _render_parameter(param: NodeParameter) -> str:
    text = f"### {param.display_name or param.name}\n"
    text += f"- **Name:** {param.name}\n"
    text += f"- **Type:** {param.type}\n"
    text += f"- **Required:** {'Yes' if param.required else 'No'}\n"
    if param.description:
        text += f"- **Description:** {param.description}\n"
    if param.has_default:
        text += f"- **Default:** {json.dumps(param.default, default=str)}\n"
    if param.options:
        names = [str(opt.name if opt.name is not None else opt.value) for opt in param.options]
        text += f"- **Options:** {', '.join(names)}\n"
    return text + "\n"


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items) + "\n\n"
