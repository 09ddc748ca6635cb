"""Text and JSON renderers for catalog command output."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from typing import Any

from kube_schema_catalog.resource_index.resource_models import FlattenedResource
from kube_schema_catalog.schema_management.schema_models import SchemaTreeNode
from kube_schema_catalog.schema_sources.source_models import SchemaSource, SourceStats

_INDENT = "  "
_DESCRIPTION_WIDTH = 80


def render_json(payload: Any) -> str:
    """Serialize plain data as indented JSON with stable key order."""
    return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)


def render_tree_json(nodes: Sequence[SchemaTreeNode]) -> str:
    return render_json([node.to_dict() for node in nodes])


def render_tree_text(nodes: Sequence[SchemaTreeNode], *, show_descriptions: bool = False) -> str:
    """Render a resolved tree as an indented outline, one field per line.

    Required fields carry a trailing `*`; enums are listed inline.
    """
    lines: list[str] = []
    for node in nodes:
        _append_tree_lines(lines, node, 0, show_descriptions)
    return "\n".join(lines)


def render_resource_table(resources: Iterable[FlattenedResource]) -> str:
    rows = [
        (resource.kind, resource.api_version or "-", resource.source, resource.key)
        for resource in resources
    ]
    return _render_table(("KIND", "API VERSION", "SOURCE", "KEY"), rows)


def render_source_table(sources: Iterable[tuple[SchemaSource, SourceStats | None]]) -> str:
    rows = []
    for source, stats in sources:
        count = str(stats.resource_count) if stats is not None else "0"
        rows.append(
            (source.id, source.name, "yes" if source.enabled else "no", count, source.storage_location)
        )
    return _render_table(("ID", "NAME", "ENABLED", "RESOURCES", "LOCATION"), rows)


def _append_tree_lines(
    lines: list[str], node: SchemaTreeNode, depth: int, show_descriptions: bool
) -> None:
    marker = "*" if node.required else ""
    line = f"{_INDENT * depth}{node.name}{marker} ({node.type})"
    if node.enum:
        line += " [" + ", ".join(str(value) for value in node.enum) + "]"
    lines.append(line)
    if show_descriptions and node.description:
        lines.append(f"{_INDENT * (depth + 1)}# {_shorten(node.description)}")
    for child in node.children:
        _append_tree_lines(lines, child, depth + 1, show_descriptions)


def _render_table(headers: tuple[str, ...], rows: list[tuple[str, ...]]) -> str:
    widths = [len(header) for header in headers]
    for row in rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]
    lines = [
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in [headers, *rows]
    ]
    return "\n".join(lines)


def _shorten(text: str) -> str:
    collapsed = " ".join(text.split())
    if len(collapsed) <= _DESCRIPTION_WIDTH:
        return collapsed
    return collapsed[: _DESCRIPTION_WIDTH - 3] + "..."
