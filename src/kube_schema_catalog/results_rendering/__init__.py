"""Results rendering exports."""

from .catalog_renderers import (
    render_json,
    render_resource_table,
    render_source_table,
    render_tree_json,
    render_tree_text,
)

__all__ = [
    "render_json",
    "render_resource_table",
    "render_source_table",
    "render_tree_json",
    "render_tree_text",
]
