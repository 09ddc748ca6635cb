"""Schema tree building service.

Expands one definition into a tree of `SchemaTreeNode`s by following `$ref`
indirections inline. References are re-expanded at every use site; only a
reference that re-enters its own expansion chain is cut off, with a
`circular:reference` leaf in place of the repeated subtree.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from .schema_models import (
    ArrayNode,
    ObjectNode,
    PrimitiveNode,
    ReferenceNode,
    SchemaNode,
    SchemaTreeNode,
)

logger = logging.getLogger(__name__)

ARRAY_ITEM_NAME = "[]"
OPEN_MAP_KEY_NAME = "*"
UNRESOLVED_REFERENCE_TYPE = "unresolved:reference"
CIRCULAR_REFERENCE_TYPE = "circular:reference"

_FILTERED_FIELD_NAMES = frozenset({"selfLink", "*"})


def build_schema_tree(
    node: SchemaNode,
    definitions: Mapping[str, SchemaNode],
    name: str,
    path: str,
    parent_required: Sequence[str],
) -> list[SchemaTreeNode]:
    """Build the tree for `node`.

    Args:
      node: Schema fragment to expand.
      definitions: Definitions table of the document `node` came from.
      name: Field name of `node` within its parent.
      path: Path of the parent node, empty at the root.
      parent_required: Required-field list declared by the enclosing object.

    Returns:
      Zero or one tree nodes; filtered fields produce an empty list.
    """
    if name == "selfLink":
        return []
    return _build(
        node,
        definitions=definitions,
        name=name,
        node_path=child_path(path, name),
        required=name in parent_required,
        inherited_description=None,
        active_references=frozenset(),
    )


def child_path(parent_path: str, name: str) -> str:
    """Return the path of field `name` under `parent_path`."""
    if name == ARRAY_ITEM_NAME:
        return f"{parent_path}{ARRAY_ITEM_NAME}"
    if not parent_path:
        return name
    return f"{parent_path}.{name}"


def _build(
    node: SchemaNode,
    *,
    definitions: Mapping[str, SchemaNode],
    name: str,
    node_path: str,
    required: bool,
    inherited_description: str | None,
    active_references: frozenset[str],
) -> list[SchemaTreeNode]:
    if isinstance(node, ReferenceNode):
        return _build_reference(
            node,
            definitions=definitions,
            name=name,
            node_path=node_path,
            required=required,
            active_references=active_references,
        )

    description = node.description or inherited_description

    if isinstance(node, ObjectNode) and node.properties:
        children: list[SchemaTreeNode] = []
        for property_name, property_schema in node.properties.items():
            if property_name in _FILTERED_FIELD_NAMES:
                continue
            children.extend(
                _build(
                    property_schema,
                    definitions=definitions,
                    name=property_name,
                    node_path=child_path(node_path, property_name),
                    required=property_name in node.required,
                    inherited_description=None,
                    active_references=active_references,
                )
            )
        return [_branch(name, node_path, "object", required, description, children)]

    if isinstance(node, ArrayNode):
        items = _build(
            node.items,
            definitions=definitions,
            name=ARRAY_ITEM_NAME,
            node_path=child_path(node_path, ARRAY_ITEM_NAME),
            required=False,
            inherited_description=None,
            active_references=active_references,
        )
        return [_branch(name, node_path, "array", required, description, items)]

    if isinstance(node, ObjectNode) and node.additional_properties_schema is not None:
        values = _build(
            node.additional_properties_schema,
            definitions=definitions,
            name=OPEN_MAP_KEY_NAME,
            node_path=child_path(node_path, OPEN_MAP_KEY_NAME),
            required=False,
            inherited_description=None,
            active_references=active_references,
        )
        return [_branch(name, node_path, "object", required, description, values)]

    if isinstance(node, ObjectNode):
        return [_branch(name, node_path, "object", required, description, [])]

    return [
        SchemaTreeNode(
            name=name,
            path=node_path,
            type=node.kind or "unknown",
            required=required,
            description=description,
            enum=node.enum if isinstance(node, PrimitiveNode) else None,
        )
    ]


def _build_reference(
    node: ReferenceNode,
    *,
    definitions: Mapping[str, SchemaNode],
    name: str,
    node_path: str,
    required: bool,
    active_references: frozenset[str],
) -> list[SchemaTreeNode]:
    target_key = node.definition_key
    target = definitions.get(target_key)
    if target is None:
        logger.warning("Unresolved reference %s at %s", node.target, node_path)
        return [
            SchemaTreeNode(
                name=name,
                path=node_path,
                type=UNRESOLVED_REFERENCE_TYPE,
                required=required,
                description=f"Unresolved reference: {node.target}",
            )
        ]
    if target_key in active_references:
        logger.debug("Circular reference %s truncated at %s", node.target, node_path)
        return [
            SchemaTreeNode(
                name=name,
                path=node_path,
                type=CIRCULAR_REFERENCE_TYPE,
                required=required,
                description=f"Circular reference: {node.target}",
            )
        ]
    return _build(
        target,
        definitions=definitions,
        name=name,
        node_path=node_path,
        required=required,
        inherited_description=node.description,
        active_references=active_references | {target_key},
    )


def _branch(
    name: str,
    node_path: str,
    node_type: str,
    required: bool,
    description: str | None,
    children: list[SchemaTreeNode],
) -> SchemaTreeNode:
    return SchemaTreeNode(
        name=name,
        path=node_path,
        type=node_type,
        required=required,
        description=description,
        children=tuple(children),
    )
