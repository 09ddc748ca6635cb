"""Schema management exports."""

from .schema_models import (
    ArrayNode,
    ObjectNode,
    PrimitiveNode,
    ReferenceNode,
    SchemaDocument,
    SchemaNode,
    SchemaTreeNode,
    parse_schema_document,
    parse_schema_node,
)
from .schema_tree_builder import (
    CIRCULAR_REFERENCE_TYPE,
    UNRESOLVED_REFERENCE_TYPE,
    build_schema_tree,
    child_path,
)

__all__ = [
    "ArrayNode",
    "ObjectNode",
    "PrimitiveNode",
    "ReferenceNode",
    "SchemaDocument",
    "SchemaNode",
    "SchemaTreeNode",
    "parse_schema_document",
    "parse_schema_node",
    "CIRCULAR_REFERENCE_TYPE",
    "UNRESOLVED_REFERENCE_TYPE",
    "build_schema_tree",
    "child_path",
]
