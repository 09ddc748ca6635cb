"""Schema management entities."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

REFERENCE_PREFIX = "#/definitions/"


@dataclass(frozen=True)
class ReferenceNode:
    """`$ref` indirection into the same document's definitions table."""

    target: str
    description: str | None = None

    @property
    def definition_key(self) -> str:
        """Return the definitions key the reference points at."""
        if self.target.startswith(REFERENCE_PREFIX):
            return self.target[len(REFERENCE_PREFIX) :]
        return self.target


@dataclass(frozen=True)
class ObjectNode:
    """Object schema with declared properties and/or an open-ended value schema."""

    properties: Mapping[str, SchemaNode] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    additional_properties_schema: SchemaNode | None = None
    description: str | None = None


@dataclass(frozen=True)
class ArrayNode:
    """Array schema with one item schema."""

    items: SchemaNode
    description: str | None = None


@dataclass(frozen=True)
class PrimitiveNode:
    """Leaf schema, `kind` is the declared JSON type or None when untyped."""

    kind: str | None = None
    description: str | None = None
    enum: tuple[Any, ...] | None = None


SchemaNode = ReferenceNode | ObjectNode | ArrayNode | PrimitiveNode


@dataclass(frozen=True)
class SchemaDocument:
    """Definitions table of one schema document.

    `definitions` holds the parsed nodes used for tree building, `raw_definitions`
    the untouched JSON fragments returned for diagnostics.
    """

    definitions: Mapping[str, SchemaNode]
    raw_definitions: Mapping[str, Any]


@dataclass(frozen=True)
class SchemaTreeNode:
    """One resolved field of a resource schema."""

    name: str
    path: str
    type: str
    required: bool = False
    description: str | None = None
    children: tuple[SchemaTreeNode, ...] = ()
    enum: tuple[Any, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a plain-data representation suitable for JSON output."""
        data: dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "type": self.type,
            "required": self.required,
            "children": [child.to_dict() for child in self.children],
        }
        if self.description is not None:
            data["description"] = self.description
        if self.enum is not None:
            data["enum"] = list(self.enum)
        return data

    def iter_nodes(self) -> Iterator[SchemaTreeNode]:
        """Yield this node and every descendant depth-first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()


def parse_schema_node(raw: Any) -> SchemaNode:
    """Convert one JSON-Schema-like fragment into a `SchemaNode`."""
    if not isinstance(raw, Mapping):
        return PrimitiveNode()

    description = _optional_description(raw.get("description"))
    reference = raw.get("$ref")
    if isinstance(reference, str):
        return ReferenceNode(target=reference, description=description)

    node_type = _primary_type(raw.get("type"))
    items = raw.get("items")
    if node_type == "array" or (node_type is None and isinstance(items, Mapping)):
        if isinstance(items, Mapping):
            return ArrayNode(items=parse_schema_node(items), description=description)
        return PrimitiveNode(kind="array", description=description)

    properties = raw.get("properties")
    additional = raw.get("additionalProperties")
    if node_type in (None, "object") and (
        isinstance(properties, Mapping) or isinstance(additional, Mapping)
    ):
        parsed_properties = (
            {name: parse_schema_node(child) for name, child in properties.items()}
            if isinstance(properties, Mapping)
            else {}
        )
        return ObjectNode(
            properties=parsed_properties,
            required=_string_tuple(raw.get("required")),
            additional_properties_schema=(
                parse_schema_node(additional) if isinstance(additional, Mapping) else None
            ),
            description=description,
        )

    enum = raw.get("enum")
    return PrimitiveNode(
        kind=node_type,
        description=description,
        enum=tuple(enum) if isinstance(enum, list) else None,
    )


def parse_schema_document(raw_document: Any) -> SchemaDocument:
    """Parse a document holding a `definitions` mapping."""
    if not isinstance(raw_document, Mapping):
        raise ValueError("Schema document root must be an object.")
    raw_definitions = raw_document.get("definitions") or {}
    if not isinstance(raw_definitions, Mapping):
        raise ValueError("Schema document 'definitions' must be an object.")
    return SchemaDocument(
        definitions={key: parse_schema_node(value) for key, value in raw_definitions.items()},
        raw_definitions=dict(raw_definitions),
    )


def _primary_type(value: Any) -> str | None:
    if isinstance(value, list):
        filtered = [item for item in value if isinstance(item, str) and item != "null"]
        return filtered[0] if filtered else None
    if isinstance(value, str):
        return value
    return None


def _string_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _optional_description(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None
