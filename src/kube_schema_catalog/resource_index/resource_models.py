"""Resource index entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FlattenedResource:  # pylint: disable=too-many-instance-attributes
    """Searchable summary of one resource definition, built without resolving references."""

    key: str
    kind: str
    api_version: str | None
    group: str
    description: str | None
    required_top_level_fields: tuple[str, ...]
    source: str
    original_definition_key: str
    cache_key: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "key": self.key,
            "kind": self.kind,
            "apiVersion": self.api_version,
            "group": self.group,
            "description": self.description,
            "requiredTopLevelFields": list(self.required_top_level_fields),
            "source": self.source,
            "originalDefinitionKey": self.original_definition_key,
        }
