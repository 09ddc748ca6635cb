"""Schema source entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from kube_schema_catalog.schema_management.schema_models import SchemaDocument

VERSIONED_SOURCE_IDS = frozenset({"kubernetes", "openshift", "argocd"})


@dataclass(frozen=True)
class SchemaSource:
    """One named origin of schema documents."""

    id: str
    name: str
    storage_location: str
    enabled: bool = True
    versioned: bool | None = None

    @property
    def is_versioned(self) -> bool:
        """Return True when the source keeps one definitions document per version directory."""
        if self.versioned is not None:
            return self.versioned
        return self.id in VERSIONED_SOURCE_IDS

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "storageLocation": self.storage_location,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class SourceStats:
    """Resource count and enablement of one registered source."""

    resource_count: int
    enabled: bool

    def to_dict(self) -> dict[str, object]:
        return {"resourceCount": self.resource_count, "enabled": self.enabled}


@dataclass
class RawSchemaCacheEntry:
    """Unresolved document loaded for one (source, version) pair.

    Only `last_accessed` changes after the entry is stored.
    """

    source: str
    document: SchemaDocument
    origin_location: str
    last_accessed: datetime = field(default_factory=lambda: datetime.now(UTC))

    def touch(self) -> None:
        self.last_accessed = datetime.now(UTC)
