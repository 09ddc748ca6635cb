"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceSettings:
    """One schema source declared in the configuration file."""

    id: str
    name: str
    path: Path
    enabled: bool
    versioned: bool | None


@dataclass(frozen=True)
class ClusterSettings:
    """CRD discovery configuration."""

    enabled: bool
    context: str | None
    kubeconfig: Path | None
    crd_manifests: tuple[Path, ...]

    @property
    def discovers_crds(self) -> bool:
        return self.enabled or bool(self.crd_manifests)


@dataclass(frozen=True)
class SearchSettings:
    """Cross-source search configuration."""

    primary_source: str


@dataclass(frozen=True)
class LoggingSettings:
    """Log output configuration."""

    level: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    sources: tuple[SourceSettings, ...]
    cluster: ClusterSettings
    search: SearchSettings
    logging: LoggingSettings
