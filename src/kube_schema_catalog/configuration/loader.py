"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    ClusterSettings,
    Configuration,
    LoggingSettings,
    SearchSettings,
    SourceSettings,
)

DEFAULT_PRIMARY_SOURCE = "kubernetes"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.resolve().parent
    sources = _parse_sources_section(parsed.get("sources"), base_path)
    cluster = _parse_cluster_section(parsed.get("cluster"), base_path)
    search = _parse_search_section(parsed.get("search"))
    logging_settings = _parse_logging_section(parsed.get("logging"))

    return Configuration(
        path=path,
        sources=sources,
        cluster=cluster,
        search=search,
        logging=logging_settings,
    )


def _parse_sources_section(value: Any, base_path: Path) -> tuple[SourceSettings, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str) or not value:
        raise ConfigurationError("Configuration section 'sources' must be a non-empty list.")

    sources: list[SourceSettings] = []
    seen_ids: set[str] = set()
    for index, entry in enumerate(value):
        label = f"sources[{index}]"
        section = _require_mapping(entry, label)
        source_id = _require_non_empty_string(section.get("id"), f"{label}.id")
        if source_id in seen_ids:
            raise ConfigurationError(f"Duplicate schema source id: {source_id}")
        seen_ids.add(source_id)
        name = _optional_string(section.get("name"), f"{label}.name") or source_id
        raw_path = _require_non_empty_string(section.get("path"), f"{label}.path")
        sources.append(
            SourceSettings(
                id=source_id,
                name=name,
                path=_resolve_path(base_path, raw_path),
                enabled=_require_bool(section.get("enabled", True), f"{label}.enabled"),
                versioned=_optional_bool(section.get("versioned"), f"{label}.versioned"),
            )
        )
    return tuple(sources)


def _parse_cluster_section(value: Any, base_path: Path) -> ClusterSettings:
    section = _optional_mapping(value, "cluster")
    kubeconfig = _optional_string(section.get("kubeconfig"), "cluster.kubeconfig")
    manifests = _normalize_string_sequence(section.get("crd_manifests"), "cluster.crd_manifests")
    return ClusterSettings(
        enabled=_require_bool(section.get("enabled", False), "cluster.enabled"),
        context=_optional_string(section.get("context"), "cluster.context"),
        kubeconfig=_resolve_path(base_path, kubeconfig) if kubeconfig else None,
        crd_manifests=tuple(_resolve_path(base_path, item) for item in manifests),
    )


def _parse_search_section(value: Any) -> SearchSettings:
    section = _optional_mapping(value, "search")
    primary = _optional_string(section.get("primary_source"), "search.primary_source")
    return SearchSettings(primary_source=primary or DEFAULT_PRIMARY_SOURCE)


def _parse_logging_section(value: Any) -> LoggingSettings:
    section = _optional_mapping(value, "logging")
    level = (_optional_string(section.get("level"), "logging.level") or DEFAULT_LOG_LEVEL).upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(f"logging.level must be one of {', '.join(LOG_LEVELS)}.")
    return LoggingSettings(level=level)


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _optional_bool(value: Any, field_name: str) -> bool | None:
    if value is None:
        return None
    return _require_bool(value, field_name)
