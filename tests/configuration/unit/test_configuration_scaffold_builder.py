"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from kube_schema_catalog.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from kube_schema_catalog.configuration.loader import load_configuration


def test_build_placeholder_configuration_contains_all_supported_sections() -> None:
    scaffold = build_placeholder_configuration()

    assert "Schema catalog configuration" in scaffold
    assert "sources:" in scaffold
    assert "cluster:" in scaffold
    assert "crd_manifests:" in scaffold
    assert "search:" in scaffold
    assert "logging:" in scaffold
    assert "<REQUIRED>" in scaffold
    assert "<OPTIONAL>" in scaffold
    assert isinstance(yaml.safe_load(scaffold), dict)


def test_write_placeholder_configuration_writes_file(tmp_path: Path) -> None:
    output_path = tmp_path / "catalog.yaml"

    written_path = write_placeholder_configuration(output_path)

    assert written_path == output_path.resolve()
    assert output_path.exists()
    assert "<REQUIRED>" in output_path.read_text(encoding="utf-8")


def test_written_scaffold_is_a_loadable_configuration(tmp_path: Path) -> None:
    configuration = load_configuration(write_placeholder_configuration(tmp_path / "catalog.yaml"))

    assert [source.id for source in configuration.sources] == ["kubernetes"]
    assert configuration.cluster.enabled is False


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "catalog.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError, match="already exists"):
        write_placeholder_configuration(output_path)

    assert output_path.read_text(encoding="utf-8") == "existing"
