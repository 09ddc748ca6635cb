"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from kube_schema_catalog import cli as cli_module
from kube_schema_catalog.cli import build_crd_provider, cli
from kube_schema_catalog.cluster_crds import (
    CompositeCRDProvider,
    CRDDescriptor,
    KubernetesCRDProvider,
    ManifestCRDProvider,
)
from kube_schema_catalog.configuration import load_configuration


def _sample_config() -> str:
    return str(Path(__file__).resolve().parents[3] / "samples" / "catalog.yaml")


def _invoke(*args: str):
    return CliRunner().invoke(cli, list(args))


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    output_path = tmp_path / "catalog.yaml"

    result = _invoke("generate-config", "--output", str(output_path))

    assert result.exit_code == 0
    assert output_path.exists()
    assert str(output_path.resolve()) in result.output


def test_sources_command_lists_configured_and_crd_sources() -> None:
    result = _invoke("sources", "--config", _sample_config(), "--format", "json")

    assert result.exit_code == 0, result.output
    payload = {entry["id"]: entry for entry in json.loads(result.output)}
    assert set(payload) == {"kubernetes", "platform", "cluster-crds"}
    assert payload["kubernetes"]["stats"]["resourceCount"] == 3
    assert payload["cluster-crds"]["stats"]["resourceCount"] == 1


def test_resources_command_prints_aligned_table() -> None:
    result = _invoke("resources", "--config", _sample_config(), "--source", "kubernetes")

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].split() == ["KIND", "API", "VERSION", "SOURCE", "KEY"]
    assert lines[1].startswith("Deployment")
    assert lines[2].startswith("Pod ")
    assert lines[3].startswith("PodTemplateSpec")


def test_search_command_ranks_across_sources() -> None:
    result = _invoke(
        "search", "application", "--config", _sample_config(), "--ranked", "--format", "json"
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [entry["kind"] for entry in payload] == ["ApplicationSet"]
    assert payload[0]["apiVersion"] == "argoproj.io/v1alpha1"


def test_tree_command_renders_text_outline() -> None:
    result = _invoke("tree", "io.k8s.api.apps.v1.Deployment", "--config", _sample_config())

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "io.k8s.api.apps.v1.Deployment (object)"
    assert "    replicas (integer)" in lines
    assert "    selector* (object)" in lines


def test_tree_command_renders_json_for_crd_source() -> None:
    result = _invoke(
        "tree",
        "argoproj.io/v1alpha1/ApplicationSet",
        "--source",
        "cluster-crds",
        "--format",
        "json",
        "--config",
        _sample_config(),
    )

    assert result.exit_code == 0, result.output
    (root,) = json.loads(result.output)
    assert root["path"] == "argoproj.io/v1alpha1/ApplicationSet"
    assert {child["name"] for child in root["children"]} >= {"apiVersion", "kind", "spec"}


def test_tree_command_reports_unknown_resource() -> None:
    result = _invoke("tree", "io.k8s.api.apps.v1.Nope", "--config", _sample_config())

    assert result.exit_code != 0
    assert "Resource not found" in str(result.exception) + result.output


def test_raw_command_prints_cached_crd_document() -> None:
    result = _invoke(
        "raw", "--cache-key", "crd-argoproj.io-v1alpha1-ApplicationSet", "--config", _sample_config()
    )

    assert result.exit_code == 0, result.output
    assert "ApplicationSet" in json.loads(result.output)["definitions"]


def test_raw_command_prints_unresolved_definition() -> None:
    result = _invoke("raw", "io.k8s.api.apps.v1.Deployment", "--config", _sample_config())

    assert result.exit_code == 0, result.output
    raw = json.loads(result.output)
    assert raw["properties"]["spec"]["$ref"] == "#/definitions/io.k8s.api.apps.v1.DeploymentSpec"


def test_cluster_discovery_uses_configured_context(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_path = tmp_path / "catalog.yaml"
    config_path.write_text(
        f"""
sources:
  - id: kubernetes
    path: {Path(_sample_config()).parent / "schemas" / "kubernetes"}
cluster:
  enabled: true
  context: staging
""",
        encoding="utf-8",
    )
    hints: list[str | None] = []

    def fake_discover(self, connection_hint=None):
        hints.append(connection_hint)
        return [CRDDescriptor(group="example.com", version="v1", kind="Widget")]

    monkeypatch.setattr(cli_module.KubernetesCRDProvider, "discover_crds", fake_discover)

    result = _invoke("search", "widget", "--config", str(config_path), "--source", "cluster-crds")

    assert result.exit_code == 0, result.output
    assert hints == ["staging"]
    assert "Widget" in result.output


def test_build_crd_provider_follows_cluster_settings(tmp_path: Path) -> None:
    config_path = tmp_path / "catalog.yaml"
    base = "sources:\n  - {id: kubernetes, path: schemas}\n"

    config_path.write_text(base, encoding="utf-8")
    assert build_crd_provider(load_configuration(config_path)) is None

    config_path.write_text(base + "cluster: {crd_manifests: [crds.yaml]}\n", encoding="utf-8")
    assert isinstance(build_crd_provider(load_configuration(config_path)), ManifestCRDProvider)

    config_path.write_text(
        base + "cluster: {enabled: true, crd_manifests: [crds.yaml]}\n", encoding="utf-8"
    )
    assert isinstance(build_crd_provider(load_configuration(config_path)), CompositeCRDProvider)

    config_path.write_text(base + "cluster: {enabled: true}\n", encoding="utf-8")
    assert isinstance(build_crd_provider(load_configuration(config_path)), KubernetesCRDProvider)
