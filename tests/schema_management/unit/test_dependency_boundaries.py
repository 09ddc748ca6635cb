"""Boundary tests for package dependencies."""

from __future__ import annotations

from pathlib import Path


def _package_root() -> Path:
    return Path(__file__).resolve().parents[3] / "src" / "kube_schema_catalog"


def test_schema_core_does_not_import_cluster_or_service_layers() -> None:
    forbidden_import_fragments = (
        "kubernetes",
        "kube_schema_catalog.cluster_crds",
        "kube_schema_catalog.catalog_service",
        "kube_schema_catalog.cli",
    )
    core_dirs = ("schema_management", "resource_index", "schema_sources")

    for directory in core_dirs:
        for module_path in (_package_root() / directory).glob("*.py"):
            text = module_path.read_text(encoding="utf-8")
            for line in text.splitlines():
                if not line.startswith(("import ", "from ")):
                    continue
                for fragment in forbidden_import_fragments:
                    assert (
                        f" {fragment}" not in line
                    ), f"Forbidden core dependency in {module_path}: {line}"


def test_only_cluster_provider_imports_kubernetes_client() -> None:
    importers = sorted(
        path.relative_to(_package_root()).as_posix()
        for path in _package_root().rglob("*.py")
        if "from kubernetes import" in path.read_text(encoding="utf-8")
        or "import kubernetes" in path.read_text(encoding="utf-8")
    )

    assert importers == ["cluster_crds/cluster_crd_provider.py"]
