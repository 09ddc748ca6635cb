"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "catalog.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Schema catalog configuration for kube-schema-catalog.
# Replace every <REQUIRED> placeholder before running any catalog command.
# Relative paths are resolved against the directory holding this file.

sources:
  # Each source points at a directory of OpenAPI definition documents.
  # Versioned sources hold one subdirectory per version, each with a _definitions.json.
  # Legacy sources hold a single _definitions.json at the top level.
  - id: kubernetes
    name: Kubernetes
    path: "<REQUIRED>"
    enabled: true
  # - id: openshift
  #   name: OpenShift
  #   path: "<OPTIONAL>"
  #   enabled: false
  #   versioned: true

cluster:
  # Discover CustomResourceDefinitions from the live cluster via kubeconfig.
  enabled: false
  # context: "<OPTIONAL>"
  # kubeconfig: "<OPTIONAL>"
  # CRD manifests read from disk in addition to (or instead of) the cluster.
  crd_manifests: []

search:
  # Source used when a cross-source search fails.
  primary_source: kubernetes

logging:
  # One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
  level: WARNING
"""


def build_placeholder_configuration() -> str:
    """Build a YAML catalog configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder catalog configuration to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Catalog configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
