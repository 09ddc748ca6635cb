"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

import click

from kube_schema_catalog.catalog_service import SchemaCatalogService
from kube_schema_catalog.cluster_crds import (
    ClusterCRDProvider,
    CompositeCRDProvider,
    KubernetesCRDProvider,
    ManifestCRDProvider,
)
from kube_schema_catalog.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from kube_schema_catalog.configuration.loader import LOG_LEVELS
from kube_schema_catalog.resource_index import FlattenedResource
from kube_schema_catalog.results_rendering import (
    render_json,
    render_resource_table,
    render_source_table,
    render_tree_json,
    render_tree_text,
)
from kube_schema_catalog.schema_sources import SchemaSource, SchemaSourceError

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


config_option = click.option(
    "--config",
    "config_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML/JSON catalog configuration file",
)

output_format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="kube-schema-catalog")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the log level from the configuration file",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Browse Kubernetes resource schemas from OpenAPI definitions and CRDs."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper() if log_level else None


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML catalog configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML catalog configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="sources")
@config_option
@output_format_option
@click.pass_context
def list_sources(ctx: click.Context, config_path: str, output_format: str) -> None:
    """List the registered schema sources with their resource counts."""
    service = _open_catalog(ctx, config_path)
    sources = [
        (source, service.get_source_stats(source.id))
        for source in service.get_available_sources()
    ]
    if output_format == "json":
        payload = [
            {**source.to_dict(), "stats": stats.to_dict() if stats else None}
            for source, stats in sources
        ]
        click.echo(render_json(payload))
        return
    click.echo(render_source_table(sources))


@cli.command(name="resources")
@config_option
@output_format_option
@click.option("--source", "source_id", default=None, help="Only list resources of this source")
@click.pass_context
def list_resources(
    ctx: click.Context, config_path: str, output_format: str, source_id: str | None
) -> None:
    """List indexed resources, from one source or de-duplicated across all."""
    service = _open_catalog(ctx, config_path)
    if source_id is None:
        resources = service.get_all_resources()
    else:
        resources = service.get_resources_from_source(source_id)
    _echo_resources(resources, output_format)


@cli.command(name="search")
@config_option
@output_format_option
@click.argument("query")
@click.option("--source", "source_id", default=None, help="Only search this source")
@click.option(
    "--ranked",
    is_flag=True,
    default=False,
    help="Order exact kind matches first, then kind prefix matches",
)
@click.pass_context
def search(  # pylint: disable=too-many-arguments
    ctx: click.Context,
    config_path: str,
    output_format: str,
    query: str,
    source_id: str | None,
    ranked: bool,
) -> None:
    """Search resources by kind, apiVersion or description."""
    service = _open_catalog(ctx, config_path)
    if source_id is None:
        resources = service.search_all_sources(query, ranked=ranked)
    else:
        resources = service.search_in_source(source_id, query, ranked=ranked)
    _echo_resources(resources, output_format)


@cli.command(name="tree")
@config_option
@output_format_option
@click.argument("resource_key")
@click.option("--source", "source_id", default=None, help="Source holding the resource")
@click.option(
    "--descriptions",
    is_flag=True,
    default=False,
    help="Include field descriptions in text output",
)
@click.pass_context
def show_tree(  # pylint: disable=too-many-arguments
    ctx: click.Context,
    config_path: str,
    output_format: str,
    resource_key: str,
    source_id: str | None,
    descriptions: bool,
) -> None:
    """Print the resolved field tree of one resource."""
    configuration = _load(config_path)
    service = _open_catalog(ctx, config_path, configuration)
    source = source_id or configuration.search.primary_source
    tree = service.get_resource_schema_tree(source, resource_key)
    if tree is None:
        raise CliError(f"Resource not found: {resource_key} in source: {source}")
    if output_format == "json":
        click.echo(render_tree_json(tree))
        return
    click.echo(render_tree_text(tree, show_descriptions=descriptions))


@cli.command(name="raw")
@config_option
@click.argument("resource_key", required=False)
@click.option("--source", "source_id", default=None, help="Source holding the resource")
@click.option(
    "--cache-key",
    "cache_key",
    default=None,
    help="Print the whole cached document stored under this cache key instead",
)
@click.pass_context
def show_raw(
    ctx: click.Context,
    config_path: str,
    resource_key: str | None,
    source_id: str | None,
    cache_key: str | None,
) -> None:
    """Print the unresolved definition of a resource, or a cached document."""
    if (resource_key is None) == (cache_key is None):
        raise CliError("Provide exactly one of RESOURCE_KEY or --cache-key.")
    configuration = _load(config_path)
    service = _open_catalog(ctx, config_path, configuration)
    if cache_key is not None:
        document = service.get_raw_cache_document(cache_key)
        if document is None:
            raise CliError(f"Cache key not found: {cache_key}")
        click.echo(render_json(document))
        return
    source = source_id or configuration.search.primary_source
    raw = service.get_raw_resource_schema(source, resource_key)
    if raw is None:
        raise CliError(f"Resource not found: {resource_key} in source: {source}")
    click.echo(render_json(raw))


def build_crd_provider(configuration: Configuration) -> ClusterCRDProvider | None:
    """Build the CRD provider chain the configuration asks for, or None."""
    cluster = configuration.cluster
    providers: list[ClusterCRDProvider] = []
    if cluster.enabled:
        providers.append(
            KubernetesCRDProvider(
                kubeconfig_path=str(cluster.kubeconfig) if cluster.kubeconfig else None
            )
        )
    if cluster.crd_manifests:
        providers.append(ManifestCRDProvider(cluster.crd_manifests))
    if not providers:
        return None
    if len(providers) == 1:
        return providers[0]
    return CompositeCRDProvider(providers)


def build_catalog_service(configuration: Configuration) -> SchemaCatalogService:
    """Register the configured sources and load them, including CRDs when configured."""
    service = SchemaCatalogService(
        crd_provider=build_crd_provider(configuration),
        primary_source_id=configuration.search.primary_source,
    )
    for settings in configuration.sources:
        service.register_schema_source(
            SchemaSource(
                id=settings.id,
                name=settings.name,
                storage_location=str(settings.path),
                enabled=settings.enabled,
                versioned=settings.versioned,
            )
        )
    service.initialize()
    if configuration.cluster.discovers_crds:
        service.initialize_crds(configuration.cluster.context)
    return service


def _load(config_path: str) -> Configuration:
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _open_catalog(
    ctx: click.Context, config_path: str, configuration: Configuration | None = None
) -> SchemaCatalogService:
    configuration = configuration or _load(config_path)
    _configure_logging(ctx.obj.get("log_level") or configuration.logging.level)
    try:
        return build_catalog_service(configuration)
    except SchemaSourceError as exc:
        raise CliError(str(exc)) from exc


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("kube_schema_catalog").setLevel(level)
    logger.debug("Log level set to %s", level)


def _echo_resources(resources: Sequence[FlattenedResource], output_format: str) -> None:
    if output_format == "json":
        click.echo(render_json([resource.to_dict() for resource in resources]))
        return
    click.echo(render_resource_table(resources))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False, obj={})
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
