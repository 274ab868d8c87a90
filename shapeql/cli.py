# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Command-line interface for shapeql."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shapeql import __version__
from shapeql.core.config import Config
from shapeql.core.errors import ShapeQLError

console = Console()


def _enable_debug_logging() -> None:
    logger = logging.getLogger('shapeql')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def _load_config(path: str) -> Config:
    try:
        return Config.from_yaml(path)
    except Exception as e:
        console.print(f"[red]Config error:[/red] {escape(str(e))}")
        raise SystemExit(1)


@click.group()
@click.version_option(version=__version__, prog_name="shapeql")
def cli():
    """shapeql - GraphQL gateway for AWS service APIs.

    Compiles service API descriptions into a GraphQL schema at startup and
    serves it; every operation field calls the matching AWS API.

    \b
    Quick start:
        shapeql compile -c config.yaml
        shapeql serve -c config.yaml
    """
    pass


@cli.command()
@click.option(
    "--config", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to config YAML file.",
)
@click.option("--host", "-h", default=None, help="Host address to bind the server to.")
@click.option("--port", "-p", default=None, type=int, help="Port to bind the server to.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def serve(config: str, host: Optional[str], port: Optional[int], debug: bool):
    """Compile the configured services and start the GraphQL server.

    \b
    Examples:
        shapeql serve -c config.yaml
        shapeql serve -c config.yaml --port 8080 --debug
    """
    from shapeql.bootstrap import compile_from_config
    from shapeql.server.app import create_app, run_server

    if debug:
        _enable_debug_logging()

    cfg = _load_config(config)

    with console.status("Compiling schema..."):
        try:
            assembled = compile_from_config(cfg)
        except ShapeQLError as e:
            console.print(f"[red]Compilation failed:[/red] {escape(str(e))}")
            raise SystemExit(1)

    console.print(
        f"[green]Compiled[/green] {len(assembled.services)} services, "
        f"{len(assembled.types)} types"
    )
    host = host or cfg.server.host
    port = port or cfg.server.port
    console.print(f"GraphQL endpoint: [bold]http://{host}:{port}/graphql[/bold]")
    run_server(create_app(assembled, cfg), host=host, port=port)


@cli.command(name="compile")
@click.option(
    "--config", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to config YAML file.",
)
@click.option("--output", "-o", default=None, type=click.Path(), help="Write the SDL to a file.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def compile_command(config: str, output: Optional[str], debug: bool):
    """Compile the configured services and print the schema SDL."""
    from shapeql.bootstrap import compile_from_config

    if debug:
        _enable_debug_logging()

    cfg = _load_config(config)
    try:
        assembled = compile_from_config(cfg)
    except ShapeQLError as e:
        console.print(f"[red]Compilation failed:[/red] {escape(str(e))}")
        raise SystemExit(1)

    sdl = assembled.print_schema()
    if output:
        Path(output).write_text(sdl + "\n")
        console.print(f"[dim]Schema written to {output}[/dim]")
    else:
        click.echo(sdl)

    for conflict in assembled.conflicts:
        if conflict.renamed_to:
            outcome = f"renamed to {conflict.renamed_to}"
        else:
            outcome = "dropped"
        console.print(
            f"[yellow]WARN[/yellow] type {conflict.name} {escape(str(list(conflict.kept_fields)))}: "
            f"other shape {escape(str(list(conflict.other_fields)))} {outcome}"
        )


@cli.command()
@click.option(
    "--source",
    type=click.Choice(["botocore", "directory"]),
    default="botocore",
    help="Where to read descriptions from.",
)
@click.option("--path", default=None, type=click.Path(), help="Description directory (directory source).")
def services(source: str, path: Optional[str]):
    """List available service namespaces and API versions."""
    from shapeql.catalog.descriptions import load_botocore_descriptions, load_descriptions_from_dir

    if source == "directory":
        if not path:
            console.print("[red]--path is required with --source directory[/red]")
            raise SystemExit(1)
        try:
            descriptions = load_descriptions_from_dir(path)
        except ShapeQLError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise SystemExit(1)
    else:
        descriptions = load_botocore_descriptions()

    versions: dict[str, list[str]] = {}
    identifiers: dict[str, str] = {}
    for d in descriptions:
        versions.setdefault(d.endpoint_namespace, []).append(d.api_version)
        identifiers.setdefault(d.endpoint_namespace, d.service_identifier)

    table = Table(title="Services")
    table.add_column("Namespace", style="cyan")
    table.add_column("Service")
    table.add_column("API versions", style="dim")
    for namespace in sorted(versions):
        table.add_row(namespace, identifiers[namespace], ", ".join(sorted(versions[namespace])))

    console.print(table)


@cli.command()
@click.option(
    "--config", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to config YAML file.",
)
def validate(config: str):
    """Validate a config file and check that it compiles."""
    from shapeql.bootstrap import compile_from_config

    console.print(f"Validating: {config}\n")

    try:
        cfg = Config.from_yaml(config)
        console.print("[green]OK[/green] Config file parsed")
    except Exception as e:
        console.print(f"[red]FAIL[/red] Config parsing: {escape(str(e))}")
        raise SystemExit(1)

    if not cfg.services:
        console.print("[yellow]WARN[/yellow] No services configured, only sdkVersion will be served")

    try:
        assembled = compile_from_config(cfg)
    except ShapeQLError as e:
        console.print(f"[red]FAIL[/red] Compilation: {escape(str(e))}")
        raise SystemExit(1)

    console.print(f"\nServices ({len(assembled.services)}):")
    for service in assembled.services:
        operations = len(assembled.endpoints.get(service.endpoint_namespace, []))
        console.print(
            f"  [green]OK[/green] {service.endpoint_namespace} "
            f"({service.api_version}): {operations} operations"
        )
    if assembled.conflicts:
        console.print(f"[yellow]WARN[/yellow] {len(assembled.conflicts)} type conflicts")
    console.print()


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
