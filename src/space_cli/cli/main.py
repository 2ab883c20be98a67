"""
Space CLI - Main entry point.

Provides commands for:
- Storing the login token
- Scaffolding new node projects
- Building and publishing nodes
- Generating manifests interactively
"""

from __future__ import annotations

import functools
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from space_cli.clients import CatalogClient, StorageClient
from space_cli.config import Settings, config_path, get_settings, load_settings, save_settings
from space_cli.errors import ConfigError, SpaceError
from space_cli.observability import setup_logging
from space_cli.project import Toolchain, build_project, locate_project
from space_cli.scaffold import create_project
from space_cli.schema import LICENSE_TYPES
from space_cli.upload import UploadOrchestrator, UploadRequest, UploadResult, UploadStage

from .prompts import PRICE, read_format, read_publish_options


logger = logging.getLogger("space_cli")


def handle_errors(func):
    """Report pipeline errors on stderr and exit non-zero."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SpaceError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
    return wrapper


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Only log errors")
@click.option(
    "--log-level",
    envvar="SPACE_LOG_LEVEL",
    default="WARNING",
    show_default=True,
    help="Log level when neither -v nor -q is given",
)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, log_level: str, json_logs: bool):
    """Space - build and publish WASM nodes."""
    ctx.ensure_object(dict)

    if verbose:
        log_level = "DEBUG"
    elif quiet:
        log_level = "ERROR"
    setup_logging(log_level, json_format=json_logs)

    ctx.obj["verbose"] = verbose


# ==============================================================================
# Account Commands
# ==============================================================================

@cli.command()
@handle_errors
def login():
    """Login by storing the authorization token locally."""
    try:
        defaults = load_settings(required=False)
    except ConfigError as e:
        logger.warning(f"Ignoring unreadable config: {e}")
        defaults = Settings()

    authorization = click.prompt(
        "Authorization token",
        default=defaults.login_defaults()["authorization"] or None,
        show_default=False,
        hide_input=True,
    )

    settings = defaults.model_copy(update={"authorization": authorization.strip()})
    path = save_settings(settings, config_path())
    click.echo(f"Wrote settings to {path}")


cli.add_command(login, name="init")


# ==============================================================================
# Project Commands
# ==============================================================================

@cli.command()
@click.argument("name")
@click.option(
    "--toolchain", "-t",
    type=click.Choice([t.value for t in Toolchain]),
    help="Toolchain of the new project (asked when omitted)",
)
@handle_errors
def new(name: str, toolchain: Optional[str]):
    """
    Create a new WASM project.

    NAME: Project name, also the directory created
    """
    if toolchain is None:
        toolchain = click.prompt(
            "Language",
            type=click.Choice([t.value for t in Toolchain]),
            default=Toolchain.RUST.value,
        )

    create_project(name, Toolchain(toolchain))
    click.echo(f"Created new project `{name}`")


@cli.command()
@handle_errors
def generate():
    """Generate a manifest from a dialogue and print it."""
    format = read_format(None)
    click.echo(format.to_json())


# ==============================================================================
# Publish Commands
# ==============================================================================

def publish_options(func):
    """Options shared by the commands that publish a node."""
    options = [
        click.option("--public/--private", "is_public", default=None,
                     help="Visibility (asked when omitted)"),
        click.option("--license", "license_label", type=click.Choice(list(LICENSE_TYPES)),
                     help="License (asked when omitted)"),
        click.option("--price-one-time", type=PRICE,
                     help="One-time price (asked when omitted)"),
        click.option("--price-per-run", type=PRICE,
                     help="Price per run (asked when omitted)"),
        click.option("--no-browser", is_flag=True,
                     help="Do not open the node page after publishing"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


class UploadSpinner:
    """rich status line whose text follows the upload stages."""

    def __init__(self, console: Console):
        self.console = console
        self.message = ""
        self.status = None

    def __call__(self, message: str):
        self.message = message
        self.status = self.console.status(message)
        return self.status

    def on_stage(self, stage: UploadStage) -> None:
        if self.status is not None:
            self.status.update(f"{self.message} ({stage.value.replace('_', ' ')})")


def publish(
    artifact: Path,
    source: Path,
    manifest: Optional[Path],
    settings: Settings,
    is_public: Optional[bool],
    license_label: Optional[str],
    price_one_time: Optional[float],
    price_per_run: Optional[float],
) -> UploadResult:
    """Run one upload transaction with the configured clients."""
    storage = StorageClient(settings.endpoint, settings.authorization, timeout=settings.timeout)
    catalog = CatalogClient(
        settings.endpoint,
        settings.apikey,
        settings.authorization,
        timeout=settings.timeout,
    )
    orchestrator = UploadOrchestrator(
        storage,
        catalog,
        bucket=settings.bucket,
        table=settings.table,
    )

    request = UploadRequest(
        artifact=artifact,
        source=source,
        manifest=manifest,
        dialogue=None if manifest is not None else read_format,
        options=lambda _format: read_publish_options(
            is_public=is_public,
            license_label=license_label,
            price_one_time=price_one_time,
            price_per_run=price_per_run,
        ),
    )

    spinner = UploadSpinner(Console(stderr=True))
    orchestrator.on_stage(spinner.on_stage)
    result = orchestrator.run(request, progress=spinner)

    data = result.node.data
    click.echo(f"Finished uploading {data.display_name}@{data.version}!")
    return result


def open_dashboard(settings: Settings, result: UploadResult) -> None:
    url = f"{settings.dashboard_url.rstrip('/')}/{result.node.unique_node_id}"
    logger.info(f"Opening {url}")
    click.launch(url)


@cli.command()
@publish_options
@handle_errors
def upload(is_public, license_label, price_one_time, price_per_run, no_browser):
    """Build the current project and publish it."""
    settings = get_settings()

    location = locate_project()
    click.echo(f"Building {location.toolchain.value} project in {location.root}")
    output = build_project(location, timeout=settings.build_timeout)

    result = publish(
        output.artifact,
        output.source,
        None,
        settings,
        is_public,
        license_label,
        price_one_time,
        price_per_run,
    )
    if not no_browser:
        open_dashboard(settings, result)


@cli.command()
@click.argument("artifact", type=click.Path(path_type=Path))
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("manifest", type=click.Path(path_type=Path), required=False)
@publish_options
@handle_errors
def deploy(
    artifact: Path,
    source: Path,
    manifest: Optional[Path],
    is_public,
    license_label,
    price_one_time,
    price_per_run,
    no_browser,
):
    """
    Publish a built WASM binary, its source code and optional manifest.

    Without MANIFEST the naming dialogue runs to author one.
    """
    settings = get_settings()
    result = publish(
        artifact,
        source,
        manifest,
        settings,
        is_public,
        license_label,
        price_one_time,
        price_per_run,
    )
    if not no_browser:
        open_dashboard(settings, result)


cli.add_command(deploy, name="manual")


# ==============================================================================
# Entry Point
# ==============================================================================

def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
