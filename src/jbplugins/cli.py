# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line interface for inspecting resolved plugin catalogs."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from .catalog import (
    CatalogError,
    CatalogIndex,
    PackageDescriptor,
    PackageDescriptorSet,
    PluginCatalogLoader,
    Resolved,
    plugin_content_hash,
)
from .config import ConfigError, ResolverConfig, load_config
from .logging import fail, info, ok, render, section, warn


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLIState:
    """Options shared by every sub-command."""

    config: ResolverConfig
    use_color: bool
    use_emoji: bool

    def loader(self) -> PluginCatalogLoader:
        """Return a catalog loader built from the active configuration."""

        return self.config.create_loader()


app = typer.Typer(help="Resolve content-addressed plugin catalogs.", no_args_is_help=True)


@app.callback()
def main(
    ctx: typer.Context,
    root: Annotated[Path, typer.Option("--root", help="Project directory holding configuration files.")] = Path("."),
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", help="TOML file used instead of .jbplugins.toml."),
    ] = None,
    data_root: Annotated[Optional[Path], typer.Option("--data-root", help="Catalog data directory.")] = None,
    assignments: Annotated[
        Optional[list[str]],
        typer.Option("--set", help="Override a configuration value, e.g. resolution.default_channel=eap."),
    ] = None,
    jobs: Annotated[Optional[int], typer.Option("--jobs", "-j", min=1, help="Worker threads for loading.")] = None,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Load configuration shared by all commands."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    use_emoji = not no_emoji
    try:
        config = load_config(root.resolve(), config_file=config_file, assignments=assignments or ())
        if data_root is not None:
            config.data_root = data_root.resolve()
        if jobs is not None:
            config.jobs = jobs
    except ConfigError as exc:
        fail(str(exc), use_emoji=use_emoji, use_color=not no_color)
        raise typer.Exit(code=2) from exc
    ctx.obj = CLIState(config=config, use_color=not no_color, use_emoji=use_emoji)


@app.command("list")
def list_command(ctx: typer.Context) -> None:
    """List every indexed plugin with its channels."""

    state: CLIState = ctx.obj
    with _reporting_errors(state):
        loader = state.loader()
        packages = loader.load_packages() if state.config.resolution.strict else loader.load_report().packages
    table = Table(title="Plugins")
    table.add_column("Plugin")
    table.add_column("Versions", justify="right")
    table.add_column("Channels")
    table.add_column("Latest")
    for plugin_id, descriptor_set in sorted(packages.items()):
        table.add_row(
            plugin_id,
            str(len(descriptor_set.versions)),
            ", ".join(f"{channel}={item.version}" for channel, item in sorted(descriptor_set.channels.items())),
            _latest_label(descriptor_set),
        )
    render(table, use_color=state.use_color, use_emoji=state.use_emoji)


@app.command("show")
def show_command(
    ctx: typer.Context,
    plugin_id: Annotated[str, typer.Argument(help="Plugin identifier as listed in the index.")],
    version: Annotated[Optional[str], typer.Option("--version", help="Select an exact version.")] = None,
    channel: Annotated[Optional[str], typer.Option("--channel", help="Select a release channel.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON instead of a table.")] = False,
) -> None:
    """Show the descriptor selected for a plugin."""

    state: CLIState = ctx.obj
    with _reporting_errors(state):
        if version is not None and channel is not None:
            raise CLIError("--version and --channel are mutually exclusive", exit_code=2)
        descriptor_set = state.loader().load_plugin(plugin_id)
        descriptor = descriptor_set.select(version=version, channel=channel)
    if as_json:
        typer.echo(json.dumps(descriptor.to_dict(), indent=2, sort_keys=True))
        return
    render(_descriptor_table(descriptor), use_color=state.use_color, use_emoji=state.use_emoji)


@app.command("check")
def check_command(ctx: typer.Context) -> None:
    """Resolve the whole catalog and report plugins that fail."""

    state: CLIState = ctx.obj
    with _reporting_errors(state):
        loader = state.loader()
        index = loader.load_index()
        report = loader.load_report()
        orphans = loader.orphaned_documents(index=index)
    section("Catalog check", use_color=state.use_color)
    for plugin_id, exc in sorted(report.failures.items()):
        fail(f"{plugin_id}: {exc}", use_emoji=state.use_emoji, use_color=state.use_color)
    unresolved = [plugin_id for plugin_id, item in report.packages.items() if not item.latest_resolution.ok]
    if unresolved:
        warn(
            f"{len(unresolved)} plugin(s) have no {state.config.resolution.default_channel} channel",
            use_emoji=state.use_emoji,
            use_color=state.use_color,
        )
    for path in orphans:
        warn(f"unreferenced metadata document {path}", use_emoji=state.use_emoji, use_color=state.use_color)
    info(f"checksum {loader.compute_checksum()}", use_emoji=state.use_emoji, use_color=state.use_color)
    if report.failures:
        raise typer.Exit(code=1)
    ok(f"resolved {report.total} plugin(s)", use_emoji=state.use_emoji, use_color=state.use_color)


@app.command("path")
def path_command(
    ctx: typer.Context,
    plugin_id: Annotated[str, typer.Argument(help="Plugin identifier.")],
    from_index: Annotated[bool, typer.Option("--from-index", help="Use the hash recorded in the index.")] = False,
) -> None:
    """Print the metadata document path for a plugin."""

    state: CLIState = ctx.obj
    with _reporting_errors(state):
        loader = state.loader()
        content_hash = _hash_for(loader.load_index(), plugin_id) if from_index else plugin_content_hash(plugin_id)
        typer.echo(str(loader.layout.metadata_path(content_hash)))


def _hash_for(index: CatalogIndex, plugin_id: str) -> str:
    try:
        return index[plugin_id]
    except KeyError as exc:
        raise CLIError(f"plugin '{plugin_id}' is not present in the catalog index") from exc


def _latest_label(descriptor_set: PackageDescriptorSet) -> str:
    resolution = descriptor_set.latest_resolution
    return resolution.descriptor.version if isinstance(resolution, Resolved) else "-"


def _descriptor_table(descriptor: PackageDescriptor) -> Table:
    table = Table(title=descriptor.name, show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    for key, value in descriptor.to_dict().items():
        if value is None:
            rendered = "-"
        elif isinstance(value, list):
            rendered = ", ".join(value)
        else:
            rendered = str(value)
        table.add_row(key, rendered)
    return table


@contextmanager
def _reporting_errors(state: CLIState) -> Iterator[None]:
    """Translate catalog and CLI errors into failure output and an exit code."""

    try:
        yield
    except CLIError as exc:
        fail(str(exc), use_emoji=state.use_emoji, use_color=state.use_color)
        raise typer.Exit(code=exc.exit_code) from exc
    except CatalogError as exc:
        fail(str(exc), use_emoji=state.use_emoji, use_color=state.use_color)
        raise typer.Exit(code=1) from exc


__all__ = ["CLIError", "CLIState", "app"]
