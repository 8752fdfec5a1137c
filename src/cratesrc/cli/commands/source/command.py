# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI commands for declaring, fetching, and listing out-of-tree sources."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from ....errors import CrateSourcesError
from ....models import GitSource, NixSource, RegistrySource
from ...shared import CLIError, CLILogger, build_cli_logger
from .models import CONFIG_OPTION, DEBUG_OPTION, EMOJI_OPTION, NAME_OPTION, SourceCLIOptions
from .services import (
    add_source,
    discover_members,
    fetch_sources,
    generate_descriptor,
    list_sources,
    remove_source,
)

source_app = typer.Typer(
    name="source",
    help="Manage out-of-tree sources declared in cratesrc.json.",
    no_args_is_help=True,
)
add_app = typer.Typer(
    name="add",
    help="Add a source, prefetching its hash when needed.",
    no_args_is_help=True,
)
source_app.add_typer(add_app, name="add")


def _prepare(config: Path | None, *, emoji: bool, debug: bool) -> tuple[SourceCLIOptions, CLILogger]:
    logger = build_cli_logger(emoji=emoji, debug=debug)
    try:
        options = SourceCLIOptions.from_cli(config, emoji=emoji, debug=debug)
    except CrateSourcesError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc
    return options, logger


def _add(
    source_factory: type[RegistrySource | GitSource | NixSource],
    fields: dict[str, object],
    *,
    config: Path | None,
    name: str | None,
    emoji: bool,
    debug: bool,
) -> None:
    options, logger = _prepare(config, emoji=emoji, debug=debug)
    try:
        source = source_factory.model_validate(fields)
    except ValidationError as exc:
        message = "; ".join(error["msg"] for error in exc.errors())
        logger.fail(f"Invalid source: {message}")
        raise typer.Exit(code=2) from exc
    try:
        add_source(options, source, name=name, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc


@add_app.command("cratesio")
def add_cratesio(
    crate_name: Annotated[str, typer.Argument(help="Name of the crate on crates.io.")],
    version: Annotated[str, typer.Argument(help="Exact semantic version of the crate.")],
    config: CONFIG_OPTION = None,
    name: NAME_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Add a crates.io source and prefetch its hash."""

    _add(
        RegistrySource,
        {"name": crate_name, "version": version},
        config=config,
        name=name,
        emoji=emoji,
        debug=debug,
    )


@add_app.command("git")
def add_git(
    url: Annotated[str, typer.Argument(help="URL of the git repository.")],
    rev: Annotated[str, typer.Argument(help="Commit to check out.")],
    ref: Annotated[str | None, typer.Option("--ref", help="Branch containing the commit.")] = None,
    config: CONFIG_OPTION = None,
    name: NAME_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Add a git source and prefetch its hash."""

    _add(
        GitSource,
        {"url": url, "rev": rev, "ref": ref},
        config=config,
        name=name,
        emoji=emoji,
        debug=debug,
    )


@add_app.command("nix")
def add_nix(
    file: Annotated[str, typer.Argument(help="Nix file, relative to the project, or <channel>.")],
    attr: Annotated[str | None, typer.Option("--attr", "-A", help="Attribute to select.")] = None,
    config: CONFIG_OPTION = None,
    name: NAME_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Add a source produced by a Nix expression; it is refreshed on every use."""

    _add(NixSource, {"file": file, "attr": attr}, config=config, name=name, emoji=emoji, debug=debug)


@source_app.command("remove")
def remove(
    source_name: Annotated[str, typer.Argument(help="Name of the source to remove.")],
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Remove a source from the configuration."""

    options, logger = _prepare(config, emoji=emoji, debug=debug)
    try:
        remove_source(options, source_name, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc


@source_app.command("list")
def list_(
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """List the configured sources."""

    options, logger = _prepare(config, emoji=emoji, debug=debug)
    try:
        list_sources(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc


@source_app.command("generate")
def generate(
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Regenerate the sources descriptor file without fetching."""

    options, logger = _prepare(config, emoji=emoji, debug=debug)
    try:
        generate_descriptor(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc


@source_app.command("fetch")
def fetch(
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Regenerate the descriptor file and materialize every source."""

    options, logger = _prepare(config, emoji=emoji, debug=debug)
    try:
        fetch_sources(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc


@source_app.command("members")
def members(
    config: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Print the Cargo.toml of every materialized source, fetching when stale."""

    options, logger = _prepare(config, emoji=emoji, debug=debug)
    try:
        discover_members(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc


__all__ = ["source_app"]
