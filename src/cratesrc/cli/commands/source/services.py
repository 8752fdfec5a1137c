# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helper services used by the source management CLI commands."""

from __future__ import annotations

from pathlib import Path

from ....config import SourcesConfig
from ....errors import CrateSourcesError
from ....fetched import FetchedSources
from ....models import SourceDeclaration
from ....prefetch import complete_source, default_prefetchers, prefetcher_for
from ....workspace import DiscoveryResult
from ...shared import CLIError, CLILogger
from .models import SourceCLIOptions


def add_source(
    options: SourceCLIOptions,
    source: SourceDeclaration,
    *,
    name: str | None,
    logger: CLILogger,
) -> str:
    """Complete ``source`` and store it in the configuration.

    Args:
        options: Normalized CLI options.
        source: Declaration as given on the command line.
        name: Explicit name, or ``None`` to infer it.
        logger: Logger used to emit user-facing messages.

    Returns:
        str: Name under which the source was stored.

    Raises:
        CLIError: Raised when prefetching or updating the configuration fails.
    """

    settings = options.settings
    try:
        config = SourcesConfig.read_from_or_default(options.config_path)
        name = config.resolve_name(name, source)
        if not source.is_complete:
            prefetchers = default_prefetchers(
                url_executable=settings.prefetch_url_executable,
                git_executable=settings.prefetch_git_executable,
            )
            source = complete_source(source, prefetcher_for(source, prefetchers))
        stored = config.add_source(name, source)
        config.write_to(options.config_path)
    except CrateSourcesError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    logger.ok(f"Added source '{stored}': {source}")
    return stored


def remove_source(options: SourceCLIOptions, name: str, *, logger: CLILogger) -> SourceDeclaration:
    """Remove the source called ``name`` from the configuration."""

    try:
        config = SourcesConfig.read_from(options.config_path)
        removed = config.remove_source(name)
        config.write_to(options.config_path)
    except CrateSourcesError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    logger.ok(f"Removed source '{name}': {removed}")
    return removed


def list_sources(options: SourceCLIOptions, *, logger: CLILogger) -> SourcesConfig:
    """Print every configured source, one per line."""

    try:
        config = SourcesConfig.read_from_or_default(options.config_path)
    except CrateSourcesError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    if not config.sources:
        logger.info(f"No sources configured in {options.config_path}.")
    for name in sorted(config.sources):
        logger.echo(f"{name:<24} {config.sources[name]}")
    return config


def generate_descriptor(options: SourceCLIOptions, *, logger: CLILogger) -> Path:
    """Regenerate the descriptor file next to the configuration."""

    fetched = FetchedSources(options.config_path, options.settings)
    try:
        path = fetched.regenerate_descriptor()
    except CrateSourcesError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    logger.ok(f"Generated {path}")
    return path


def fetch_sources(options: SourceCLIOptions, *, logger: CLILogger) -> Path:
    """Regenerate the descriptor and materialize every source."""

    fetched = FetchedSources(options.config_path, options.settings)
    try:
        link = fetched.fetch()
    except CrateSourcesError as exc:
        logger.fail(_with_notes(exc))
        raise CLIError(str(exc)) from exc
    logger.ok(f"Sources available at {link}")
    return link


def discover_members(options: SourceCLIOptions, *, logger: CLILogger) -> DiscoveryResult:
    """Print the manifest path of every materialized source."""

    fetched = FetchedSources(options.config_path, options.settings)
    try:
        result = fetched.discover_members()
    except CrateSourcesError as exc:
        logger.fail(_with_notes(exc))
        raise CLIError(str(exc)) from exc
    for manifest in result.manifests:
        logger.echo(str(manifest))
    return result


def _with_notes(exc: BaseException) -> str:
    notes = getattr(exc, "__notes__", ())
    return "\n".join([str(exc), *notes])


__all__ = [
    "add_source",
    "discover_members",
    "fetch_sources",
    "generate_descriptor",
    "list_sources",
    "remove_source",
]
