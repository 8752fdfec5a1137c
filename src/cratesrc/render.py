# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render the Nix descriptor file from the configured source declarations."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Final

from jinja2 import Environment, StrictUndefined, TemplateError

from .config import SourcesConfig
from .errors import ConfigError
from .models import NixSource, SourceDeclaration
from .settings import SourcesSettings

TOOL_NAME: Final[str] = "cratesrc"
GENERATED_MARKER: Final[str] = f"@generated by {TOOL_NAME}"
SOURCES_TEMPLATE: Final[str] = "sources.nix.j2"


@dataclass(frozen=True, slots=True)
class _RenderEntry:
    name: str
    kind: str
    source: SourceDeclaration
    expression: str | None = None


def nix_string(value: str) -> str:
    """Escape ``value`` for use inside a double-quoted Nix string."""

    return value.replace("\\", "\\\\").replace('"', '\\"').replace("${", "\\${")


def nix_import_expression(source: NixSource) -> str:
    """Return the Nix expression importing ``source``."""

    file = source.file
    if file.startswith("<") and file.endswith(">"):
        target = file
    elif file.startswith(("/", "./", "../")):
        target = file
    else:
        target = f"./{file}"
    if source.attr:
        return f"(import {target} {{ }}).{source.attr}"
    return f"import {target} {{ }}"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    environment = Environment(
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )
    environment.filters["nix_str"] = nix_string
    return environment


@lru_cache(maxsize=4)
def _template_text(name: str) -> str:
    return resources.files("cratesrc").joinpath("templates", name).read_text(encoding="utf-8")


def render_sources_nix(config: SourcesConfig, settings: SourcesSettings | None = None) -> str:
    """Return the descriptor file text for ``config``.

    Args:
        config: Configuration whose declarations should be rendered.
        settings: Settings naming the target attribute and output link.

    Returns:
        str: Nix source text carrying :data:`GENERATED_MARKER`.

    Raises:
        ConfigError: If a hashable declaration has no hash yet, or rendering fails.
    """

    active = settings or SourcesSettings()
    entries: list[_RenderEntry] = []
    for name in sorted(config.sources):
        source = config.sources[name]
        if not source.is_complete:
            raise ConfigError(f"Source '{name}' ({source}) has no sha256; prefetch it first.")
        expression = nix_import_expression(source) if isinstance(source, NixSource) else None
        entries.append(_RenderEntry(name=name, kind=source.type, source=source, expression=expression))

    try:
        template = _environment().from_string(_template_text(SOURCES_TEMPLATE))
        return template.render(
            marker=GENERATED_MARKER,
            entries=entries,
            attribute=active.target_attribute,
            link_name=active.output_link_name,
        )
    except TemplateError as exc:
        raise ConfigError(f"failed to render {SOURCES_TEMPLATE}: {exc}") from exc


__all__ = [
    "GENERATED_MARKER",
    "TOOL_NAME",
    "nix_import_expression",
    "nix_string",
    "render_sources_nix",
]
