# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Generate the descriptor file consumed by the build executor."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .config import SourcesConfig
from .errors import ConfigNotFoundError, DescriptorWriteError, RefuseOverwriteError
from .render import GENERATED_MARKER, render_sources_nix

Renderer = Callable[[SourcesConfig], str]

LOGGER = logging.getLogger(__name__)


def contains_generated_marker(path: Path, marker: str = GENERATED_MARKER) -> bool:
    """Return ``True`` when any line of ``path`` contains ``marker``.

    Raises:
        DescriptorWriteError: If ``path`` cannot be read.
    """

    try:
        with path.open("r", encoding="utf-8", errors="replace") as stream:
            return any(marker in line for line in stream)
    except OSError as exc:
        raise DescriptorWriteError(path, str(exc)) from exc


def regenerate_descriptor(
    config_path: Path,
    descriptor_path: Path,
    *,
    renderer: Renderer = render_sources_nix,
) -> Path:
    """Write the descriptor file for the sources declared in ``config_path``.

    An existing file is only replaced when it carries the generated marker,
    which keeps hand-written files with the same name intact.

    Args:
        config_path: Project configuration holding the source declarations.
        descriptor_path: Destination of the generated file.
        renderer: Callable turning the configuration into file text.

    Returns:
        Path: ``descriptor_path``.

    Raises:
        ConfigNotFoundError: If ``config_path`` does not exist.
        RefuseOverwriteError: If ``descriptor_path`` exists without the marker.
        DescriptorWriteError: If the descriptor cannot be read or written.
    """

    if not config_path.exists():
        raise ConfigNotFoundError(config_path)

    if descriptor_path.exists() and not contains_generated_marker(descriptor_path):
        raise RefuseOverwriteError(descriptor_path, GENERATED_MARKER)

    config = SourcesConfig.read_from(config_path)
    text = renderer(config)
    try:
        descriptor_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise DescriptorWriteError(descriptor_path, str(exc)) from exc
    LOGGER.debug("wrote %s with %d sources", descriptor_path, len(config.sources))
    return descriptor_path


__all__ = ["Renderer", "contains_generated_marker", "regenerate_descriptor"]
