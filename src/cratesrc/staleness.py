# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decide whether materialized sources must be fetched again."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterable
from pathlib import Path

from .models import SourceDeclaration

LOGGER = logging.getLogger(__name__)


def last_modified(path: Path) -> float | None:
    """Return the modification time of ``path`` itself, not of a symlink target.

    Returns ``None`` when the path is missing or its metadata is unreadable.
    """

    try:
        return os.lstat(path).st_mtime
    except OSError:
        return None


def is_stale(
    config_path: Path,
    output_link: Path,
    sources: Iterable[SourceDeclaration],
    *,
    now: float | None = None,
) -> bool:
    """Return ``True`` when ``output_link`` must be rebuilt before use.

    Non-reproducible sources always force a rebuild. Otherwise the link is
    stale when it is older than the configuration. A missing link counts as
    the epoch and an unreadable configuration as ``now``, so missing metadata
    always leads to a refetch.

    Args:
        config_path: Project configuration file.
        output_link: Symlink to the materialized sources.
        sources: Current source declarations.
        now: Clock override used when the configuration time is unreadable.

    Returns:
        bool: Whether the sources must be materialized again.
    """

    impure = [source for source in sources if not source.is_reproducible]
    if impure:
        LOGGER.debug("stale: %d non-reproducible sources", len(impure))
        return True

    link_time = last_modified(output_link)
    config_time = last_modified(config_path)
    generated = link_time if link_time is not None else 0.0
    if config_time is not None:
        modified = config_time
    else:
        modified = time.time() if now is None else now
    LOGGER.debug("link mtime=%s config mtime=%s", generated, modified)
    return generated < modified


__all__ = ["is_stale", "last_modified"]
