# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core package metadata and convenience exports."""

from __future__ import annotations

from importlib import metadata

from .config import CONFIG_FILENAME, SourcesConfig
from .fetched import FetchedSources
from .models import GitSource, NixSource, RegistrySource, SourceDeclaration
from .prefetch import complete_source, git_source, registry_source
from .settings import SourcesSettings

__all__ = [
    "CONFIG_FILENAME",
    "FetchedSources",
    "GitSource",
    "NixSource",
    "RegistrySource",
    "SourceDeclaration",
    "SourcesConfig",
    "SourcesSettings",
    "__version__",
    "complete_source",
    "git_source",
    "registry_source",
]

try:
    __version__ = metadata.version("cratesrc")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
