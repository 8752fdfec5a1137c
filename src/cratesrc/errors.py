# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by source management operations."""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class CrateSourcesError(RuntimeError):
    """Base class for every fatal error raised by :mod:`cratesrc`."""


class ConfigError(CrateSourcesError):
    """Raised when configuration input is invalid."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(f"{path}: {message}" if path is not None else message)
        self.path = path


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Did not find config at '{path}'.")
        self.path = path


class RefuseOverwriteError(CrateSourcesError):
    """Raised when a descriptor file exists without the generated marker."""

    def __init__(self, path: Path, marker: str) -> None:
        super().__init__(
            f"Cowardly refusing to overwrite {path} without '{marker}' marker.",
        )
        self.path = path
        self.marker = marker


class DescriptorWriteError(CrateSourcesError):
    """Raised when the descriptor file cannot be inspected or written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"while writing {path}: {reason}")
        self.path = path


class PrefetchError(CrateSourcesError):
    """Raised when the hash of a source could not be prefetched."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"while prefetching {source}: {reason}")
        self.source = source
        self.reason = reason


class MaterializationError(CrateSourcesError):
    """Raised when the build executor fails to produce the sources directory."""

    def __init__(
        self,
        caption: str,
        *,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        detail = f"exit status {returncode}" if returncode is not None else "could not be started"
        message = f"{caption} failed ({detail})"
        if stderr:
            message = f"{message}:\n{stderr.rstrip()}"
        super().__init__(message)
        self.caption = caption
        self.returncode = returncode
        self.stderr = stderr


class DirectoryReadError(CrateSourcesError):
    """Raised when the materialized sources directory cannot be listed."""

    def __init__(self, path: Path, reason: str, *, entry: bool = False) -> None:
        what = "while resolving entry in" if entry else "while iterating"
        super().__init__(f"{what} {path} directory: {reason}")
        self.path = path


class WorkspaceWarningKind(str, Enum):
    """Non-fatal conditions reported while discovering workspace members."""

    MISSING_MANIFEST = "missing_manifest"
    MISSING_LOCKFILE = "missing_lockfile"


__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "CrateSourcesError",
    "DescriptorWriteError",
    "DirectoryReadError",
    "MaterializationError",
    "PrefetchError",
    "RefuseOverwriteError",
    "WorkspaceWarningKind",
]
