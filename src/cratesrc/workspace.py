# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map materialized source directories to Cargo workspace members."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .errors import DirectoryReadError, WorkspaceWarningKind
from .logging import warn

MANIFEST_FILENAME: Final[str] = "Cargo.toml"
LOCKFILE_FILENAME: Final[str] = "Cargo.lock"

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WorkspaceMember:
    """Manifest and lockfile expected inside one materialized source."""

    directory: Path
    manifest_path: Path
    lockfile_path: Path

    @classmethod
    def for_directory(cls, directory: Path) -> WorkspaceMember:
        return cls(
            directory=directory,
            manifest_path=directory / MANIFEST_FILENAME,
            lockfile_path=directory / LOCKFILE_FILENAME,
        )


@dataclass(frozen=True, slots=True)
class WorkspaceWarning:
    """A missing file that will surface as a failure later in the pipeline."""

    kind: WorkspaceWarningKind
    directory: Path
    path: Path

    @property
    def message(self) -> str:
        return (
            f"No {self.path.name} found in {self.directory}.\n"
            "This will lead to later failures."
        )


@dataclass(slots=True)
class DiscoveryResult:
    """Members found in the sources directory, in directory iteration order."""

    members: list[WorkspaceMember] = field(default_factory=list)
    warnings: list[WorkspaceWarning] = field(default_factory=list)

    @property
    def manifests(self) -> list[Path]:
        return [member.manifest_path for member in self.members]


def _member_warnings(member: WorkspaceMember) -> list[WorkspaceWarning]:
    warnings: list[WorkspaceWarning] = []
    if not member.manifest_path.exists():
        warnings.append(
            WorkspaceWarning(WorkspaceWarningKind.MISSING_MANIFEST, member.directory, member.manifest_path),
        )
    if not member.lockfile_path.exists():
        warnings.append(
            WorkspaceWarning(WorkspaceWarningKind.MISSING_LOCKFILE, member.directory, member.lockfile_path),
        )
    return warnings


def scan_members(sources_dir: Path, *, use_emoji: bool = True) -> DiscoveryResult:
    """List the workspace members materialized below ``sources_dir``.

    Missing manifests or lockfiles are reported as warnings and the member is
    still included.

    Args:
        sources_dir: Directory (or symlink to one) holding one directory per source.
        use_emoji: Whether warnings may include emoji.

    Returns:
        DiscoveryResult: Members with their non-fatal warnings.

    Raises:
        DirectoryReadError: If ``sources_dir`` or one of its entries cannot be read.
    """

    result = DiscoveryResult()
    try:
        with os.scandir(sources_dir) as iterator:
            entries = list(iterator)
    except OSError as exc:
        raise DirectoryReadError(sources_dir, str(exc)) from exc

    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError as exc:
            raise DirectoryReadError(sources_dir, str(exc), entry=True) from exc
        if not is_dir:
            LOGGER.debug("skipping non-directory %s", entry.path)
            continue
        member = WorkspaceMember.for_directory(sources_dir / entry.name)
        for warning in _member_warnings(member):
            warn(warning.message, use_emoji=use_emoji)
            result.warnings.append(warning)
        result.members.append(member)
    return result


__all__ = [
    "LOCKFILE_FILENAME",
    "MANIFEST_FILENAME",
    "DiscoveryResult",
    "WorkspaceMember",
    "WorkspaceWarning",
    "scan_members",
]
