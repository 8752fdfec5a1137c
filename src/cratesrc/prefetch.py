# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Complete source declarations by prefetching their content hash."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, TypeVar

from .errors import PrefetchError
from .logging import progress, progress_done
from .models import GitSource, HashableSource, NixSource, RegistrySource
from .process_utils import SubprocessExecutionError, run_command

SourceT = TypeVar("SourceT", RegistrySource, GitSource, NixSource)


class Prefetcher(Protocol):
    """Capability returning the content hash of a source lacking one."""

    def prefetch(self, source: HashableSource) -> str:
        """Return the hash of ``source`` as understood by the build executor."""
        ...


@dataclass(frozen=True, slots=True)
class RegistryPrefetcher:
    """Prefetch crates.io downloads with ``nix-prefetch-url``."""

    executable: str = "nix-prefetch-url"

    def prefetch(self, source: HashableSource) -> str:
        if not isinstance(source, RegistrySource):
            raise TypeError(f"{type(self).__name__} cannot prefetch {source}")
        completed = run_command(
            [
                self.executable,
                source.download_url,
                "--unpack",
                "--name",
                f"{source.name}-{source.version}",
            ],
        )
        lines = [line.strip() for line in completed.stdout.splitlines() if line.strip()]
        if not lines:
            raise ValueError(f"{self.executable} printed no hash")
        return lines[-1]


@dataclass(frozen=True, slots=True)
class GitPrefetcher:
    """Prefetch git checkouts with ``nix-prefetch-git``."""

    executable: str = "nix-prefetch-git"

    def prefetch(self, source: HashableSource) -> str:
        if not isinstance(source, GitSource):
            raise TypeError(f"{type(self).__name__} cannot prefetch {source}")
        completed = run_command(
            [
                self.executable,
                "--url",
                source.url,
                "--fetch-submodules",
                "--rev",
                source.rev,
            ],
        )
        try:
            payload = json.loads(completed.stdout)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{self.executable} returned invalid JSON: {exc}") from exc
        sha256 = payload.get("sha256") if isinstance(payload, dict) else None
        if not isinstance(sha256, str):
            raise ValueError(f"{self.executable} output has no 'sha256' field")
        return sha256


def default_prefetchers(
    *,
    url_executable: str = "nix-prefetch-url",
    git_executable: str = "nix-prefetch-git",
) -> dict[type[HashableSource], Prefetcher]:
    """Return the prefetcher used for each hashable source variant."""

    return {
        RegistrySource: RegistryPrefetcher(url_executable),
        GitSource: GitPrefetcher(git_executable),
    }


def prefetcher_for(
    source: HashableSource,
    prefetchers: Mapping[type[HashableSource], Prefetcher] | None = None,
) -> Prefetcher:
    """Select the prefetch capability registered for the variant of ``source``."""

    registry = default_prefetchers() if prefetchers is None else prefetchers
    try:
        return registry[type(source)]
    except KeyError as exc:
        raise PrefetchError(str(source), f"no prefetcher for {type(source).__name__}") from exc


def complete_source(source: SourceT, prefetcher: Prefetcher | None = None) -> SourceT:
    """Return ``source`` with its content hash populated.

    Complete declarations are returned unchanged; an existing hash is never
    recomputed.

    Args:
        source: Declaration that may lack its hash.
        prefetcher: Capability to use; defaults to the one for the variant.

    Returns:
        SourceT: A complete declaration of the same variant.

    Raises:
        PrefetchError: If the prefetch fails or yields no usable hash.
    """

    if source.is_complete or isinstance(source, NixSource):
        return source

    capability = prefetcher or prefetcher_for(source)
    identity = str(source)
    progress(f"Prefetching {identity}: ")
    try:
        sha256 = capability.prefetch(source)
    except SubprocessExecutionError as exc:
        progress_done("failed.")
        reason = (exc.stderr or "").strip() or str(exc)
        raise PrefetchError(identity, reason) from exc
    except Exception as exc:
        progress_done("failed.")
        raise PrefetchError(identity, str(exc)) from exc
    if not sha256:
        progress_done("failed.")
        raise PrefetchError(identity, "prefetch returned an empty hash")
    progress_done()
    return source.model_copy(update={"sha256": sha256})


def registry_source(
    name: str,
    version: str,
    prefetcher: Prefetcher | None = None,
) -> RegistrySource:
    """Return a complete crates.io declaration for ``name`` at ``version``."""

    return complete_source(RegistrySource(name=name, version=version), prefetcher)


def git_source(url: str, rev: str, prefetcher: Prefetcher | None = None) -> GitSource:
    """Return a complete git declaration for ``url`` at ``rev``."""

    return complete_source(GitSource(url=url, rev=rev), prefetcher)


__all__ = [
    "GitPrefetcher",
    "Prefetcher",
    "RegistryPrefetcher",
    "complete_source",
    "default_prefetchers",
    "git_source",
    "prefetcher_for",
    "registry_source",
]
