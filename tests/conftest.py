# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from cratesrc.models import HashableSource
from cratesrc.process_utils import SubprocessExecutionError

StubTree = Mapping[str, Sequence[str]]


@dataclass
class StubPrefetcher:
    """Deterministic prefetcher returning ``sha256-fake<NAME>`` hashes."""

    calls: list[str] = field(default_factory=list)

    def prefetch(self, source: HashableSource) -> str:
        self.calls.append(str(source))
        name = source.default_name() or "unknown"
        return f"sha256-fake{name.upper()}"


@dataclass
class StubExecutor:
    """Stand-in for ``nix build`` that links a prepared tree at the ``-o`` path."""

    store: Path
    tree: StubTree
    returncode: int = 0
    stderr: str = ""
    calls: list[tuple[list[str], Path | None]] = field(default_factory=list)

    def __call__(self, args: Sequence[str], *, cwd: Path | None = None, **_: object) -> CompletedProcess[str]:
        command = list(args)
        self.calls.append((command, cwd))
        if self.returncode != 0:
            raise SubprocessExecutionError(command, self.returncode, "", self.stderr)
        output = Path(command[command.index("-o") + 1])
        result_dir = self.store / f"result-{len(self.calls)}"
        for member, files in self.tree.items():
            member_dir = result_dir / member
            member_dir.mkdir(parents=True)
            for name in files:
                (member_dir / name).write_text(f"# {member}/{name}\n", encoding="utf-8")
        result_dir.mkdir(parents=True, exist_ok=True)
        if output.is_symlink():
            output.unlink()
        output.symlink_to(result_dir, target_is_directory=True)
        return CompletedProcess(args=command, returncode=0, stdout="", stderr="")


@pytest.fixture
def stub_prefetcher() -> StubPrefetcher:
    return StubPrefetcher()


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[Mapping[str, object]], Path]:
    """Return a helper writing ``cratesrc.json`` with the given sources."""

    def _write(sources: Mapping[str, object]) -> Path:
        path = tmp_path / "cratesrc.json"
        path.write_text(json.dumps({"sources": dict(sources)}, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def stub_executor_factory(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[..., StubExecutor]:
    """Return a factory installing a :class:`StubExecutor` as the build executor."""

    def _install(tree: StubTree, *, returncode: int = 0, stderr: str = "") -> StubExecutor:
        executor = StubExecutor(tmp_path / "store", tree, returncode=returncode, stderr=stderr)
        monkeypatch.setattr("cratesrc.materialize.run_command", executor)
        return executor

    return _install
