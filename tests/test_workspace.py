# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for workspace member discovery and the fetch workflow."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from cratesrc.config import SourcesConfig
from cratesrc.errors import DirectoryReadError, MaterializationError, RefuseOverwriteError, WorkspaceWarningKind
from cratesrc.fetched import FetchedSources
from cratesrc.models import GitSource, RegistrySource
from cratesrc.prefetch import complete_source
from cratesrc.render import GENERATED_MARKER
from cratesrc.workspace import scan_members


def _member(root: Path, name: str, *files: str) -> Path:
    directory = root / name
    directory.mkdir(parents=True)
    for filename in files:
        (directory / filename).write_text("", encoding="utf-8")
    return directory


def test_complete_member_produces_no_warning(tmp_path: Path) -> None:
    _member(tmp_path, "foo", "Cargo.toml", "Cargo.lock")

    result = scan_members(tmp_path)

    assert result.manifests == [tmp_path / "foo" / "Cargo.toml"]
    assert result.warnings == []


def test_missing_lockfile_is_lenient(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _member(tmp_path, "bar", "Cargo.toml")

    result = scan_members(tmp_path, use_emoji=False)

    assert result.manifests == [tmp_path / "bar" / "Cargo.toml"]
    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert warning.kind is WorkspaceWarningKind.MISSING_LOCKFILE
    assert warning.path == tmp_path / "bar" / "Cargo.lock"
    err = capsys.readouterr().err
    assert f"No Cargo.lock found in {tmp_path / 'bar'}." in err
    assert "This will lead to later failures." in err


def test_empty_member_reports_both_files(tmp_path: Path) -> None:
    _member(tmp_path, "baz")

    result = scan_members(tmp_path)

    assert result.manifests == [tmp_path / "baz" / "Cargo.toml"]
    assert [warning.kind for warning in result.warnings] == [
        WorkspaceWarningKind.MISSING_MANIFEST,
        WorkspaceWarningKind.MISSING_LOCKFILE,
    ]


def test_regular_files_are_ignored(tmp_path: Path) -> None:
    _member(tmp_path, "foo", "Cargo.toml", "Cargo.lock")
    (tmp_path / "README").write_text("not a member", encoding="utf-8")

    assert scan_members(tmp_path).manifests == [tmp_path / "foo" / "Cargo.toml"]


def test_members_reached_through_symlinks_are_included(tmp_path: Path) -> None:
    store = tmp_path / "store"
    target = _member(store, "foo-src", "Cargo.toml", "Cargo.lock")
    sources = tmp_path / "sources"
    sources.mkdir()
    (sources / "foo").symlink_to(target, target_is_directory=True)

    assert scan_members(sources).manifests == [sources / "foo" / "Cargo.toml"]


def test_unreadable_directory_is_fatal(tmp_path: Path) -> None:
    missing = tmp_path / "cratesrc-sources"
    with pytest.raises(DirectoryReadError) as excinfo:
        scan_members(missing)
    assert excinfo.value.path == missing
    assert "while iterating" in str(excinfo.value)


def test_add_fetch_and_discover_scenario(
    tmp_path: Path,
    stub_prefetcher,  # noqa: ANN001
    stub_executor_factory: Callable[..., object],
) -> None:
    foo = complete_source(RegistrySource(name="foo", version="1.2.0"), stub_prefetcher)
    bar = complete_source(GitSource(url="https://example.com/bar.git", rev="abcdef0"), stub_prefetcher)
    assert foo.sha256 == "sha256-fakeFOO"
    assert bar.sha256 == "sha256-fakeBAR"

    config = SourcesConfig()
    config.add_source(None, foo)
    config.add_source(None, bar)
    config_path = tmp_path / "cratesrc.json"
    config.write_to(config_path)

    executor = stub_executor_factory({"foo": ["Cargo.toml", "Cargo.lock"], "bar": ["Cargo.toml"]})
    fetched = FetchedSources(config_path)

    result = fetched.discover_members()

    descriptor = fetched.descriptor_path.read_text(encoding="utf-8")
    assert GENERATED_MARKER in descriptor
    assert "sha256-fakeFOO" in descriptor
    assert "sha256-fakeBAR" in descriptor
    assert len(executor.calls) == 1
    command, cwd = executor.calls[0]
    assert cwd == tmp_path
    assert command[:5] == ["nix", "--show-trace", "build", "-f", str(fetched.descriptor_path)]
    assert sorted(path.parent.name for path in result.manifests) == ["bar", "foo"]
    assert all(path.name == "Cargo.toml" for path in result.manifests)
    assert len(result.warnings) == 1
    assert result.warnings[0].kind is WorkspaceWarningKind.MISSING_LOCKFILE
    assert result.warnings[0].directory.name == "bar"


def test_fresh_output_is_not_refetched(
    tmp_path: Path,
    write_config: Callable[[dict[str, object]], Path],
    stub_executor_factory: Callable[..., object],
) -> None:
    config_path = write_config(
        {"foo": {"type": "CratesIo", "name": "foo", "version": "1.2.0", "sha256": "sha256-fakeFOO"}},
    )
    executor = stub_executor_factory({"foo": ["Cargo.toml", "Cargo.lock"]})
    fetched = FetchedSources(config_path)

    fetched.fetch()
    os.utime(config_path, (1_000, 1_000))
    assert not fetched.is_stale()

    assert fetched.get_cargo_tomls() == [fetched.output_link / "foo" / "Cargo.toml"]
    assert len(executor.calls) == 1


def test_nix_sources_force_refetch(
    write_config: Callable[[dict[str, object]], Path],
    stub_executor_factory: Callable[..., object],
) -> None:
    config_path = write_config({"tools": {"type": "Nix", "file": "tools.nix"}})
    executor = stub_executor_factory({"tools": ["Cargo.toml", "Cargo.lock"]})
    fetched = FetchedSources(config_path)

    fetched.discover_members()
    fetched.discover_members()

    assert len(executor.calls) == 2


def test_fetch_refuses_hand_written_descriptor(
    tmp_path: Path,
    write_config: Callable[[dict[str, object]], Path],
    stub_executor_factory: Callable[..., object],
) -> None:
    config_path = write_config({})
    executor = stub_executor_factory({})
    (tmp_path / "cratesrc-sources.nix").write_text("{ }\n", encoding="utf-8")

    with pytest.raises(RefuseOverwriteError) as excinfo:
        FetchedSources(config_path).discover_members()

    assert "while regenerating cratesrc-sources.nix" in excinfo.value.__notes__
    assert executor.calls == []


def test_failed_materialization_propagates(
    write_config: Callable[[dict[str, object]], Path],
    stub_executor_factory: Callable[..., object],
) -> None:
    config_path = write_config({})
    stub_executor_factory({}, returncode=1, stderr="error: attribute missing")

    with pytest.raises(MaterializationError) as excinfo:
        FetchedSources(config_path).fetch()

    assert "attribute missing" in str(excinfo.value)
    assert "while building cratesrc-sources directory" in excinfo.value.__notes__
