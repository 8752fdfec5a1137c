# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for descriptor file rendering and the overwrite guard."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from cratesrc.config import SourcesConfig
from cratesrc.descriptor import contains_generated_marker, regenerate_descriptor
from cratesrc.errors import ConfigError, ConfigNotFoundError, RefuseOverwriteError
from cratesrc.models import GitSource, NixSource
from cratesrc.render import GENERATED_MARKER, nix_import_expression, nix_string, render_sources_nix
from cratesrc.settings import SourcesSettings

WriteConfig = Callable[[dict[str, object]], Path]

FOO = {"type": "CratesIo", "name": "foo", "version": "1.2.0", "sha256": "sha256-fakeFOO"}
BAR = {"type": "Git", "url": "https://host/bar.git", "rev": "abcdef0", "sha256": "sha256-fakeBAR"}


def test_regenerate_writes_marker_and_sources(tmp_path: Path, write_config: WriteConfig) -> None:
    config_path = write_config({"foo": FOO, "bar": BAR})
    descriptor = tmp_path / "cratesrc-sources.nix"

    regenerate_descriptor(config_path, descriptor)

    text = descriptor.read_text(encoding="utf-8")
    assert GENERATED_MARKER in text
    assert '"foo" = pkgs.fetchzip {' in text
    assert 'url = "https://crates.io/api/v1/crates/foo/1.2.0/download";' in text
    assert 'sha256 = "sha256-fakeFOO";' in text
    assert '"bar" = pkgs.fetchgit {' in text
    assert 'rev = "abcdef0";' in text
    assert "fetchedSources = pkgs.linkFarm" in text


def test_regenerate_refuses_file_without_marker(tmp_path: Path, write_config: WriteConfig) -> None:
    config_path = write_config({"foo": FOO})
    descriptor = tmp_path / "cratesrc-sources.nix"
    hand_written = "# my own sources\n{ }: { fetchedSources = ./vendor; }\n"
    descriptor.write_text(hand_written, encoding="utf-8")

    with pytest.raises(RefuseOverwriteError) as excinfo:
        regenerate_descriptor(config_path, descriptor)

    assert excinfo.value.path == descriptor
    assert descriptor.read_text(encoding="utf-8") == hand_written


def test_regenerate_replaces_generated_file(tmp_path: Path, write_config: WriteConfig) -> None:
    config_path = write_config({"foo": FOO})
    descriptor = tmp_path / "cratesrc-sources.nix"
    descriptor.write_text(f"stale content\n# {GENERATED_MARKER} 0.0.1\nmore\n", encoding="utf-8")

    regenerate_descriptor(config_path, descriptor)

    text = descriptor.read_text(encoding="utf-8")
    assert "stale content" not in text
    assert contains_generated_marker(descriptor)


def test_regenerate_is_stable_for_unchanged_config(tmp_path: Path, write_config: WriteConfig) -> None:
    config_path = write_config({"foo": FOO, "bar": BAR})
    descriptor = tmp_path / "cratesrc-sources.nix"

    regenerate_descriptor(config_path, descriptor)
    first = descriptor.read_text(encoding="utf-8")
    regenerate_descriptor(config_path, descriptor)

    assert descriptor.read_text(encoding="utf-8") == first


def test_regenerate_requires_config(tmp_path: Path) -> None:
    with pytest.raises(ConfigNotFoundError):
        regenerate_descriptor(tmp_path / "cratesrc.json", tmp_path / "cratesrc-sources.nix")
    assert not (tmp_path / "cratesrc-sources.nix").exists()


def test_regenerate_uses_custom_renderer(tmp_path: Path, write_config: WriteConfig) -> None:
    config_path = write_config({"foo": FOO})
    descriptor = tmp_path / "out.nix"

    regenerate_descriptor(
        config_path,
        descriptor,
        renderer=lambda config: f"# {GENERATED_MARKER}\n# {','.join(config.sources)}\n",
    )

    assert descriptor.read_text(encoding="utf-8").endswith("# foo\n")


def test_render_rejects_incomplete_sources() -> None:
    config = SourcesConfig.model_validate(
        {"sources": {"foo": {"type": "CratesIo", "name": "foo", "version": "1.2.0"}}},
    )
    with pytest.raises(ConfigError, match="has no sha256"):
        render_sources_nix(config)


def test_render_honours_settings_and_nix_sources() -> None:
    config = SourcesConfig(sources={"tools": NixSource(file="nix/tools.nix", attr="src")})
    settings = SourcesSettings(target_attribute="vendored", output_link_name="vendor")

    text = render_sources_nix(config, settings)

    assert '"tools" = (import ./nix/tools.nix { }).src;' in text
    assert 'vendored = pkgs.linkFarm "vendor"' in text


def test_render_passes_git_ref_as_branch_name() -> None:
    config = SourcesConfig(
        sources={
            "bar": GitSource(url="https://host/bar.git", rev="abcdef0", ref_name="main", sha256="sha256-b"),
            "baz": GitSource(url="https://host/baz.git", rev="1234567", sha256="sha256-c"),
        },
    )

    text = render_sources_nix(config)

    assert text.count("branchName") == 1
    assert 'branchName = "main";' in text


def test_nix_string_escaping() -> None:
    assert nix_string('a"b\\c${d}') == 'a\\"b\\\\c\\${d}'


@pytest.mark.parametrize(
    ("file", "attr", "expected"),
    [
        ("<nixpkgs>", "hello.src", "(import <nixpkgs> { }).hello.src"),
        ("/abs/src.nix", None, "import /abs/src.nix { }"),
        ("../up.nix", None, "import ../up.nix { }"),
        ("local.nix", None, "import ./local.nix { }"),
    ],
)
def test_nix_import_expression(file: str, attr: str | None, expected: str) -> None:
    assert nix_import_expression(NixSource(file=file, attr=attr)) == expected
