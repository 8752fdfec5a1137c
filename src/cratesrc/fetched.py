# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Assemble out-of-tree sources into a Nix-built Cargo workspace."""

from __future__ import annotations

from functools import partial
from pathlib import Path

from .config import SourcesConfig
from .descriptor import regenerate_descriptor
from .logging import info
from .materialize import materialize
from .render import render_sources_nix
from .settings import SourcesSettings
from .staleness import is_stale
from .workspace import DiscoveryResult, scan_members


class FetchedSources:
    """Operations on the sources declared by one project configuration file.

    The descriptor file and the output symlink are siblings of the
    configuration file and are owned by this class.
    """

    def __init__(self, config_path: Path, settings: SourcesSettings | None = None) -> None:
        self._config_path = config_path
        self._settings = settings or SourcesSettings()

    @property
    def config_path(self) -> Path:
        return self._config_path

    @property
    def settings(self) -> SourcesSettings:
        return self._settings

    @property
    def project_dir(self) -> Path:
        return self._config_path.parent

    @property
    def descriptor_path(self) -> Path:
        return self.project_dir / self._settings.descriptor_name

    @property
    def output_link(self) -> Path:
        return self.project_dir / self._settings.output_link_name

    def regenerate_descriptor(self) -> Path:
        """Write the descriptor file, refusing to replace hand-written files."""

        renderer = partial(render_sources_nix, settings=self._settings)
        return regenerate_descriptor(self._config_path, self.descriptor_path, renderer=renderer)

    def fetch(self) -> Path:
        """Regenerate the descriptor and materialize it; return the output symlink."""

        try:
            self.regenerate_descriptor()
        except Exception as exc:
            exc.add_note(f"while regenerating {self.descriptor_path.name}")
            raise
        try:
            materialize(
                self.project_dir,
                self.descriptor_path,
                self.output_link,
                self._settings.target_attribute,
                executor=self._settings.executor,
                timeout=self._settings.materialize_timeout,
                use_emoji=self._settings.use_emoji,
            )
        except Exception as exc:
            exc.add_note(f"while building {self.output_link.name} directory")
            raise
        return self.output_link

    def is_stale(self) -> bool:
        """Return ``True`` when the materialized sources must be fetched again."""

        config = SourcesConfig.read_from_or_default(self._config_path)
        return is_stale(self._config_path, self.output_link, config.sources.values())

    def discover_members(self) -> DiscoveryResult:
        """Fetch sources when stale, then list the materialized workspace members."""

        if self.is_stale():
            info("Fetching sources.", use_emoji=self._settings.use_emoji)
            self.fetch()
        return scan_members(self.output_link, use_emoji=self._settings.use_emoji)

    def get_cargo_tomls(self) -> list[Path]:
        """Return the ``Cargo.toml`` path of every materialized source."""

        return self.discover_members().manifests


__all__ = ["FetchedSources"]
