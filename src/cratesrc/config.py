# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reading and updating the ``cratesrc.json`` project configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError, ConfigNotFoundError
from .models import SourceDeclaration

CONFIG_FILENAME: Final[str] = "cratesrc.json"

LOGGER = logging.getLogger(__name__)


class SourcesConfig(BaseModel):
    """Named source declarations keyed by their unique configuration name."""

    model_config = ConfigDict(extra="forbid")

    sources: dict[str, SourceDeclaration] = Field(default_factory=dict)

    @classmethod
    def read_from(cls, path: Path) -> SourcesConfig:
        """Load the configuration stored at ``path``.

        Args:
            path: Location of the JSON configuration file.

        Returns:
            SourcesConfig: Parsed configuration.

        Raises:
            ConfigNotFoundError: If ``path`` does not exist.
            ConfigError: If the file cannot be read or does not match the schema.
        """

        if not path.exists():
            raise ConfigNotFoundError(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"failed to read configuration: {exc}", path=path) from exc
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"failed to parse JSON: {exc}", path=path) from exc
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"invalid configuration:\n{exc}", path=path) from exc

    @classmethod
    def read_from_or_default(cls, path: Path) -> SourcesConfig:
        """Load ``path`` or return an empty configuration when it is missing."""

        if not path.exists():
            LOGGER.debug("no configuration at %s, using defaults", path)
            return cls()
        return cls.read_from(path)

    def write_to(self, path: Path) -> None:
        """Persist the configuration as pretty-printed JSON."""

        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        text = json.dumps(payload, indent=2, sort_keys=True) + "\n"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"failed to write configuration: {exc}", path=path) from exc

    @property
    def has_non_reproducible_sources(self) -> bool:
        """Return ``True`` when any declaration must be re-resolved on every use."""

        return any(not source.is_reproducible for source in self.sources.values())

    def resolve_name(self, explicit_name: str | None, source: SourceDeclaration) -> str:
        """Return the free name ``source`` would be stored under.

        Raises:
            ConfigError: If no name can be inferred or the name is already taken.
        """

        name = explicit_name or source.default_name()
        if not name:
            raise ConfigError(f"Could not infer name for source {source}, please specify explicitly.")
        existing = self.sources.get(name)
        if existing is not None:
            raise ConfigError(f"Source with name '{name}' already exists: {existing}")
        return name

    def add_source(self, explicit_name: str | None, source: SourceDeclaration) -> str:
        """Add ``source`` under ``explicit_name`` or its inferred name.

        Args:
            explicit_name: Name chosen by the caller, if any.
            source: Declaration to store.

        Returns:
            str: Name under which the source was stored.

        Raises:
            ConfigError: If no name can be inferred or the name is already taken.
        """

        name = self.resolve_name(explicit_name, source)
        self.sources[name] = source
        return name

    def remove_source(self, name: str) -> SourceDeclaration:
        """Remove and return the source stored under ``name``."""

        try:
            return self.sources.pop(name)
        except KeyError as exc:
            known = ", ".join(sorted(self.sources)) or "<none>"
            raise ConfigError(f"No source named '{name}' (known sources: {known})") from exc


__all__ = ["CONFIG_FILENAME", "SourcesConfig"]
