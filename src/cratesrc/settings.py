# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime settings controlling external executables and derived file names."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigError

ENV_PREFIX: Final[str] = "CRATESRC_"


class SourcesSettings(BaseModel):
    """Describe how sources are fetched and where derived artifacts live."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    executor: str = "nix"
    prefetch_url_executable: str = "nix-prefetch-url"
    prefetch_git_executable: str = "nix-prefetch-git"
    descriptor_name: str = "cratesrc-sources.nix"
    output_link_name: str = "cratesrc-sources"
    target_attribute: str = "fetchedSources"
    materialize_timeout: float | None = None
    use_emoji: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SourcesSettings:
        """Return settings with ``CRATESRC_*`` environment overrides applied.

        Args:
            environ: Environment mapping to inspect; defaults to ``os.environ``.

        Returns:
            SourcesSettings: Settings instance with overrides applied.

        Raises:
            ConfigError: If an override cannot be coerced to the field type.
        """

        env = os.environ if environ is None else environ
        overrides: dict[str, str] = {}
        for field_name in cls.model_fields:
            key = f"{ENV_PREFIX}{field_name.upper()}"
            if key in env:
                overrides[field_name] = env[key]
        try:
            return cls.model_validate(overrides)
        except ValidationError as exc:
            raise ConfigError(f"invalid {ENV_PREFIX}* environment override:\n{exc}") from exc


__all__ = ["ENV_PREFIX", "SourcesSettings"]
