# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data structures for the source management CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ....config import CONFIG_FILENAME
from ....settings import SourcesSettings

CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to the project configuration file.",
        dir_okay=False,
    ),
]
NAME_OPTION = Annotated[
    str | None,
    typer.Option("--name", "-n", help="Name of the source; inferred when omitted."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Log external commands and scanned paths."),
]


@dataclass(slots=True)
class SourceCLIOptions:
    """Capture options shared by every source command."""

    config_path: Path
    settings: SourcesSettings
    emoji: bool
    debug: bool

    @classmethod
    def from_cli(cls, config: Path | None, *, emoji: bool, debug: bool) -> SourceCLIOptions:
        """Return options parsed from CLI arguments and the environment."""

        config_path = (config or Path.cwd() / CONFIG_FILENAME).resolve()
        settings = SourcesSettings.from_env()
        if settings.use_emoji != emoji:
            settings = settings.model_copy(update={"use_emoji": emoji})
        return cls(config_path=config_path, settings=settings, emoji=emoji, debug=debug)


__all__ = [
    "CONFIG_OPTION",
    "DEBUG_OPTION",
    "EMOJI_OPTION",
    "NAME_OPTION",
    "SourceCLIOptions",
]
