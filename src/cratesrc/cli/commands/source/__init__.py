# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Source management CLI command package."""

from __future__ import annotations

import typer

from .command import source_app

__all__ = ["register", "source_app"]


def register(app: typer.Typer) -> None:
    """Register source subcommands on the Typer application.

    Args:
        app: Typer application receiving the ``source`` command group.
    """

    app.add_typer(source_app, name="source")
