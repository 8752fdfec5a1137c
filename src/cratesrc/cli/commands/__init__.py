# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Registration of the CLI command groups."""

from __future__ import annotations

import typer

from . import source

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register every command group on ``app``.

    Args:
        app: Root Typer application.
    """

    source.register(app)
