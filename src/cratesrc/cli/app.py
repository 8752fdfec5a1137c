# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import typer

from .commands import register_commands

app = typer.Typer(
    name="cratesrc",
    help="Manage out-of-tree Cargo sources fetched via Nix.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)
register_commands(app)


def main() -> None:
    """Run the ``cratesrc`` console script."""

    app()


__all__ = ["app", "main"]
