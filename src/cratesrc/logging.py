# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional emoji support."""

from __future__ import annotations

import logging
from functools import lru_cache

from rich.console import Console
from rich.logging import RichHandler


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Return the shared stderr console used for progress and diagnostics."""

    return Console(stderr=True, highlight=False, soft_wrap=True)


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def info(msg: str, *, use_emoji: bool = True) -> None:
    """Emit an informational message."""

    get_console().print(f"{emoji('ℹ️ ', use_emoji)}{msg}", markup=False)


def ok(msg: str, *, use_emoji: bool = True) -> None:
    """Emit a success message."""

    get_console().print(f"{emoji('✅ ', use_emoji)}{msg}", style="green", markup=False)


def warn(msg: str, *, use_emoji: bool = True) -> None:
    """Emit a warning message."""

    get_console().print(f"{emoji('⚠️ ', use_emoji)}WARNING: {msg}", style="yellow", markup=False)


def fail(msg: str, *, use_emoji: bool = True) -> None:
    """Emit an error message."""

    get_console().print(f"{emoji('❌ ', use_emoji)}{msg}", style="bold red", markup=False)


def passthrough(output: str) -> None:
    """Relay diagnostic output captured from an external tool."""

    text = output.rstrip()
    if text:
        get_console().print(text, style="dim", markup=False)


def progress(msg: str) -> None:
    """Emit ``msg`` without a trailing newline so a later call can finish the line."""

    get_console().print(msg, end="", markup=False)


def progress_done(msg: str = "done.") -> None:
    """Finish a line started with :func:`progress`."""

    get_console().print(msg, markup=False)


def configure_debug_logging(enabled: bool) -> None:
    """Route ``cratesrc`` module loggers through Rich when *enabled*."""

    logger = logging.getLogger("cratesrc")
    if not enabled:
        logger.setLevel(logging.WARNING)
        return
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=get_console(), show_path=False))
    logger.setLevel(logging.DEBUG)


__all__ = [
    "configure_debug_logging",
    "emoji",
    "fail",
    "get_console",
    "info",
    "ok",
    "passthrough",
    "progress",
    "progress_done",
    "warn",
]
