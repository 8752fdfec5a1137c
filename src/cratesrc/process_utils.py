# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrapper around ``subprocess`` execution for external Nix tooling."""

from __future__ import annotations

import logging
import shlex
import shutil

# Bandit: subprocess usage is intentional; every external command flows through
# this wrapper with argument lists and ``shell=False``.
import subprocess  # nosec B404
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404

LOGGER = logging.getLogger(__name__)


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    check: bool = True,
    timeout: float | None = None,
) -> _CompletedProcess[str]:
    """Execute *args* and capture its text output.

    Args:
        args: Command line; the executable is resolved against ``PATH``.
        cwd: Working directory for the child process.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit.
        timeout: Optional limit in seconds; ``None`` waits indefinitely.

    Returns:
        CompletedProcess[str]: Completed process with decoded stdout and stderr.

    Raises:
        FileNotFoundError: If the executable cannot be located.
        SubprocessExecutionError: If ``check`` is set and the command fails.
        subprocess.TimeoutExpired: If ``timeout`` elapses.
    """

    normalized = _normalize_args(args)
    LOGGER.debug("running command=%s cwd=%s", shlex.join(normalized), cwd or Path.cwd())
    # Bandit: argument lists come from fixed command shapes, never a shell string.
    completed: _CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        check=False,
        capture_output=True,
        text=True,
        errors="replace",
        timeout=timeout,
        stdin=subprocess.DEVNULL,
    )
    LOGGER.debug("command exited status=%s", completed.returncode)

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout,
            completed.stderr,
        )
    return completed


__all__ = ["SubprocessExecutionError", "run_command"]
