# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Drive the external build executor that materializes fetched sources."""

from __future__ import annotations

import subprocess  # nosec B404
from pathlib import Path

from .errors import MaterializationError
from .logging import info, passthrough
from .process_utils import SubprocessExecutionError, run_command


def materialize_command(
    descriptor_path: Path,
    output_link: Path,
    attribute: str,
    *,
    executor: str = "nix",
) -> list[str]:
    """Return the executor command line building ``attribute`` into ``output_link``."""

    return [
        executor,
        "--show-trace",
        "build",
        "-f",
        str(descriptor_path),
        attribute,
        "-o",
        str(output_link),
    ]


def materialize(
    project_dir: Path,
    descriptor_path: Path,
    output_link: Path,
    attribute: str,
    *,
    executor: str = "nix",
    timeout: float | None = None,
    use_emoji: bool = True,
) -> Path:
    """Build ``attribute`` of ``descriptor_path`` and link the result at ``output_link``.

    This is the only place that invokes the build executor.

    Args:
        project_dir: Working directory for the executor.
        descriptor_path: Generated descriptor file.
        output_link: Symlink the executor points at the built directory.
        attribute: Attribute of the descriptor to build.
        executor: Executor binary name or path.
        timeout: Optional limit in seconds; ``None`` waits for the executor.
        use_emoji: Whether progress output may include emoji.

    Returns:
        Path: ``output_link``.

    Raises:
        MaterializationError: If the executor cannot be started or exits non-zero.
    """

    caption = f"Fetching sources via {descriptor_path} {attribute}"
    info(caption, use_emoji=use_emoji)
    command = materialize_command(descriptor_path, output_link, attribute, executor=executor)
    try:
        completed = run_command(command, cwd=project_dir, timeout=timeout)
    except SubprocessExecutionError as exc:
        diagnostics = exc.stderr or exc.stdout
        raise MaterializationError(caption, returncode=exc.returncode, stderr=diagnostics) from exc
    except subprocess.TimeoutExpired as exc:
        raise MaterializationError(caption, stderr=f"timed out after {exc.timeout}s") from exc
    except OSError as exc:
        raise MaterializationError(caption, stderr=str(exc)) from exc
    passthrough(completed.stderr)
    return output_link


__all__ = ["materialize", "materialize_command"]
