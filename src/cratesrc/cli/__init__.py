# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line interface for managing out-of-tree sources."""

from __future__ import annotations

from .app import app, main

__all__ = ["app", "main"]
