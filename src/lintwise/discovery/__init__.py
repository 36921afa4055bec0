# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bounded repository traversal."""

from __future__ import annotations

from .walker import TreeWalker, WalkEntry

__all__ = ["TreeWalker", "WalkEntry"]
