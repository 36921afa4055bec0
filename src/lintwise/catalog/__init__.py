# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Static catalogue of linter templates and known tool conflicts."""

from __future__ import annotations

from .models import QUALITY_CATEGORIES, LinterCategory, LinterTemplate
from .templates import DEFAULT_REGISTRY, KNOWN_CONFLICTS, TemplateRegistry

__all__ = [
    "DEFAULT_REGISTRY",
    "KNOWN_CONFLICTS",
    "LinterCategory",
    "LinterTemplate",
    "QUALITY_CATEGORIES",
    "TemplateRegistry",
]
