"""Pydantic declaration models for uniqueby.

This module provides the declaration shapes accepted by the schema builder.
"""

from __future__ import annotations

from .config import ByBitWidths, ByNamedTotals, ByTotals, GroupBlock, GroupSpec, parse_config

__all__ = [
    "GroupSpec",
    "ByTotals",
    "ByBitWidths",
    "ByNamedTotals",
    "GroupBlock",
    "parse_config",
]
