"""Utility functions for uniqueby.

This module provides bit-width calculations for radix schemas.
"""

from __future__ import annotations

from .sizing import composite_bits, field_bits, group_bits, max_primary_key

__all__ = [
    "group_bits",
    "field_bits",
    "composite_bits",
    "max_primary_key",
]
