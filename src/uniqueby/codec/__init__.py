"""Mixed-radix codec for uniqueby.

This module provides the schema builder and the pure encode/decode functions that
pack a primary key and its group values into one integer and back.
"""

from __future__ import annotations

from .decoder import DecodedComposite, decode, decode_group, decode_primary_key
from .encoder import coerce_int, encode, encode_group
from .schema import RadixField, RadixSchema, build_schema

__all__ = [
    "build_schema",
    "RadixSchema",
    "RadixField",
    "encode",
    "encode_group",
    "coerce_int",
    "decode",
    "decode_group",
    "decode_primary_key",
    "DecodedComposite",
]
