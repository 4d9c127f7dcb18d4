"""uniqueby: Composite identifiers with recoverable group values

A Python library that packs a record's primary key together with bounded "group"
values (shard id, partition, type code) into a single integer, using mixed-radix
positional encoding. The group values can be recovered from the composite value
alone, and lookups by composite value turn into lookups by primary key.

Key Features:
- Radices declared as totals or as bit-widths
- Pydantic-based declarations, parseable from plain dicts
- Group values from explicit arguments, a computed block or record attributes
- Arbitrary-precision arithmetic with an optional fixed-width ceiling

Quick Start:
    >>> from uniqueby import ByTotals, build
    >>>
    >>> codec = build(ByTotals(totals={"client_id": 10}, primary_key="bill_id"))
    >>> codec.composite_from(431, {"client_id": 2})
    4312
    >>> codec.decode(4312)
    DecodedComposite(primary_key=431, group={'client_id': 2})

Composite values carry no schema tag: decoding a value produced by a different
schema gives well-typed but meaningless output.
"""

from __future__ import annotations

from .codec import (
    DecodedComposite,
    RadixField,
    RadixSchema,
    build_schema,
    decode,
    decode_group,
    decode_primary_key,
    encode,
    encode_group,
)
from .composite import CompositeCodec, build, unique_by
from .exceptions import (
    CompositeOverflowError,
    ConfigurationError,
    GroupValueError,
    MissingAttributeError,
    RadixTypeError,
    SchemaMismatchError,
    UniqueByError,
)
from .lookup import RecordStore, find_by_composite, find_by_composite_or_raise
from .models import ByBitWidths, ByNamedTotals, ByTotals, GroupBlock, GroupSpec, parse_config
from .resolver import AttributeAccessor, resolve_group
from .utils import composite_bits, field_bits, group_bits, max_primary_key

__version__ = "0.2.0"

__all__ = [
    # Core API
    "build",
    "unique_by",
    "CompositeCodec",
    # Declarations
    "GroupSpec",
    "GroupBlock",
    "ByTotals",
    "ByBitWidths",
    "ByNamedTotals",
    "parse_config",
    # Codec
    "build_schema",
    "RadixSchema",
    "RadixField",
    "encode",
    "encode_group",
    "decode",
    "decode_group",
    "decode_primary_key",
    "DecodedComposite",
    # Resolution
    "AttributeAccessor",
    "resolve_group",
    # Lookup
    "RecordStore",
    "find_by_composite",
    "find_by_composite_or_raise",
    # Exceptions
    "UniqueByError",
    "ConfigurationError",
    "RadixTypeError",
    "GroupValueError",
    "SchemaMismatchError",
    "MissingAttributeError",
    "CompositeOverflowError",
    # Sizing
    "group_bits",
    "field_bits",
    "composite_bits",
    "max_primary_key",
    # Version
    "__version__",
]
