"""Radix schema construction.

This module validates a group declaration and derives the immutable facts needed for
encoding: the ordered ``(name, radix)`` pairs and their product, the group modulus.
The schema is built once per declaration and is safe to share between threads; no
mutation API exists.
"""

from __future__ import annotations

import logging
import math
import operator
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from ..exceptions import ConfigurationError, RadixTypeError, SchemaMismatchError
from ..models.config import ByBitWidths, ByNamedTotals, ByTotals, GroupSpec, parse_config

logger = logging.getLogger(__name__)

#: Primary-key name used when neither the declaration nor the record type names one.
DEFAULT_PRIMARY_KEY = "id"

#: Group widths from here on leave no room for primary keys in a signed 64-bit column.
WIDE_GROUP_BITS = 63


@dataclass(frozen=True)
class RadixField:
    """A single bounded group field.

    Attributes:
        name: Field name, also used as the attribute name on records
        radix: Exclusive upper bound of the field's value range
    """

    name: str
    radix: int

    def bits_required(self) -> int:
        """Number of bits needed to hold any value in ``[0, radix)``."""
        return (self.radix - 1).bit_length()


@dataclass(frozen=True)
class RadixSchema:
    """Ordered mixed-radix layout for one composite identifier.

    The first field is the most significant. The primary key sits above all of
    them: ``composite = primary_key * group_modulus + group_value``.

    Example:
        >>> schema = RadixSchema("bill_id", (RadixField("client_id", 10),))
        >>> schema.group_modulus
        10
    """

    primary_key_name: str
    fields: tuple[RadixField, ...]
    max_bits: int | None = None
    group_modulus: int = field(init=False)

    def __post_init__(self) -> None:
        if not self.fields:
            raise ConfigurationError("at least one group field is required")

        seen: set[str] = set()
        for radix_field in self.fields:
            if radix_field.name in seen:
                raise ConfigurationError(f"duplicate group field `{radix_field.name}`")
            seen.add(radix_field.name)
            if radix_field.radix < 1:
                raise RadixTypeError(radix_field.name, radix_field.radix, "a positive integer")

        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "group_modulus", math.prod(f.radix for f in self.fields))

    @property
    def names(self) -> tuple[str, ...]:
        """Field names in declared order."""
        return tuple(f.name for f in self.fields)

    def radix_of(self, name: str) -> int:
        """Return the radix of the named field.

        Raises:
            KeyError: If the schema has no such field
        """
        for radix_field in self.fields:
            if radix_field.name == name:
                return radix_field.radix
        raise KeyError(name)

    def reject_unknown(self, keys: Iterable[Any], source: str = "group") -> None:
        """Raise if any key is not a declared field name.

        Args:
            keys: Keys to check
            source: Where the keys came from, for the error message

        Raises:
            SchemaMismatchError: Listing every undeclared key in supplied order
        """
        declared = set(self.names)
        unknown = [key for key in keys if key not in declared]
        if unknown:
            raise SchemaMismatchError(
                f"unknown group keys in {source} for {self.primary_key_name}: "
                f"{', '.join(repr(key) for key in unknown)} "
                f"(declared: {', '.join(self.names)})",
                unknown,
            )

    def group_bits(self) -> int:
        """Number of bits the packed group occupies below the primary key."""
        return (self.group_modulus - 1).bit_length()


def default_primary_key(record_type: Any = None) -> str:
    """Return the primary-key name declared by a record type.

    The record type may declare ``primary_key`` as a plain attribute or as a
    callable (e.g. a classmethod). Falls back to ``"id"``.
    """
    declared = getattr(record_type, "primary_key", None)
    if callable(declared):
        declared = declared()
    return str(declared) if declared else DEFAULT_PRIMARY_KEY


def build_schema(
    config: GroupSpec | Mapping[str, Any], record_type: Any = None
) -> RadixSchema:
    """Validate a group declaration and build its radix schema.

    Args:
        config: Declaration model (ByTotals, ByBitWidths, ByNamedTotals) or a mapping
            that parses into one
        record_type: Record type whose declared primary key is used when the
            declaration doesn't override it

    Returns:
        Immutable RadixSchema

    Raises:
        ConfigurationError: If the declaration is malformed
        RadixTypeError: If a total or bit-width is not a usable integer
    """
    spec = parse_config(config)

    if isinstance(spec, ByTotals):
        pairs = [(name, _checked_total(name, total)) for name, total in spec.totals.items()]
    elif isinstance(spec, ByBitWidths):
        pairs = [(name, 2 ** _checked_width(name, width)) for name, width in spec.bits.items()]
    elif isinstance(spec, ByNamedTotals):
        pairs = _positional_pairs(spec)
    else:
        raise ConfigurationError(f"unsupported group declaration {type(spec).__name__}")

    schema = RadixSchema(
        primary_key_name=spec.primary_key or default_primary_key(record_type),
        fields=tuple(RadixField(name, radix) for name, radix in pairs),
        max_bits=spec.max_bits,
    )

    group_bits = schema.group_bits()
    if schema.max_bits is not None and group_bits > schema.max_bits:
        raise ConfigurationError(
            f"group needs {group_bits} bits, more than max_bits={schema.max_bits}"
        )

    logger.debug(
        "built radix schema for %s: %s (group modulus %d, %d bits)",
        schema.primary_key_name,
        ", ".join(f"{f.name}={f.radix}" for f in schema.fields),
        schema.group_modulus,
        group_bits,
    )
    if group_bits >= WIDE_GROUP_BITS:
        logger.warning(
            "group for %s uses %d bits; composite values will not fit a 64-bit integer",
            schema.primary_key_name,
            group_bits,
        )
    return schema


def _positional_pairs(spec: ByNamedTotals) -> list[tuple[str, int]]:
    """Pair positional names with their radices, naming block-supplied fields."""
    totals, bits = list(spec.totals), list(spec.bits)
    if not totals and not bits:
        raise ConfigurationError("must pass either total or bits")
    if totals and bits:
        raise ConfigurationError(f"both total ({totals!r}) and bits ({bits!r}) passed")

    names = list(spec.names)
    has_block = spec.block is not None
    if not names and not has_block:
        raise ConfigurationError("must pass a group generator block")

    count = len(totals) + len(bits)
    if (not has_block and len(names) != count) or len(names) > count:
        raise ConfigurationError(
            f"amount of group names ({len(names)}) doesn't match total/bits ({count})"
        )

    names.extend(f"group_{position}" for position in range(len(names), count))

    if totals:
        return [(name, _checked_total(name, total)) for name, total in zip(names, totals)]
    return [(name, 2 ** _checked_width(name, width)) for name, width in zip(names, bits)]


def _as_int(name: str, value: Any, expected: str) -> int:
    if isinstance(value, bool):
        raise RadixTypeError(name, value, expected)
    try:
        return operator.index(value)
    except TypeError:
        raise RadixTypeError(name, value, expected) from None


def _checked_total(name: str, total: Any) -> int:
    radix = _as_int(name, total, "a positive integer")
    if radix < 1:
        raise RadixTypeError(name, total, "a positive integer")
    return radix


def _checked_width(name: str, width: Any) -> int:
    bits = _as_int(name, width, "a non-negative integer")
    if bits < 0:
        raise RadixTypeError(name, width, "a non-negative integer")
    return bits
