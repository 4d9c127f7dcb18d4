"""Mixed-radix decoder for composite identifiers.

This module inverts :mod:`uniqueby.codec.encoder`. Fields are peeled off in reverse
declared order, which undoes the Horner accumulation exactly.

Decoding never checks that a value was produced by the same schema. A composite from
a foreign schema decodes into well-typed but meaningless output.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from .encoder import coerce_int
from .schema import RadixSchema


class DecodedComposite(NamedTuple):
    """Primary key and group recovered from one composite value."""

    primary_key: int
    group: dict[str, int]


def _composite_label(schema: RadixSchema) -> str:
    return f"unique_{schema.primary_key_name}"


def _unpack(schema: RadixSchema, value: int) -> tuple[int, dict[str, int]]:
    """Peel fields off least significant first; what's left is the primary key."""
    reversed_pairs: list[tuple[str, int]] = []
    for radix_field in reversed(schema.fields):
        value, remainder = divmod(value, radix_field.radix)
        reversed_pairs.append((radix_field.name, remainder))
    return value, dict(reversed(reversed_pairs))


def decode_primary_key(schema: RadixSchema, composite: Any) -> int | None:
    """Recover the primary key from a composite value.

    Args:
        schema: Radix schema
        composite: Composite value, or None

    Returns:
        Primary key, or None if ``composite`` is None

    Raises:
        GroupValueError: If the composite value is not integer-coercible
    """
    if composite is None:
        return None
    return coerce_int(_composite_label(schema), composite) // schema.group_modulus


def decode_group(schema: RadixSchema, composite: Any) -> dict[str, int] | None:
    """Recover the group values from a composite value.

    Values come back reduced into ``[0, radix)``, i.e. exactly what was encoded,
    which is not necessarily what the caller originally passed.

    Args:
        schema: Radix schema
        composite: Composite value, or None

    Returns:
        Mapping of field name to value in declared order, or None if ``composite``
        is None

    Raises:
        GroupValueError: If the composite value is not integer-coercible
    """
    if composite is None:
        return None
    _, group = _unpack(schema, coerce_int(_composite_label(schema), composite))
    return group


def decode(schema: RadixSchema, composite: Any) -> DecodedComposite | None:
    """Recover both the primary key and the group from a composite value.

    Returns:
        DecodedComposite, or None if ``composite`` is None
    """
    if composite is None:
        return None
    return DecodedComposite(*_unpack(schema, coerce_int(_composite_label(schema), composite)))
