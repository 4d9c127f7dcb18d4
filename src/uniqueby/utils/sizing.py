"""Composite size calculation utilities.

Python integers don't overflow, but the columns composite values end up in usually
do. These helpers tell how many bits a schema consumes and how large primary keys can
grow before a composite value no longer fits a given width.
"""

from __future__ import annotations

from ..codec.schema import RadixSchema
from ..exceptions import CompositeOverflowError


def group_bits(schema: RadixSchema) -> int:
    """Calculate the number of bits the packed group occupies.

    Example:
        >>> group_bits(build_schema(ByTotals(totals={"client_id": 10, "type": 2})))
        5  # group modulus 20, values 0-19
    """
    return schema.group_bits()


def field_bits(schema: RadixSchema) -> dict[str, int]:
    """Get the size in bits of each group field.

    With non power-of-two radices the fields share bits, so the sum of these can be
    larger than :func:`group_bits`.

    Returns:
        Dictionary mapping field names to their size in bits
    """
    return {f.name: f.bits_required() for f in schema.fields}


def composite_bits(schema: RadixSchema, primary_key: int) -> int:
    """Calculate the bits needed by the largest composite value of a primary key.

    Args:
        schema: Radix schema
        primary_key: Non-negative primary key

    Returns:
        Bit length of ``primary_key * group_modulus + group_modulus - 1``
    """
    if primary_key < 0:
        raise ValueError(f"primary_key must be non-negative, got {primary_key}")
    return (primary_key * schema.group_modulus + schema.group_modulus - 1).bit_length()


def max_primary_key(schema: RadixSchema, bits: int = 63) -> int:
    """Largest primary key whose composite values all fit in ``bits`` bits.

    The default of 63 bits matches a signed 64-bit column.

    Raises:
        CompositeOverflowError: If the group alone doesn't fit
    """
    if bits < 1:
        raise ValueError(f"bits must be positive, got {bits}")
    largest = (1 << bits) // schema.group_modulus - 1
    if largest < 0:
        raise CompositeOverflowError(
            f"group of {schema.primary_key_name} needs {schema.group_bits()} bits, "
            f"no primary key fits in {bits}"
        )
    return largest
