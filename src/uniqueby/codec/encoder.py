"""Mixed-radix encoder for composite identifiers.

This module packs an ordered group of bounded values and a primary key into a single
integer using Horner's scheme: the first declared field ends up most significant,
and the primary key sits above the whole group.
"""

from __future__ import annotations

import math
import operator
from typing import Any, Mapping, Sequence

from ..exceptions import CompositeOverflowError, GroupValueError
from .schema import RadixSchema


def coerce_int(name: str, value: Any) -> int:
    """Coerce a raw group value or key to ``int``.

    ``int`` (including ``bool``) and anything implementing ``__index__`` pass
    through. Strings are parsed with ``int()``; other numbers go through ``int()``,
    so floats truncate.

    Args:
        name: Field name used in error messages
        value: Raw value

    Returns:
        Integer value

    Raises:
        GroupValueError: If the value is None or not integer-coercible
    """
    if value is None:
        raise GroupValueError(f"field `{name}` must not be null")

    try:
        return operator.index(value)
    except TypeError:
        pass

    if isinstance(value, float) and not math.isfinite(value):
        raise GroupValueError(f"field `{name}` must be integer-coercible, {value!r} given")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as err:
        raise GroupValueError(
            f"field `{name}` must be integer-coercible, {value!r} given"
        ) from err


def _group_mapping(schema: RadixSchema, values: Any) -> Mapping[str, Any]:
    """Normalise group input to a mapping keyed by field name.

    Sequences are matched to the fields by position. A single-field schema also
    takes the bare value.

    Raises:
        GroupValueError: If a sequence has the wrong length, or a scalar is given for
            a schema with more than one field
    """
    if isinstance(values, Mapping):
        return values
    if isinstance(values, Sequence) and not isinstance(values, (str, bytes)):
        if len(values) != len(schema.fields):
            raise GroupValueError(
                f"expected {len(schema.fields)} group values for "
                f"{schema.primary_key_name}, {len(values)} given"
            )
        return dict(zip(schema.names, values))
    if len(schema.fields) == 1:
        return {schema.fields[0].name: values}
    raise GroupValueError(
        f"group for {schema.primary_key_name} must be a mapping or a sequence of "
        f"{len(schema.fields)} values, {values!r} given"
    )


def encode_group(schema: RadixSchema, values: Mapping[str, Any] | Sequence[Any] | Any) -> int:
    """Pack group values into the group integer.

    Each value is reduced into ``[0, radix)`` with floored modulo, so negative values
    wrap around and oversized ones are truncated; the reduction is lossy.

    Args:
        schema: Radix schema
        values: Raw value for every declared field, as a mapping, a sequence in
            declared order, or a bare value for a single-field schema

    Returns:
        Packed group value in ``[0, group_modulus)``

    Raises:
        GroupValueError: If a field is missing, null or not integer-coercible
        SchemaMismatchError: If ``values`` has keys the schema doesn't declare

    Example:
        >>> schema = build_schema(ByTotals(totals={"client_id": 10, "type": 2}))
        >>> encode_group(schema, {"client_id": 5, "type": 10})
        10
        >>> encode_group(schema, [5, 10])
        10
    """
    values = _group_mapping(schema, values)
    schema.reject_unknown(values)

    group_value = 0
    for radix_field in schema.fields:
        if radix_field.name not in values:
            raise GroupValueError(f"missing group field `{radix_field.name}`")
        value = coerce_int(radix_field.name, values[radix_field.name])
        group_value = group_value * radix_field.radix + value % radix_field.radix
    return group_value


def encode(
    schema: RadixSchema, primary_key: Any, group: Mapping[str, Any] | Sequence[Any] | Any
) -> int | None:
    """Encode a primary key and its group into a composite value.

    Args:
        schema: Radix schema
        primary_key: Primary key, or None
        group: Raw group values, in any form :func:`encode_group` accepts

    Returns:
        ``primary_key * group_modulus + group_value``, or None when the primary key is
        None (the group is not encoded at all in that case)

    Raises:
        GroupValueError: If the primary key or a group value is invalid
        CompositeOverflowError: If the schema sets ``max_bits`` and the composite
            value needs more bits
    """
    if primary_key is None:
        return None

    key = coerce_int(schema.primary_key_name, primary_key)
    composite = key * schema.group_modulus + encode_group(schema, group)

    if schema.max_bits is not None and composite.bit_length() > schema.max_bits:
        raise CompositeOverflowError(
            f"composite {schema.primary_key_name} {composite} needs "
            f"{composite.bit_length()} bits, exceeds max_bits={schema.max_bits}"
        )
    return composite
