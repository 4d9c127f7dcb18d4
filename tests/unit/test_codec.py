"""Unit tests for encoding/decoding."""

from __future__ import annotations

from decimal import Decimal

import pytest

from uniqueby import (
    ByBitWidths,
    ByTotals,
    CompositeOverflowError,
    DecodedComposite,
    GroupValueError,
    RadixSchema,
    SchemaMismatchError,
    build_schema,
    decode,
    decode_group,
    decode_primary_key,
    encode,
    encode_group,
)
from uniqueby.codec import coerce_int


@pytest.fixture
def shard_schema() -> RadixSchema:
    """Bill schema sharded ten ways by client."""
    return build_schema(ByTotals(totals={"client_id": 10}, primary_key="bill_id"))


class TestEncodeDecode:
    """Test the worked examples."""

    def test_single_field(self, shard_schema) -> None:
        """Test a one-field schema: 431 * 10 + 2."""
        composite = encode(shard_schema, 431, {"client_id": 2})

        assert composite == 4312
        assert decode_primary_key(shard_schema, 4312) == 431
        assert decode_group(shard_schema, 4312) == {"client_id": 2}

    def test_four_fields(self, sample_totals: dict[str, int]) -> None:
        """Test mixed radices pack most significant field first."""
        schema = build_schema(ByTotals(totals=sample_totals))
        group = {"client_id": 5, "x": 53, "type": 10, "y": 20}

        assert schema.group_modulus == 120000
        assert encode_group(schema, group) == 63200
        assert encode(schema, 9428, group) == 9428 * 120000 + 63200

    def test_four_fields_decode(self, sample_totals: dict[str, int]) -> None:
        """Test decoding returns the reduced values in declared order."""
        schema = build_schema(ByTotals(totals=sample_totals))
        composite = 9428 * 120000 + 63200

        assert decode_primary_key(schema, composite) == 9428
        group = decode_group(schema, composite)
        assert group == {"client_id": 5, "x": 53, "type": 0, "y": 20}
        assert list(group) == ["client_id", "x", "type", "y"]

    def test_lossy_reduction(self) -> None:
        """Test values at or above the radix are reduced, not preserved."""
        schema = build_schema(ByTotals(totals={"type": 2}))

        assert encode(schema, 839, {"type": 10}) == 1678
        assert decode_group(schema, 1678) == {"type": 0}

    def test_bit_widths(self) -> None:
        """Test bit-width schemas agree with shift-and-mask arithmetic."""
        schema = build_schema(ByBitWidths(bits={"client_id": 4, "x": 8, "type": 1, "y": 5}))
        group = {"client_id": 8, "x": 853, "type": 11, "y": 40}
        group_value = (8 << 14) + ((853 % 256) << 6) + (1 << 5) + (40 % 32)

        assert encode_group(schema, group) == group_value
        assert encode(schema, 9428, group) == (9428 << 18) + group_value
        assert decode_group(schema, (9428 << 18) + group_value) == {
            "client_id": 8,
            "x": 85,
            "type": 1,
            "y": 8,
        }

    def test_decode_both(self, shard_schema) -> None:
        """Test decode returns key and group together."""
        decoded = decode(shard_schema, 4317)

        assert decoded == DecodedComposite(431, {"client_id": 7})
        assert decoded.primary_key == 431

    def test_primary_key_zero(self, shard_schema) -> None:
        """Test a zero primary key leaves just the group."""
        assert encode(shard_schema, 0, {"client_id": 9}) == 9


class TestModulo:
    """Test reduction of out-of-range values."""

    @pytest.mark.parametrize(("value", "expected"), [(-1, 9), (-10, 0), (-13, 7), (23, 3)])
    def test_floor_modulo(self, shard_schema, value: int, expected: int) -> None:
        """Test negative values wrap with floored modulo."""
        assert encode_group(shard_schema, {"client_id": value}) == expected

    def test_radix_one(self) -> None:
        """Test a radix-1 field always encodes and decodes as zero."""
        schema = build_schema(ByTotals(totals={"a": 3, "nothing": 1}))

        assert encode_group(schema, {"a": 2, "nothing": 12345}) == 2
        assert decode_group(schema, encode(schema, 7, {"a": 2, "nothing": -4})) == {
            "a": 2,
            "nothing": 0,
        }


class TestNullPropagation:
    """Test None flows through instead of raising."""

    def test_encode_none_primary_key(self, shard_schema) -> None:
        """Test a None primary key gives None without touching the group."""
        assert encode(shard_schema, None, {}) is None

    def test_decode_none(self, shard_schema) -> None:
        """Test every decoder maps None to None."""
        assert decode_primary_key(shard_schema, None) is None
        assert decode_group(shard_schema, None) is None
        assert decode(shard_schema, None) is None


class TestValueErrors:
    """Test invalid group values and keys."""

    def test_null_group_value(self, shard_schema) -> None:
        """Test a None group value names the field."""
        with pytest.raises(GroupValueError, match="field `client_id` must not be null"):
            encode_group(shard_schema, {"client_id": None})

    def test_non_coercible_group_value(self, shard_schema) -> None:
        """Test a non-numeric group value names the field and value."""
        with pytest.raises(
            GroupValueError, match="field `client_id` must be integer-coercible, 'abc' given"
        ):
            encode_group(shard_schema, {"client_id": "abc"})

    def test_missing_group_field(self, shard_schema) -> None:
        """Test every declared field must be supplied."""
        with pytest.raises(GroupValueError, match="missing group field `client_id`"):
            encode_group(shard_schema, {})

    def test_unknown_group_field(self, shard_schema) -> None:
        """Test undeclared group keys are rejected."""
        with pytest.raises(SchemaMismatchError, match="'shard'"):
            encode_group(shard_schema, {"client_id": 1, "shard": 2})

    def test_non_coercible_primary_key(self, shard_schema) -> None:
        """Test an invalid primary key names the key field."""
        with pytest.raises(GroupValueError, match="field `bill_id`"):
            encode(shard_schema, object(), {"client_id": 1})

    def test_non_coercible_composite(self, shard_schema) -> None:
        """Test decoders reject non-numeric input."""
        with pytest.raises(GroupValueError, match="unique_bill_id"):
            decode_primary_key(shard_schema, "4312x")

    def test_error_is_value_and_type_error(self, shard_schema) -> None:
        """Test GroupValueError is catchable as either built-in."""
        with pytest.raises(ValueError):
            encode_group(shard_schema, {"client_id": None})
        with pytest.raises(TypeError):
            encode_group(shard_schema, {"client_id": None})


class TestPositionalGroup:
    """Test group values given by position instead of by name."""

    def test_sequence(self, sample_totals: dict[str, int]) -> None:
        """Test a sequence is matched to the fields in declared order."""
        schema = build_schema(ByTotals(totals=sample_totals))

        assert encode_group(schema, [5, 53, 10, 20]) == 63200
        assert encode(schema, 9428, (5, 53, 10, 20)) == 9428 * 120000 + 63200

    def test_scalar_single_field(self, shard_schema) -> None:
        """Test a one-field schema takes the bare value."""
        assert encode_group(shard_schema, 2) == 2
        assert encode(shard_schema, 431, 2) == 4312

    def test_sequence_wrong_length(self, sample_totals: dict[str, int]) -> None:
        """Test a sequence must supply every field."""
        schema = build_schema(ByTotals(totals=sample_totals))

        with pytest.raises(GroupValueError, match="expected 4 group values for id, 2 given"):
            encode_group(schema, [5, 53])

    def test_scalar_multi_field(self, sample_totals: dict[str, int]) -> None:
        """Test a bare value is ambiguous with several fields."""
        schema = build_schema(ByTotals(totals=sample_totals))

        with pytest.raises(GroupValueError, match="must be a mapping or a sequence of 4 values"):
            encode_group(schema, 2)


class TestCoercion:
    """Test integer coercion of raw values."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(7, 7), (True, 1), ("12", 12), (" -3 ", -3), (2.9, 2), (Decimal("4"), 4)],
    )
    def test_coercible(self, value: object, expected: int) -> None:
        """Test accepted value kinds."""
        assert coerce_int("f", value) == expected

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "1.5", [], b"\xff"])
    def test_not_coercible(self, value: object) -> None:
        """Test rejected value kinds."""
        with pytest.raises(GroupValueError):
            coerce_int("f", value)

    def test_string_composite(self, shard_schema) -> None:
        """Test decoders accept numeric strings."""
        assert decode_primary_key(shard_schema, "4312") == 431


class TestForeignSchema:
    """Test decoding values from a different schema."""

    def test_decodes_without_error(self, shard_schema) -> None:
        """Test a foreign composite decodes into well-typed output."""
        other = build_schema(ByTotals(totals={"a": 7, "b": 3}))
        composite = encode(other, 100, {"a": 6, "b": 2})

        decoded = decode(shard_schema, composite)

        assert isinstance(decoded.primary_key, int)
        assert set(decoded.group) == {"client_id"}
        assert 0 <= decoded.group["client_id"] < 10


class TestMaxBits:
    """Test the fixed-width ceiling at encode time."""

    def test_overflow(self) -> None:
        """Test composites wider than max_bits raise."""
        schema = build_schema(ByBitWidths(bits={"a": 4}, max_bits=8))

        assert encode(schema, 15, {"a": 15}) == 255
        with pytest.raises(CompositeOverflowError, match="max_bits=8"):
            encode(schema, 16, {"a": 0})

    def test_overflow_is_overflow_error(self) -> None:
        """Test CompositeOverflowError is an OverflowError."""
        schema = build_schema(ByBitWidths(bits={"a": 4}, max_bits=8))

        with pytest.raises(OverflowError):
            encode(schema, 1000, {"a": 0})
