"""Composite identifier codec.

:class:`CompositeCodec` bundles a built :class:`~uniqueby.codec.schema.RadixSchema`
with the declaration's group block, an attribute accessor and, optionally, the record
type that doubles as the record store. It is what a record type keeps around after
declaring its composite identifier.

Example:
    >>> from uniqueby import ByTotals, build
    >>>
    >>> class Bill:
    ...     primary_key = "bill_id"
    ...
    ...     def __init__(self, bill_id, client_id):
    ...         self.bill_id = bill_id
    ...         self.client_id = client_id
    >>>
    >>> codec = build(ByTotals(totals={"client_id": 10}), record_type=Bill)
    >>> codec.composite_for(Bill(431, 2))
    4312
    >>> codec.primary_key_from(4312), codec.group_from(4312)
    (431, {'client_id': 2})
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .codec.decoder import DecodedComposite, decode, decode_group, decode_primary_key
from .codec.encoder import encode, encode_group
from .codec.schema import RadixField, RadixSchema, build_schema
from .exceptions import ConfigurationError
from .lookup import RecordStore, find_by_composite, find_by_composite_or_raise
from .models.config import ByNamedTotals, GroupBlock, GroupSpec, parse_config
from .resolver import AttributeAccessor, resolve_group


@dataclass(frozen=True)
class CompositeCodec:
    """Encodes, decodes and resolves composite identifiers for one schema.

    Attributes:
        schema: Immutable radix schema
        block: Optional group block from the declaration
        accessor: Reads primary keys and group fields from records
        record_type: Default record store for the ``find_by_composite*`` helpers
    """

    schema: RadixSchema
    block: GroupBlock | None = None
    accessor: AttributeAccessor = field(default_factory=AttributeAccessor.default)
    record_type: Any = None

    @property
    def primary_key_name(self) -> str:
        return self.schema.primary_key_name

    @property
    def fields(self) -> tuple[RadixField, ...]:
        return self.schema.fields

    @property
    def group_modulus(self) -> int:
        return self.schema.group_modulus

    # Value-level operations

    def group_value_from(self, group: Mapping[str, Any] | Sequence[Any] | Any) -> int:
        """Pack group values into the group integer."""
        return encode_group(self.schema, group)

    def composite_from(
        self, primary_key: Any, group: Mapping[str, Any] | Sequence[Any] | Any
    ) -> int | None:
        """Encode a primary key and group; None primary keys give None."""
        return encode(self.schema, primary_key, group)

    def primary_key_from(self, composite: Any) -> int | None:
        """Decode the primary key from a composite value."""
        return decode_primary_key(self.schema, composite)

    def group_from(self, composite: Any) -> dict[str, int] | None:
        """Decode the group values from a composite value."""
        return decode_group(self.schema, composite)

    def decode(self, composite: Any) -> DecodedComposite | None:
        """Decode both the primary key and the group from a composite value."""
        return decode(self.schema, composite)

    # Record-level operations

    def group_for(self, record: Any, explicit: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Resolve the raw group values of a record.

        See :func:`uniqueby.resolver.resolve_group` for the precedence rules.
        """
        return resolve_group(self.schema, record, explicit, self.block, self.accessor)

    def composite_for(self, record: Any, explicit: Mapping[str, Any] | None = None) -> int | None:
        """Compute the composite value of a record.

        The primary key is read from the record with the codec's accessor. A record
        whose primary key is None (e.g. not saved yet) has no composite value, and
        its group is not resolved.
        """
        primary_key = self.accessor.fetch(record, self.primary_key_name)
        if primary_key is None:
            return None
        return encode(self.schema, primary_key, self.group_for(record, explicit))

    # Lookup delegation

    def find_by_composite(self, composite: Any, store: RecordStore | None = None) -> Any:
        """Find a record by composite value via ``store.find_by_primary_key``."""
        return find_by_composite(self.schema, self._store(store), composite)

    def find_by_composite_or_raise(self, composite: Any, store: RecordStore | None = None) -> Any:
        """Find a record by composite value via ``store.find_by_primary_key_or_raise``."""
        return find_by_composite_or_raise(self.schema, self._store(store), composite)

    def _store(self, store: RecordStore | None) -> RecordStore:
        store = store if store is not None else self.record_type
        if store is None:
            raise ConfigurationError(
                f"no record store for {self.primary_key_name}: pass store= or build "
                f"the codec with record_type="
            )
        return store


def build(
    config: GroupSpec | Mapping[str, Any],
    record_type: Any = None,
    accessor: AttributeAccessor | None = None,
) -> CompositeCodec:
    """Build a composite codec from a group declaration.

    Args:
        config: Declaration model or a mapping that parses into one
        record_type: Record type providing the default primary-key name and acting
            as the default record store
        accessor: Attribute accessor; defaults to :meth:`AttributeAccessor.default`

    Returns:
        CompositeCodec

    Raises:
        ConfigurationError: If the declaration is malformed
    """
    spec = parse_config(config)
    return CompositeCodec(
        schema=build_schema(spec, record_type),
        block=spec.block,
        accessor=accessor or AttributeAccessor.default(),
        record_type=record_type,
    )


def unique_by(
    *names: str,
    total: int | Sequence[int] | None = None,
    bits: int | Sequence[int] | None = None,
    block: GroupBlock | None = None,
    primary_key: str | None = None,
    record_type: Any = None,
) -> CompositeCodec:
    """Declare a composite identifier with positional group names.

    Keyword front door for :class:`~uniqueby.models.config.ByNamedTotals`.

    Example:
        >>> codec = unique_by("client_id", "x", total=[10, 200, 2, 20],
        ...                   block=lambda bill: {"group_2": 10, "group_3": bill.y},
        ...                   record_type=Bill)
    """
    spec = ByNamedTotals(
        names=list(names),
        totals=total,
        bits=bits,
        block=block,
        primary_key=primary_key,
    )
    return build(spec, record_type=record_type)
