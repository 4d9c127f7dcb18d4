"""Group resolution for records.

This module works out the group values of a record before encoding. Values are taken
from three sources, lowest priority first:

1. Explicit values passed by the caller
2. The declaration's group block, called only if a field is still missing; its
   values override explicit ones
3. The record itself, read attribute by attribute for any field still missing

Reading a field from a record goes through an :class:`AttributeAccessor`, an ordered
list of lookup strategies. The default order is mapping key, instance attribute,
then type-level attribute.

Example:
    >>> schema = build_schema(ByTotals(totals={"client_id": 10, "kind": 2}))
    >>> resolve_group(schema, bill, {"kind": 1})
    {'client_id': 2, 'kind': 1}
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .codec.schema import RadixSchema
from .exceptions import MissingAttributeError, SchemaMismatchError
from .models.config import GroupBlock

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


#: Returned by a lookup strategy that can't serve the requested name.
MISSING: Any = _Missing()

#: ``strategy(record, name)`` returns the value or :data:`MISSING`.
LookupStrategy = Callable[[Any, str], Any]

# Type-level descriptors that only make sense on an instance.
_INSTANCE_ONLY = (
    property,
    types.FunctionType,
    types.MemberDescriptorType,
    types.GetSetDescriptorType,
)


def mapping_key(record: Any, name: str) -> Any:
    """Read ``name`` as a key when the record is a mapping (e.g. a plain dict row)."""
    if isinstance(record, Mapping) and name in record:
        return record[name]
    return MISSING


def instance_attribute(record: Any, name: str) -> Any:
    """Read ``name`` from the record instance.

    Bound methods and static methods reached through the instance are called.
    """
    try:
        value = getattr(record, name)
    except AttributeError:
        return MISSING
    if inspect.ismethod(value) or isinstance(
        inspect.getattr_static(record, name, None), staticmethod
    ):
        return value()
    return value


def type_attribute(record: Any, name: str) -> Any:
    """Read ``name`` from the record's type.

    Class and static methods are called with no arguments. Properties, plain
    functions and slot descriptors need an instance, so they count as absent.
    """
    record_type = type(record)
    try:
        raw = inspect.getattr_static(record_type, name)
    except AttributeError:
        return MISSING

    if isinstance(raw, (classmethod, staticmethod)):
        return getattr(record_type, name)()
    if isinstance(raw, _INSTANCE_ONLY):
        return MISSING
    return getattr(record_type, name)


@dataclass(frozen=True)
class AttributeAccessor:
    """Reads named fields from records using ordered lookup strategies.

    Attributes:
        strategies: Strategies tried in order; the first one not returning
            MISSING wins
    """

    strategies: tuple[LookupStrategy, ...] = (mapping_key, instance_attribute, type_attribute)

    @classmethod
    def default(cls) -> AttributeAccessor:
        """Accessor with the default strategy order."""
        return cls()

    def fetch(self, record: Any, name: str) -> Any:
        """Return the value of ``name`` on ``record``.

        Raises:
            MissingAttributeError: If no strategy can serve the name
        """
        for strategy in self.strategies:
            value = strategy(record, name)
            if value is not MISSING:
                return value
        raise MissingAttributeError(record, name)


def resolve_group(
    schema: RadixSchema,
    record: Any,
    explicit: Mapping[str, Any] | None = None,
    block: GroupBlock | None = None,
    accessor: AttributeAccessor | None = None,
) -> dict[str, Any]:
    """Resolve the raw group values of a record.

    Args:
        schema: Radix schema
        record: Record the group belongs to
        explicit: Values supplied by the caller, partial or complete
        block: Optional ``block(record) -> mapping`` computing group values
        accessor: Attribute accessor for the fields still missing; defaults to
            :meth:`AttributeAccessor.default`

    Returns:
        Raw value for every declared field, in declared order

    Raises:
        SchemaMismatchError: If explicit values or the block result contain
            undeclared keys, or the block doesn't return a mapping
        MissingAttributeError: If a field can't be read from the record
    """
    group: dict[str, Any] = dict(explicit or {})
    schema.reject_unknown(group, "explicit group")

    missing = [name for name in schema.names if name not in group]
    if not missing:
        return {name: group[name] for name in schema.names}

    if block is not None:
        logger.debug(
            "computing group for %s, missing %s", type(record).__name__, ", ".join(missing)
        )
        computed = block(record)
        if not isinstance(computed, Mapping):
            raise SchemaMismatchError(
                f"group block for {schema.primary_key_name} must return a mapping, "
                f"{computed!r} given"
            )
        schema.reject_unknown(computed, "group block result")
        group.update(computed)

    fetch = (accessor or AttributeAccessor.default()).fetch
    return {
        name: group[name] if name in group else fetch(record, name) for name in schema.names
    }
