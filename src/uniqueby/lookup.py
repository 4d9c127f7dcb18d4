"""Lookup delegation by composite value.

Composite values are never stored, so finding a record by one means decoding the
primary key and asking the store for that. Errors raised by the store propagate
unchanged; nothing is cached or retried.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .codec.decoder import decode_primary_key
from .codec.schema import RadixSchema


@runtime_checkable
class RecordStore(Protocol):
    """Single-record lookup by primary key, provided by the host storage layer."""

    def find_by_primary_key(self, key: Any) -> Any:
        """Return the record with this primary key, or None."""
        ...

    def find_by_primary_key_or_raise(self, key: Any) -> Any:
        """Return the record with this primary key, raising if it doesn't exist."""
        ...


def find_by_composite(schema: RadixSchema, store: RecordStore, composite: Any) -> Any:
    """Find a record by composite value, or None if the store has no match."""
    return store.find_by_primary_key(decode_primary_key(schema, composite))


def find_by_composite_or_raise(schema: RadixSchema, store: RecordStore, composite: Any) -> Any:
    """Find a record by composite value; the store raises when there is no match."""
    return store.find_by_primary_key_or_raise(decode_primary_key(schema, composite))
