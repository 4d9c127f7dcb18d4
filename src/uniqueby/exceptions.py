"""Exception hierarchy for uniqueby.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from UniqueByError for easy catching of any uniqueby-specific error.
Each one also inherits from the closest built-in exception, so callers that only know
about ``TypeError`` or ``AttributeError`` still catch them.
"""

from __future__ import annotations

from typing import Iterable


class UniqueByError(Exception):
    """Base exception for all uniqueby errors."""

    pass


class ConfigurationError(UniqueByError):
    """Raised when a group declaration cannot be turned into a radix schema.

    Always raised while building the schema, never deferred to encode time.

    Examples:
        - Both totals and bit-widths given, or neither
        - Name count doesn't match the radix count
        - No group names and no generator block
        - Duplicate field names
    """

    pass


class RadixTypeError(ConfigurationError, TypeError):
    """Raised when a declared total or bit-width is not a usable integer."""

    def __init__(self, name: str, value: object, expected: str) -> None:
        super().__init__(f"field `{name}` must be {expected}, {value!r} given")
        self.name = name
        self.value = value


class GroupValueError(UniqueByError, ValueError, TypeError):
    """Raised when a group value or primary key cannot be encoded.

    Examples:
        - Value is None where a value is required
        - Value is not integer-coercible
        - A declared group field is missing from the mapping
    """

    pass


class SchemaMismatchError(UniqueByError, ValueError):
    """Raised when group keys unknown to the schema are supplied.

    Attributes:
        unknown_keys: Offending keys, in the order they were supplied
    """

    def __init__(self, message: str, unknown_keys: Iterable[str] = ()) -> None:
        self.unknown_keys = tuple(unknown_keys)
        super().__init__(message)


class MissingAttributeError(UniqueByError, AttributeError):
    """Raised when a group field can't be read from the record by any accessor."""

    def __init__(self, record: object, name: str) -> None:
        super().__init__(
            f"{type(record).__name__} has no attribute `{name}` "
            f"at instance or type level"
        )
        # AttributeError.__init__ resets ``name``
        self.record = record
        self.name = name


class CompositeOverflowError(UniqueByError, OverflowError):
    """Raised when a composite value would not fit the configured bit width."""

    pass
