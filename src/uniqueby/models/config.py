"""Group declarations modelled with Pydantic.

A composite identifier is declared by one of three equivalent shapes. Each shape is a
frozen Pydantic model carrying a ``kind`` discriminator, so a plain dict (for example
one loaded from a settings file) can be parsed into the right model with
:func:`parse_config`.

Radix values are deliberately typed as ``Any`` here: checking that they are usable
integers is the schema builder's job, which reports failures as
:class:`~uniqueby.exceptions.ConfigurationError` naming the offending field.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..exceptions import ConfigurationError

#: Computes some or all group values for a record at resolution time.
GroupBlock = Callable[[Any], Mapping[str, Any]]


class GroupSpec(BaseModel):
    """Options shared by every declaration shape.

    Attributes:
        primary_key: Name of the primary-key field. Defaults to the record type's
            declared primary key.
        block: Optional callable ``block(record) -> mapping`` that supplies group
            values the caller didn't pass explicitly.
        max_bits: Optional ceiling on the bit length of composite values, for
            storage columns of fixed width (e.g. 63 for a signed BIGINT).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    primary_key: str | None = None
    block: GroupBlock | None = None
    max_bits: int | None = Field(default=None, ge=1)


class ByTotals(GroupSpec):
    """Fields declared as ``name -> total``; the total is used as the radix.

    Example:
        >>> ByTotals(totals={"client_id": 10, "type": 2})
    """

    kind: Literal["totals"] = "totals"
    totals: dict[str, Any]


class ByBitWidths(GroupSpec):
    """Fields declared as ``name -> bit-width``; the radix is ``2 ** width``.

    Example:
        >>> ByBitWidths(bits={"shard": 4, "type": 1})
    """

    kind: Literal["bits"] = "bits"
    bits: dict[str, Any]


class ByNamedTotals(GroupSpec):
    """Positional declaration: a list of names plus parallel totals or bit-widths.

    Exactly one of ``totals`` and ``bits`` must be given. Without a ``block`` there
    must be one name per radix. With a ``block`` there may be fewer names; the
    trailing unnamed fields are called ``group_<position>`` and have to be supplied
    by the block (or explicitly).

    Scalars are accepted for ``totals``/``bits`` and promoted to one-element lists.

    Example:
        >>> ByNamedTotals(names=["client_id", "x"], totals=[10, 200, 2, 20],
        ...               block=lambda bill: {"group_2": 10, "group_3": bill.y})
    """

    kind: Literal["named"] = "named"
    names: list[str] = Field(default_factory=list)
    totals: list[Any] = Field(default_factory=list)
    bits: list[Any] = Field(default_factory=list)

    @field_validator("totals", "bits", mode="before")
    @classmethod
    def _promote_scalar(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]


GroupConfig = Annotated[
    Union[ByTotals, ByBitWidths, ByNamedTotals],
    Field(discriminator="kind"),
]

_config_adapter: TypeAdapter[Any] = TypeAdapter(GroupConfig)


def parse_config(config: GroupSpec | Mapping[str, Any]) -> GroupSpec:
    """Turn a declaration into one of the :class:`GroupSpec` models.

    Model instances are returned unchanged. Mappings are parsed by their ``kind``
    key; when it's missing, the kind is inferred from which radix key is present
    (a ``totals`` or ``bits`` mapping, otherwise the positional form).

    Args:
        config: A GroupSpec model or a plain mapping

    Returns:
        Parsed declaration

    Raises:
        ConfigurationError: If the mapping doesn't fit any declaration shape
    """
    if isinstance(config, GroupSpec):
        return config
    if not isinstance(config, Mapping):
        raise ConfigurationError(
            f"group declaration must be a GroupSpec or a mapping, {type(config).__name__} given"
        )

    data = dict(config)
    if "kind" not in data:
        data["kind"] = _infer_kind(data)

    try:
        return _config_adapter.validate_python(data)
    except ValidationError as err:
        raise ConfigurationError(f"invalid group declaration: {err}") from err


def _infer_kind(data: Mapping[str, Any]) -> str:
    if "names" not in data:
        if isinstance(data.get("totals"), Mapping):
            return "totals"
        if isinstance(data.get("bits"), Mapping):
            return "bits"
    return "named"
