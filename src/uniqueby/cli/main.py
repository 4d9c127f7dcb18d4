"""Main CLI entry point for uniqueby."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from .. import __version__
from ..codec.schema import RadixSchema, build_schema
from ..composite import CompositeCodec, build
from ..exceptions import UniqueByError
from ..models.config import ByNamedTotals

EXAMPLES = """\
Examples:
  uniqueby describe --total client_id=10 --total type=2
  uniqueby encode --total client_id=10 --primary-key 431 --group client_id=2
  uniqueby decode --total client_id=10 4312
"""


def _assignment(text: str) -> tuple[str, str]:
    """Parse a ``name=value`` command line argument."""
    name, sep, value = text.partition("=")
    if not sep or not name or not value:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    return name.strip(), value.strip()


def _radix_value(value: str) -> Any:
    # Left as text when unparsable so the schema builder reports the field.
    try:
        return int(value)
    except ValueError:
        return value


def _declaration(args: argparse.Namespace) -> ByNamedTotals:
    """Build a positional declaration from repeated --total/--bits options."""
    totals = list(args.total or [])
    bits = list(args.bits or [])
    return ByNamedTotals(
        names=[name for name, _ in totals + bits],
        totals=[_radix_value(value) for _, value in totals],
        bits=[_radix_value(value) for _, value in bits],
        primary_key=args.primary_key_name,
    )


def _describe(schema: RadixSchema) -> None:
    width = max(len(f.name) for f in schema.fields) + 4
    print(f"Composite {schema.primary_key_name}: {len(schema.fields)} group field"
          f"{'s' if len(schema.fields) != 1 else ''}")
    for i, radix_field in enumerate(schema.fields, 1):
        label = f"{i}. {radix_field.name}"
        dots = "." * max(1, width - len(radix_field.name))
        print(f"        {label}{dots}radix {radix_field.radix} "
              f"({radix_field.bits_required()} bits)")
    print(f"Group modulus: {schema.group_modulus}")
    print(f"Group bits: {schema.group_bits()}")


def _encode(codec: CompositeCodec, args: argparse.Namespace) -> None:
    group = dict(args.group or [])
    print(codec.composite_from(args.primary_key, group))


def _decode(codec: CompositeCodec, args: argparse.Namespace) -> None:
    print(f"{codec.primary_key_name}={codec.primary_key_from(args.composite)}")
    for name, value in (codec.group_from(args.composite) or {}).items():
        print(f"{name}={value}")


def _add_schema_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--total",
        metavar="NAME=N",
        type=_assignment,
        action="append",
        help="Group field with N distinct values (repeatable, in significance order)",
    )
    parser.add_argument(
        "--bits",
        metavar="NAME=N",
        type=_assignment,
        action="append",
        help="Group field N bits wide (repeatable, in significance order)",
    )
    parser.add_argument(
        "--primary-key-name",
        metavar="NAME",
        default=None,
        help="Name of the primary-key field (default: id)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the uniqueby CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="uniqueby",
        description="uniqueby: Composite identifiers with recoverable group values",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EXAMPLES,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"uniqueby {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command")

    describe_parser = subparsers.add_parser("describe", help="Show the radix layout")
    _add_schema_options(describe_parser)

    encode_parser = subparsers.add_parser("encode", help="Encode a primary key and group")
    _add_schema_options(encode_parser)
    encode_parser.add_argument("--primary-key", type=int, required=True, help="Primary key")
    encode_parser.add_argument(
        "--group",
        metavar="NAME=VALUE",
        type=_assignment,
        action="append",
        help="Group value (repeatable)",
    )

    decode_parser = subparsers.add_parser("decode", help="Decode a composite value")
    _add_schema_options(decode_parser)
    decode_parser.add_argument("composite", type=int, help="Composite value")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        declaration = _declaration(args)
        if args.command == "describe":
            _describe(build_schema(declaration))
        elif args.command == "encode":
            _encode(build(declaration), args)
        else:
            _decode(build(declaration), args)
    except UniqueByError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
