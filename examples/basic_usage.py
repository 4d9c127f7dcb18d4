#!/usr/bin/env python3
"""Basic usage example for uniqueby.

This example demonstrates:
1. Declaring a composite identifier with Pydantic declaration models
2. Encoding a primary key and its group into one integer
3. Decoding the primary key and group back
4. Checking how much room is left for primary keys
"""

from __future__ import annotations

from uniqueby import ByTotals, build, field_bits, group_bits, max_primary_key


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("uniqueby Basic Usage Example")
    print("=" * 60)
    print()

    # Bills are sharded by client (10 shards) and tagged with a type code (2 kinds)
    print("1. Declaring the composite bill id...")
    codec = build(ByTotals(totals={"client_id": 10, "type": 2}, primary_key="bill_id"))
    print(f"   Fields: {[(f.name, f.radix) for f in codec.fields]}")
    print(f"   Group modulus: {codec.group_modulus}")
    print()

    print("2. Encoding bill 431 for client 7, type 1...")
    composite = codec.composite_from(431, {"client_id": 7, "type": 1})
    print(f"   Composite bill id: {composite}")
    print()

    print("3. Decoding...")
    decoded = codec.decode(composite)
    print(f"   bill_id: {decoded.primary_key}")
    print(f"   group:   {decoded.group}")
    print()

    print("4. Sizing...")
    print(f"   Bits per field: {field_bits(codec.schema)}")
    print(f"   Group bits: {group_bits(codec.schema)}")
    print(f"   Largest bill_id in a signed 64-bit column: {max_primary_key(codec.schema)}")


if __name__ == "__main__":
    main()
