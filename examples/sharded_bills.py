#!/usr/bin/env python3
"""Record-level example: sharded bill tables sharing one key space.

Medical and utility bills live in separate tables whose primary keys overlap. A
group block stamps each record with its table code, so a composite bill id alone is
enough to know which table, and which client shard, to query.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from pydantic import BaseModel

from uniqueby import ByNamedTotals, build


class Bill(BaseModel):
    """Bill row."""

    primary_key: ClassVar[str] = "bill_id"
    table_code: ClassVar[int] = 0

    bill_id: Optional[int] = None
    client_id: int


class MedicalBill(Bill):
    table_code: ClassVar[int] = 0


class UtilityBill(Bill):
    table_code: ClassVar[int] = 1


class Table:
    """Tiny in-memory table standing in for the storage layer."""

    def __init__(self, *rows: Bill) -> None:
        self.rows = {row.bill_id: row for row in rows}

    def find_by_primary_key(self, key: Any) -> Optional[Bill]:
        return self.rows.get(key)

    def find_by_primary_key_or_raise(self, key: Any) -> Bill:
        return self.rows[key]


def main() -> None:
    """Run the sharded bills example."""
    # client_id from the record, the table code from the block
    codec = build(
        ByNamedTotals(
            names=["client_id"],
            bits=[4, 1],
            block=lambda bill: {"group_1": bill.table_code},
        ),
        record_type=Bill,
    )

    tables = {
        0: Table(MedicalBill(bill_id=839, client_id=5)),
        1: Table(UtilityBill(bill_id=839, client_id=8)),
    }

    for bill in (MedicalBill(bill_id=839, client_id=5), UtilityBill(bill_id=839, client_id=8)):
        composite = codec.composite_for(bill)
        group = codec.group_from(composite)
        table = tables[group["group_1"]]
        found = codec.find_by_composite_or_raise(composite, store=table)
        print(f"{type(bill).__name__:12} composite={composite:6} group={group} -> {found!r}")


if __name__ == "__main__":
    main()
