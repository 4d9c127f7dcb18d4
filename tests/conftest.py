"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any, ClassVar

import pytest


class Bill:
    """Minimal record type: declares its primary key and acts as its own store."""

    primary_key: ClassVar[str] = "bill_id"
    lookups: ClassVar[list[tuple[str, Any]]] = []

    def __init__(self, bill_id: Any, client_id: Any = None) -> None:
        self.bill_id = bill_id
        self.client_id = client_id

    @classmethod
    def find_by_primary_key(cls, key: Any) -> Any:
        cls.lookups.append(("find_by_primary_key", key))
        return None

    @classmethod
    def find_by_primary_key_or_raise(cls, key: Any) -> Any:
        cls.lookups.append(("find_by_primary_key_or_raise", key))
        return None


@pytest.fixture
def bill_type() -> type[Bill]:
    """A fresh Bill subclass with its own lookup log."""

    class FreshBill(Bill):
        lookups: ClassVar[list[tuple[str, Any]]] = []

    return FreshBill


@pytest.fixture
def sample_totals() -> dict[str, int]:
    """Four-field mixed-radix layout used across tests."""
    return {"client_id": 10, "x": 200, "type": 2, "y": 30}
