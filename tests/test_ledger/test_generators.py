"""Tests for identifier and placeholder generators."""

from __future__ import annotations

import re

from zkbank.ledger.generators import (
    RandomPlaceholderGenerator,
    SequentialPlaceholderGenerator,
    utc_now,
)

HEX = re.compile(r"^0x[0-9a-f]+$")


class TestRandomPlaceholderGenerator:
    def test_transaction_id_shape(self) -> None:
        tx_id = RandomPlaceholderGenerator().transaction_id()
        assert HEX.match(tx_id)
        assert len(tx_id) == 28

    def test_odd_id_length(self) -> None:
        tx_id = RandomPlaceholderGenerator(id_hex_length=9).transaction_id()
        assert len(tx_id) == 11

    def test_ids_differ(self) -> None:
        gen = RandomPlaceholderGenerator()
        assert len({gen.transaction_id() for _ in range(50)}) == 50

    def test_hex_string(self) -> None:
        value = RandomPlaceholderGenerator().hex_string()
        assert HEX.match(value)
        assert len(value) == 2 + 64


class TestSequentialPlaceholderGenerator:
    def test_ids(self) -> None:
        gen = SequentialPlaceholderGenerator()
        assert gen.transaction_id() == "0xtx0001"
        assert gen.transaction_id() == "0xtx0002"

    def test_prefix_and_start(self) -> None:
        gen = SequentialPlaceholderGenerator(prefix="demo", start=7)
        assert gen.transaction_id() == "0xdemo0007"

    def test_hex_string_width(self) -> None:
        gen = SequentialPlaceholderGenerator()
        assert gen.hex_string(4) == "0x00000001"
        assert gen.hex_string(4) == "0x00000002"


def test_utc_now_is_aware() -> None:
    assert utc_now().tzinfo is not None
