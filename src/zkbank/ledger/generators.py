"""Identifier and placeholder value generators.

The ledger never verifies signatures or proofs; these helpers only produce
opaque ``0x``-prefixed hex strings. Tests inject
:class:`SequentialPlaceholderGenerator` for deterministic output.
"""

from __future__ import annotations

import itertools
import secrets
from datetime import UTC, datetime
from typing import Protocol

HEX_PREFIX = "0x"


def utc_now() -> datetime:
    """Default ledger clock."""
    return datetime.now(tz=UTC)


class PlaceholderGenerator(Protocol):
    """Source of identifiers and placeholder hex strings."""

    def transaction_id(self) -> str: ...
    def hex_string(self, nbytes: int = 32) -> str: ...


class RandomPlaceholderGenerator:
    """Cryptographically uniform generator backed by :mod:`secrets`."""

    def __init__(self, id_hex_length: int = 26) -> None:
        self._id_hex_length = id_hex_length

    def transaction_id(self) -> str:
        """Return ``0x`` followed by ``id_hex_length`` random hex characters."""
        raw = secrets.token_hex((self._id_hex_length + 1) // 2)
        return HEX_PREFIX + raw[: self._id_hex_length]

    def hex_string(self, nbytes: int = 32) -> str:
        return HEX_PREFIX + secrets.token_hex(nbytes)


class SequentialPlaceholderGenerator:
    """Deterministic generator: ids and hex strings from a counter."""

    def __init__(self, prefix: str = "tx", start: int = 1) -> None:
        self._prefix = prefix
        self._ids = itertools.count(start)
        self._values = itertools.count(start)

    def transaction_id(self) -> str:
        return f"{HEX_PREFIX}{self._prefix}{next(self._ids):04d}"

    def hex_string(self, nbytes: int = 32) -> str:
        return HEX_PREFIX + format(next(self._values), f"0{nbytes * 2}x")
