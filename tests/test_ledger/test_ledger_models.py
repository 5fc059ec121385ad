"""Tests for ledger record models and derived fields."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from zkbank.ledger.models import (
    NotarySignature,
    SignatureEntry,
    StatusView,
    TransactionRecord,
    TransactionStatus,
)

NOW = datetime(2024, 1, 1, tzinfo=UTC)


def _record(required: int = 2, *, notary: bool = True) -> TransactionRecord:
    return TransactionRecord(
        id="0x1",
        initiator="0xa",
        counterparty="0xb",
        amount=1,
        required_signatures=required,
        notary_required=notary,
        zkp_proof="0x",
        tx_data="0x",
        created_at=NOW,
    )


def _sig(signer: str) -> SignatureEntry:
    return SignatureEntry(signer=signer, signature="s", public_key="k", timestamp=NOW)


def test_status_values() -> None:
    assert [s.value for s in TransactionStatus] == [
        "pending",
        "ready_for_notary",
        "ready_for_completion",
        "completed",
    ]


def test_timestamp_epoch_millis() -> None:
    assert _record().timestamp == int(NOW.timestamp() * 1000)


def test_has_signer() -> None:
    rec = _record()
    rec.signatures.append(_sig("0xa"))
    assert rec.has_signer("0xa")
    assert not rec.has_signer("0xb")


class TestProgress:
    def test_fresh_with_notary(self) -> None:
        assert _record().progress == 0

    def test_fresh_without_notary(self) -> None:
        assert _record(notary=False).progress == 25

    def test_half_signed(self) -> None:
        rec = _record()
        rec.signatures.append(_sig("0xa"))
        assert rec.progress == 25

    def test_fractional_progress_truncated(self) -> None:
        rec = _record(required=3)
        rec.signatures.append(_sig("0xa"))
        assert rec.progress == 16

    def test_notarized(self) -> None:
        rec = _record()
        rec.signatures.extend([_sig("0xa"), _sig("0xb")])
        rec.notary_signature = NotarySignature("0xn", "s", "k", NOW)
        assert rec.progress == 75

    def test_capped(self) -> None:
        rec = _record(required=1, notary=False)
        rec.signatures.extend([_sig("0xa"), _sig("0xb"), _sig("0xc")])
        rec.completed = True
        assert rec.progress == 100


class TestCanComplete:
    @pytest.mark.parametrize(
        ("signers", "notary_required", "notarized", "expected"),
        [
            (1, True, False, False),
            (2, True, False, False),
            (2, True, True, True),
            (1, False, False, False),
            (2, False, False, True),
        ],
    )
    def test_matrix(self, signers, notary_required, notarized, expected) -> None:
        rec = _record(notary=notary_required)
        rec.signatures.extend(_sig(f"0x{i}") for i in range(signers))
        if notarized:
            rec.notary_signature = NotarySignature("0xn", "s", "k", NOW)
        assert rec.can_complete is expected

    def test_false_once_completed(self) -> None:
        rec = _record(required=1, notary=False)
        rec.signatures.append(_sig("0xa"))
        rec.completed = True
        assert rec.can_complete is False


def test_status_view_from_record() -> None:
    rec = _record()
    rec.signatures.append(_sig("0xa"))
    view = StatusView.from_record(rec)
    assert view == StatusView(
        status=TransactionStatus.PENDING,
        completed=False,
        signatures_count=1,
        required_signatures=2,
        has_notary_signature=False,
    )
