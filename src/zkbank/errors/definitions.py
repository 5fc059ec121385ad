"""Ledger error definitions.

Each class carries the HTTP status and machine-readable code that the API
layer returns to the client.
"""

from __future__ import annotations

from zkbank.errors.zk_errors import ZkBankError

# -- Validation ------------------------------------------------------------


class ValidationError(ZkBankError):
    """Missing or malformed input."""

    def __init__(self, message: str = "missing required fields") -> None:
        super().__init__(message, status_code=400, code="validation-error")


# -- Not Found -------------------------------------------------------------


class NotFoundError(ZkBankError):
    """Unknown transaction identifier."""

    def __init__(self, tx_id: str = "") -> None:
        super().__init__("transaction not found", status_code=404, code="transaction-not-found")
        self.tx_id = tx_id


# -- Transitions -----------------------------------------------------------


class AlreadyCompletedError(ZkBankError):
    """The transaction reached its terminal state; no further transitions."""

    def __init__(self, tx_id: str = "") -> None:
        super().__init__("transaction already completed", status_code=400, code="already-completed")
        self.tx_id = tx_id


class DuplicateSignerError(ZkBankError):
    """The signer already signed this transaction."""

    def __init__(self, signer: str = "") -> None:
        super().__init__(
            "signer already signed this transaction", status_code=400, code="duplicate-signer"
        )
        self.signer = signer


class NotaryNotRequiredError(ZkBankError):
    """A notary signature was submitted for a transaction without a notary gate."""

    def __init__(self) -> None:
        super().__init__(
            "notary signature not required for this transaction",
            status_code=400,
            code="notary-not-required",
        )


class InsufficientSignaturesError(ZkBankError):
    """Fewer signatures than the threshold."""

    def __init__(self, have: int = 0, need: int = 0) -> None:
        super().__init__(
            f"not enough signatures ({have}/{need})",
            status_code=400,
            code="insufficient-signatures",
        )
        self.have = have
        self.need = need


class MissingNotaryError(ZkBankError):
    """Completion attempted before the required notary signature."""

    def __init__(self) -> None:
        super().__init__(
            "notary signature required but not provided", status_code=400, code="missing-notary"
        )


# -- Internal --------------------------------------------------------------


class InternalError(ZkBankError):
    """Unexpected failure. The message shown to clients is always generic."""

    def __init__(self, message: str = "internal server error") -> None:
        super().__init__(message, status_code=500, code="internal-error")
