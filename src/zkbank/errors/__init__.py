"""Error taxonomy for ledger and API failures."""

from zkbank.errors.definitions import (
    AlreadyCompletedError,
    DuplicateSignerError,
    InsufficientSignaturesError,
    InternalError,
    MissingNotaryError,
    NotaryNotRequiredError,
    NotFoundError,
    ValidationError,
)
from zkbank.errors.zk_errors import ZkBankError

__all__ = [
    "AlreadyCompletedError",
    "DuplicateSignerError",
    "InsufficientSignaturesError",
    "InternalError",
    "MissingNotaryError",
    "NotFoundError",
    "NotaryNotRequiredError",
    "ValidationError",
    "ZkBankError",
]
