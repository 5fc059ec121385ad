"""ZkBankError: base exception class for all py-zkbank errors."""

from __future__ import annotations


class ZkBankError(Exception):
    """Base error for all ledger operations.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "zkbank-error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def to_dict(self) -> dict[str, object]:
        """Client-visible error body."""
        return {"success": False, "code": self.code, "message": self.message}
