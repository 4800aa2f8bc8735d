"""Error taxonomy for account operations.

AccountStore raises these internally and converts them into Result values at
its public boundary, so callers receive failures as data.
"""


class AccountError(Exception):
    """Base class for recoverable account failures carrying a user-facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AccountError):
    """Malformed or missing input."""


class ConflictError(AccountError):
    """Uniqueness violation, such as an already registered email."""


class AuthError(AccountError):
    """Unknown account or credential mismatch. The message never says which."""


class StorageError(AccountError):
    """The durable store could not be written."""
