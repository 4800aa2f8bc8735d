"""User registration, credential checks, and the persisted current session."""

from accounts.auth.errors import AccountError, AuthError, ConflictError, StorageError, ValidationError
from accounts.auth.models import RegistrationInput, Result, UserRecord
from accounts.auth.password import Base64Encoder, BcryptEncoder, PasswordEncoder, get_encoder
from accounts.auth.repository import UserTableRepository
from accounts.auth.service import AccountStore
from accounts.auth.session_store import SessionRepository
from accounts.auth.validation import PasswordCheck, validate_email, validate_password

__all__ = [
    "AccountError",
    "AccountStore",
    "AuthError",
    "Base64Encoder",
    "BcryptEncoder",
    "ConflictError",
    "PasswordCheck",
    "PasswordEncoder",
    "RegistrationInput",
    "Result",
    "SessionRepository",
    "StorageError",
    "UserRecord",
    "UserTableRepository",
    "ValidationError",
    "get_encoder",
    "validate_email",
    "validate_password",
]
