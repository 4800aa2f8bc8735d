"""User record and operation result models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003 - pydantic resolves field annotations at runtime
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from accounts.auth.errors import AccountError


class UserRecord(BaseModel):
    """One registered account as stored in the user table.

    Persisted with the camelCase keys of the stored layout (``id``,
    ``firstName``, ``password``, ``lastLogin``...), see to_wire(). Parsing
    accepts either those keys or the field names. Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    user_id: str = Field(alias="id")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    password_hash: str = Field(alias="password")  # encoded credential, never plaintext
    avatar: str
    created_at: datetime = Field(alias="createdAt")
    last_login: datetime = Field(alias="lastLogin")
    is_active: bool = Field(default=True, alias="isActive")  # kept for the layout, does not gate login

    @model_validator(mode="after")
    def _validate_required_text(self) -> Self:
        for name in ("user_id", "first_name", "last_name", "email", "password_hash", "avatar"):
            if not getattr(self, name):
                raise ValueError(f"UserRecord.{name} must not be empty")
        return self

    def to_wire(self) -> dict[str, object]:
        """Return the JSON-compatible dict stored under the persisted keys."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class RegistrationInput:
    """Raw registration form data as entered by the user."""

    first_name: str
    last_name: str
    email: str
    password: str
    avatar: str


@dataclass(frozen=True)
class Result:
    """Outcome of an AccountStore operation.

    ``warnings`` lists storage problems hit by an operation that otherwise
    succeeded (for example a durable write that failed after the in-memory
    state was already updated).
    """

    success: bool
    user: UserRecord | None = None
    message: str = ""
    error: AccountError | None = None
    warnings: tuple[str, ...] = ()

    @classmethod
    def ok(cls, user: UserRecord, message: str = "", warnings: tuple[str, ...] = ()) -> Result:
        return cls(success=True, user=user, message=message, warnings=warnings)

    @classmethod
    def fail(cls, error: AccountError) -> Result:
        return cls(success=False, message=error.message, error=error)
