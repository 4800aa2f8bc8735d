"""Account store coordinating registration, login, and the current session."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from accounts.auth.errors import AccountError, AuthError, ConflictError, StorageError, ValidationError
from accounts.auth.models import RegistrationInput, Result, UserRecord
from accounts.auth.repository import DEFAULT_USERS_KEY, UserTableRepository, find_by_email, find_by_id
from accounts.auth.session_store import DEFAULT_SESSION_KEY, SessionRepository
from accounts.auth.validation import (
    MSG_AVATAR_REQUIRED,
    MSG_INVALID_EMAIL,
    MSG_NAME_REQUIRED,
    normalize_email,
    validate_email,
    validate_names,
    validate_password,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from accounts.auth.password import PasswordEncoder
    from accounts.storage import KeyValueStore

    SessionListener = Callable[[UserRecord | None], None]

logger = structlog.get_logger()

MSG_CREDENTIALS_REQUIRED = "Please enter email and password"
MSG_INVALID_CREDENTIALS = "Invalid email or password"
MSG_EMAIL_TAKEN = "Email already registered"
MSG_REGISTERED = "Registration successful!"
MSG_LOGGED_IN = "Login successful!"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class AccountStore:
    """Own the user table and the current session.

    Every public operation returns a Result (or nothing) and never raises for
    bad input, wrong credentials or storage trouble. Failed durable writes do
    not roll back in-memory state; they are logged and listed in
    ``Result.warnings``.

    Construct one per process at startup and call restore_session() before
    serving the presentation layer.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        encoder: PasswordEncoder,
        users_key: str = DEFAULT_USERS_KEY,
        session_key: str = DEFAULT_SESSION_KEY,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._users = UserTableRepository(store, users_key)
        self._sessions = SessionRepository(store, session_key)
        self._encoder = encoder
        self._clock = clock
        self._current: UserRecord | None = None
        self._listeners: list[SessionListener] = []

    # -- session queries --

    def is_logged_in(self) -> bool:
        return self._current is not None

    def current_user(self) -> UserRecord | None:
        return self._current

    def users(self) -> list[UserRecord]:
        """Return the persisted user table. Unreadable data reads as empty."""
        return self._users.load()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call listener with the new session state whenever it changes.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- operations --

    def restore_session(self) -> tuple[str, ...]:
        """Reload the durable session, dropping it if it no longer matches a user.

        Returns storage warnings, empty when the stored state is consistent.
        """
        warnings: list[str] = []
        snapshot = self._sessions.load()
        if snapshot is not None and find_by_id(self._users.load(), snapshot.user_id) is not None:
            self._current = snapshot
            logger.info("restored session", user_id=snapshot.user_id)
        else:
            if snapshot is not None:
                logger.info("discarding session for unknown user", user_id=snapshot.user_id)
            self._current = None
            self._clear_durable_session(warnings)
        self._notify()
        return tuple(warnings)

    def register(self, first_name: str, last_name: str, email: str, password: str, avatar: str) -> Result:
        """Create an account and log into it."""
        warnings: list[str] = []
        try:
            user = self._register(
                RegistrationInput(
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    password=password,
                    avatar=avatar,
                ),
                warnings,
            )
        except AccountError as e:
            logger.info("registration rejected", reason=type(e).__name__)
            return Result.fail(e)
        return Result.ok(user, message=MSG_REGISTERED, warnings=tuple(dict.fromkeys(warnings)))

    def register_input(self, data: RegistrationInput) -> Result:
        return self.register(data.first_name, data.last_name, data.email, data.password, data.avatar)

    def login(self, email: str, password: str) -> Result:
        """Check credentials and start a session."""
        warnings: list[str] = []
        try:
            user = self._login(self._users.load(), email, password, warnings)
        except AccountError as e:
            logger.info("login rejected", reason=type(e).__name__)
            return Result.fail(e)
        return Result.ok(user, message=MSG_LOGGED_IN, warnings=tuple(dict.fromkeys(warnings)))

    def logout(self) -> tuple[str, ...]:
        """End the current session. Safe to call when nobody is logged in.

        Returns storage warnings; the in-memory session is cleared regardless.
        """
        warnings: list[str] = []
        if self._current is not None:
            logger.info("logged out", user_id=self._current.user_id)
        self._current = None
        self._clear_durable_session(warnings)
        self._notify()
        return tuple(warnings)

    # -- private helpers --

    def _register(self, data: RegistrationInput, warnings: list[str]) -> UserRecord:
        _validate_registration(data)

        users = self._users.load()
        if find_by_email(users, data.email) is not None:
            raise ConflictError(MSG_EMAIL_TAKEN)

        try:
            password_hash = self._encoder.encode(data.password)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        now = self._clock()
        user = UserRecord(
            user_id=str(uuid4()),
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            email=normalize_email(data.email),
            password_hash=password_hash,
            avatar=data.avatar,
            created_at=now,
            last_login=now,
            is_active=True,
        )
        users.append(user)
        self._save_users(users, warnings)
        logger.info("registered user", user_id=user.user_id)

        # Log in against the table just built, so a failed durable write
        # above cannot make this lookup miss.
        self._login(users, data.email, data.password, warnings)
        return user

    def _login(self, users: list[UserRecord], email: str, password: str, warnings: list[str]) -> UserRecord:
        if not email or not password:
            raise ValidationError(MSG_CREDENTIALS_REQUIRED)

        user = find_by_email(users, email)
        if user is None or not self._encoder.verify(password, user.password_hash):
            raise AuthError(MSG_INVALID_CREDENTIALS)

        updated = user.model_copy(update={"last_login": self._clock()})
        users[users.index(user)] = updated
        self._save_users(users, warnings)

        self._current = updated
        try:
            self._sessions.save(updated)
        except StorageError as e:
            warnings.append(e.message)
        logger.info("logged in", user_id=updated.user_id)
        self._notify()
        return updated

    def _save_users(self, users: list[UserRecord], warnings: list[str]) -> None:
        try:
            self._users.save(users)
        except StorageError as e:
            warnings.append(e.message)

    def _clear_durable_session(self, warnings: list[str]) -> None:
        try:
            self._sessions.clear()
        except StorageError as e:
            warnings.append(e.message)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._current)
            except Exception:
                logger.exception("session listener failed")


def _validate_registration(data: RegistrationInput) -> None:
    """Check registration input in order; the first failing rule wins."""
    if not validate_names(data.first_name, data.last_name):
        raise ValidationError(MSG_NAME_REQUIRED)
    if not validate_email(data.email):
        raise ValidationError(MSG_INVALID_EMAIL)
    password_check = validate_password(data.password)
    if not password_check.valid:
        raise ValidationError(password_check.message)
    if not data.avatar.strip():
        raise ValidationError(MSG_AVATAR_REQUIRED)
