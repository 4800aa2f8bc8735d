"""Account store configuration via environment variables."""

from enum import StrEnum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from accounts.auth.repository import DEFAULT_USERS_KEY
from accounts.auth.session_store import DEFAULT_SESSION_KEY


class StoreBackend(StrEnum):
    MEMORY = "memory"
    FILE = "file"
    SQLITE = "sqlite"


class EncoderName(StrEnum):
    BASE64 = "base64"
    BCRYPT = "bcrypt"


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(StrEnum):
    CONSOLE = "console"
    JSON = "json"


class AccountSettings(BaseSettings):
    model_config = {"env_prefix": "ACCOUNTS_"}

    store_backend: StoreBackend = StoreBackend.FILE

    # JSON file for the "file" backend, database file for "sqlite"
    store_path: str = "backend/data/accounts.json"

    # "base64" reads and writes the demo data format; "bcrypt" is the real hash
    password_encoder: EncoderName = EncoderName.BASE64

    users_key: str = Field(default=DEFAULT_USERS_KEY, min_length=1)
    session_key: str = Field(default=DEFAULT_SESSION_KEY, min_length=1)

    log_dir: str | None = None
    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.CONSOLE

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_log_format(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value
