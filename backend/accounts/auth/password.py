"""Credential encoding: protocol, base64 placeholder (default), and bcrypt.

Base64Encoder reproduces the demo scheme the persisted data was written with:
base64 of ``password + "salt"`` with one Latin-1 byte per character. Passwords
with characters above U+00FF cannot be encoded in that scheme and are rejected.
It is deterministic and fully reversible, so anyone who can read the store
can recover every password. It is NOT a hash.
Deployments that do not need to read existing demo data should select
BcryptEncoder, which keeps the same encode/verify contract.
"""

from __future__ import annotations

import base64
import hmac
from typing import Protocol, runtime_checkable

import bcrypt

FIXED_SALT = "salt"
BCRYPT_MAX_BYTES = 72  # bcrypt rejects longer input


@runtime_checkable
class PasswordEncoder(Protocol):
    """Encode and verify passwords."""

    def encode(self, plain: str) -> str: ...

    def verify(self, plain: str, stored: str) -> bool: ...


class Base64Encoder:
    """Reversible placeholder encoding. Not suitable for real credentials."""

    def encode(self, plain: str) -> str:
        try:
            raw = (plain + FIXED_SALT).encode("latin-1")
        except UnicodeEncodeError as e:
            raise ValueError("Password contains characters that cannot be encoded") from e
        return base64.b64encode(raw).decode("ascii")

    def verify(self, plain: str, stored: str) -> bool:
        try:
            encoded = self.encode(plain)
        except ValueError:
            return False
        return hmac.compare_digest(encoded.encode("utf-8"), stored.encode("utf-8"))


class BcryptEncoder:
    """Salted one-way hashing with bcrypt."""

    def encode(self, plain: str) -> str:
        encoded = plain.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password must not exceed {BCRYPT_MAX_BYTES} bytes when encoded")
        return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")

    def verify(self, plain: str, stored: str) -> bool:
        """Return False for malformed hashes or over-long input rather than raising."""
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            return False


def get_encoder(name: str = "base64") -> PasswordEncoder:
    """Return a PasswordEncoder by name ("base64" or "bcrypt")."""
    if name == "base64":
        return Base64Encoder()
    if name == "bcrypt":
        return BcryptEncoder()
    raise ValueError(f"Unknown password encoder: {name!r}")
