from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import os
import re
from dataclasses import dataclass

from src.clinic_store import ClinicStore, StoreError

LOGGER = logging.getLogger(__name__)

_ALGO = "pbkdf2_sha256"
_DEFAULT_ITERATIONS = 210_000
MIN_PASSWORD_LENGTH = 6
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthError(Exception):
    """Raised when sign-in or sign-up is rejected."""


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    email: str


def _b64e(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64d(raw: str) -> bytes:
    pad = "=" * ((4 - (len(raw) % 4)) % 4)
    return base64.urlsafe_b64decode((raw + pad).encode("ascii"))


def hash_password(password: str, *, iterations: int = _DEFAULT_ITERATIONS) -> str:
    password = str(password or "")
    if not password:
        raise ValueError("password must not be empty")

    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, int(iterations))
    return f"{_ALGO}${int(iterations)}${_b64e(salt)}${_b64e(digest)}"


def verify_password(password: str, stored_value: str) -> bool:
    password = str(password or "")
    stored_value = str(stored_value or "")
    if not stored_value.startswith(f"{_ALGO}$"):
        return False

    try:
        _algo, iter_raw, salt_raw, digest_raw = stored_value.split("$", 3)
        iterations = int(iter_raw)
        salt = _b64d(salt_raw)
        expected = _b64d(digest_raw)
    except ValueError:
        return False

    actual = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(actual, expected)


def _validate_credentials(email: str, password: str) -> str:
    normalized = str(email or "").strip().lower()
    if not EMAIL_PATTERN.match(normalized):
        raise AuthError("Enter a valid email address.")
    if len(str(password or "")) < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    return normalized


class AuthService:
    def __init__(self, store: ClinicStore, *, allow_signup: bool = True, iterations: int = _DEFAULT_ITERATIONS) -> None:
        self.store = store
        self.allow_signup = allow_signup
        self.iterations = iterations

    def sign_up(self, email: str, password: str) -> AuthSession:
        if not self.allow_signup:
            raise AuthError("New accounts are disabled.")
        normalized = _validate_credentials(email, password)
        try:
            user_id = self.store.create_user(normalized, hash_password(password, iterations=self.iterations))
        except StoreError as exc:
            raise AuthError(str(exc)) from exc
        LOGGER.info("Created account %s", normalized)
        return AuthSession(user_id=user_id, email=normalized)

    def sign_in(self, email: str, password: str) -> AuthSession:
        normalized = _validate_credentials(email, password)
        try:
            user = self.store.get_user_by_email(normalized)
        except StoreError as exc:
            raise AuthError(str(exc)) from exc
        if user is None or not verify_password(password, str(user.get("password_hash", ""))):
            LOGGER.warning("Rejected sign-in for %s", normalized)
            raise AuthError("Invalid email or password.")
        return AuthSession(user_id=str(user["id"]), email=normalized)
