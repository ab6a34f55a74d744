# magia_interna/utils/auth.py
from __future__ import annotations

import hmac
import logging
from typing import Union

import bcrypt

from ..config import AppConfig

_log = logging.getLogger(__name__)

_BCRYPT_DEFAULT_ROUNDS = 12
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str, rounds: int = _BCRYPT_DEFAULT_ROUNDS) -> str:
    """
    bcrypt-hash `password`. Use the output as MAGIA_LOGIN_PASSWORD_HASH.
    """
    if not isinstance(password, str) or password == "":
        raise ValueError("Password must be a non-empty string")
    rounds = max(int(rounds), 4)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, stored_hash: Union[str, bytes, None]) -> bool:
    """Check `password` against a bcrypt hash; unknown or malformed hashes never match."""
    if stored_hash is None or password is None:
        return False
    if isinstance(stored_hash, bytes):
        stored_hash = stored_hash.decode("utf-8", errors="replace")
    stored_hash = stored_hash.strip()
    if not stored_hash.startswith(_BCRYPT_PREFIXES):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        _log.warning("Configured password hash is not a valid bcrypt hash")
        return False


def check_credentials(config: AppConfig, username: str, password: str) -> bool:
    """
    True iff (username, password) match the configured login.

    The username comparison is case-insensitive; the password is checked
    against the bcrypt hash when one is configured, else compared in
    constant time with the configured plain password.
    """
    if not username or not password:
        return False
    if username.strip().lower() != config.login_username.lower():
        return False
    if config.login_password_hash:
        return verify_password(password, config.login_password_hash)
    if config.login_password is None:
        return False
    return hmac.compare_digest(password.encode("utf-8"), config.login_password.encode("utf-8"))
