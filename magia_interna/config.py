from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .constants import DATA_DIR, DB_FILE_NAME, SESSION_FILE_NAME

BASE_DIR = Path(__file__).resolve().parent
DATA_PATH = Path(os.environ.get("MAGIA_DATA_DIR") or (BASE_DIR / DATA_DIR))
DB_PATH = DATA_PATH / DB_FILE_NAME
SESSION_PATH = DATA_PATH / SESSION_FILE_NAME

ENV_USERNAME = "MAGIA_LOGIN_USERNAME"
ENV_PASSWORD = "MAGIA_LOGIN_PASSWORD"
ENV_PASSWORD_HASH = "MAGIA_LOGIN_PASSWORD_HASH"
ENV_LOG_LEVEL = "MAGIA_LOG_LEVEL"


class ConfigError(Exception):
    """Raised when required configuration is missing; the app must not start."""


@dataclass(frozen=True)
class AppConfig:
    """
    Runtime configuration read from the environment.

    Login credentials have no defaults. Either a bcrypt hash
    (MAGIA_LOGIN_PASSWORD_HASH) or a plain password (MAGIA_LOGIN_PASSWORD)
    must be supplied together with MAGIA_LOGIN_USERNAME.
    """
    login_username: str
    login_password_hash: Optional[str]
    login_password: Optional[str]
    db_path: Path
    session_path: Path
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "AppConfig":
        env = os.environ if env is None else env
        username = (env.get(ENV_USERNAME) or "").strip()
        pw_hash = (env.get(ENV_PASSWORD_HASH) or "").strip() or None
        password = env.get(ENV_PASSWORD) or None

        missing = []
        if not username:
            missing.append(ENV_USERNAME)
        if not pw_hash and not password:
            missing.append(f"{ENV_PASSWORD_HASH} or {ENV_PASSWORD}")
        if missing:
            raise ConfigError("Missing required login settings: " + ", ".join(missing))

        return cls(
            login_username=username,
            login_password_hash=pw_hash,
            login_password=None if pw_hash else password,
            db_path=DB_PATH,
            session_path=SESSION_PATH,
            log_level=(env.get(ENV_LOG_LEVEL) or "INFO").upper(),
        )


def ensure_data_dir() -> Path:
    DATA_PATH.mkdir(parents=True, exist_ok=True)
    return DATA_PATH
