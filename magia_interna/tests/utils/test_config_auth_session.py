import json

import pytest

from magia_interna.config import (
    ENV_PASSWORD,
    ENV_PASSWORD_HASH,
    ENV_USERNAME,
    AppConfig,
    ConfigError,
)
from magia_interna.utils.auth import check_credentials, hash_password, verify_password
from magia_interna.utils.session import Session


# ---------------- config ----------------

def test_missing_credentials_fail_closed():
    with pytest.raises(ConfigError):
        AppConfig.from_env({})
    with pytest.raises(ConfigError):
        AppConfig.from_env({ENV_USERNAME: "admin"})
    with pytest.raises(ConfigError):
        AppConfig.from_env({ENV_PASSWORD: "secreto"})


def test_plain_password_config():
    cfg = AppConfig.from_env({ENV_USERNAME: " admin ", ENV_PASSWORD: "secreto"})
    assert cfg.login_username == "admin"
    assert cfg.login_password == "secreto"
    assert cfg.login_password_hash is None


def test_hash_takes_precedence_over_plain_password():
    cfg = AppConfig.from_env({ENV_USERNAME: "admin", ENV_PASSWORD: "x", ENV_PASSWORD_HASH: "$2b$04$abc"})
    assert cfg.login_password is None
    assert cfg.login_password_hash == "$2b$04$abc"


# ---------------- auth ----------------

def test_hash_and_verify():
    h = hash_password("secreto", rounds=4)
    assert h.startswith("$2b$")
    assert verify_password("secreto", h)
    assert not verify_password("otro", h)
    assert not verify_password("secreto", "not-a-hash")
    with pytest.raises(ValueError):
        hash_password("")


def test_check_credentials_with_hash():
    cfg = AppConfig.from_env({ENV_USERNAME: "Admin", ENV_PASSWORD_HASH: hash_password("secreto", rounds=4)})
    assert check_credentials(cfg, "admin", "secreto")
    assert not check_credentials(cfg, "admin", "Secreto")
    assert not check_credentials(cfg, "otro", "secreto")
    assert not check_credentials(cfg, "", "")


def test_check_credentials_with_plain_password():
    cfg = AppConfig.from_env({ENV_USERNAME: "admin", ENV_PASSWORD: "secreto"})
    assert check_credentials(cfg, "ADMIN", "secreto")
    assert not check_credentials(cfg, "admin", "secret")


# ---------------- session ----------------

def test_session_round_trip(tmp_path):
    path = tmp_path / "session.json"
    s = Session(path)
    s.login("admin")
    s.set_christmas_mode(True)

    again = Session(path).load()
    assert again.authenticated
    assert again.username == "admin"
    assert again.christmas_mode


def test_clear_keeps_christmas_mode(tmp_path):
    path = tmp_path / "session.json"
    s = Session(path)
    s.login("admin")
    s.set_christmas_mode(True)
    s.clear()

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"authenticated": False, "username": None, "christmas_mode": True}


def test_subscribers_are_notified(tmp_path):
    seen = []
    s = Session(tmp_path / "s.json")
    s.subscribe(lambda sess: seen.append((sess.authenticated, sess.christmas_mode)))
    s.login("admin")
    s.set_christmas_mode(True)
    s.clear()
    assert seen == [(True, False), (True, True), (False, True)]


def test_unreadable_or_incomplete_session_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{broken", encoding="utf-8")
    assert not Session(path).load().authenticated

    path.write_text(json.dumps({"authenticated": True, "username": ""}), encoding="utf-8")
    assert not Session(path).load().authenticated


def test_session_without_path_is_memory_only():
    s = Session()
    s.login("admin")
    assert s.load().username == "admin"
