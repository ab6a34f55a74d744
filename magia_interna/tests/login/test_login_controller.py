import pytest

from magia_interna.config import ENV_PASSWORD, ENV_USERNAME, AppConfig
from magia_interna.modules.login.controller import INVALID_CREDENTIALS, LoginController
from magia_interna.utils.session import Session


@pytest.fixture()
def config():
    return AppConfig.from_env({ENV_USERNAME: "admin", ENV_PASSWORD: "secreto"})


@pytest.fixture()
def session(tmp_path):
    return Session(tmp_path / "session.json")


class FakeForm:
    """Stands in for LoginForm: replays queued (accepted, username, password) answers."""

    answers: list = []
    messages: list = []

    def __init__(self, parent, message):
        FakeForm.messages.append(message)
        self._answer = FakeForm.answers.pop(0)

    def exec(self):
        return self._answer[0]

    def get_values(self):
        return self._answer[1], self._answer[2]


@pytest.fixture()
def fake_form():
    FakeForm.answers = []
    FakeForm.messages = []
    return FakeForm


def test_login_success_authenticates_session(config, session):
    ctrl = LoginController(config, session)
    assert ctrl.login(" admin ", "secreto")
    assert session.authenticated
    assert session.username == "admin"
    assert ctrl.last_error_code is None


def test_wrong_password_gives_generic_message(config, session):
    ctrl = LoginController(config, session)
    assert not ctrl.login("admin", "nope")
    assert ctrl.last_error_code == "invalid"
    assert ctrl.last_error_message == INVALID_CREDENTIALS
    assert not session.authenticated


def test_empty_fields(config, session):
    ctrl = LoginController(config, session)
    assert not ctrl.login("", "")
    assert ctrl.last_error_code == "empty_fields"


def test_prompt_retries_with_error_message(config, session, fake_form):
    fake_form.answers = [(True, "admin", "mal"), (True, "admin", "secreto")]
    ctrl = LoginController(config, session, form_factory=fake_form)

    assert ctrl.prompt()
    assert fake_form.messages == ["", INVALID_CREDENTIALS]
    assert session.authenticated


def test_prompt_cancelled(config, session, fake_form):
    fake_form.answers = [(False, "", "")]
    ctrl = LoginController(config, session, form_factory=fake_form)
    assert not ctrl.prompt()
    assert ctrl.last_error_code == "cancelled"


def test_prompt_has_no_attempt_limit(config, session, fake_form):
    fake_form.answers = [(True, "admin", "x")] * 10 + [(True, "admin", "secreto")]
    ctrl = LoginController(config, session, form_factory=fake_form)
    assert ctrl.prompt()
    assert len(fake_form.messages) == 11
    assert session.authenticated


def test_login_stores_configured_username_spelling(config, session):
    ctrl = LoginController(config, session)
    assert ctrl.login("ADMIN", "secreto")
    assert session.username == config.login_username == "admin"


def test_logout_clears_session(config, session):
    ctrl = LoginController(config, session)
    ctrl.login("admin", "secreto")
    ctrl.logout()
    assert not session.authenticated
    assert session.username is None
