# magia_interna/utils/session.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

_log = logging.getLogger(__name__)


@dataclass
class Session:
    """
    Per-process UI session: who is logged in and the Christmas-mode toggle.

    Created once in main.py and handed to the modules that need it.
    `load()` runs at startup, `save()` after every change and `clear()`
    on logout. Only `christmas_mode` survives a logout.
    """
    path: Optional[Path] = None
    authenticated: bool = False
    username: Optional[str] = None
    christmas_mode: bool = False
    _listeners: List[Callable[["Session"], None]] = field(default_factory=list, repr=False, compare=False)

    # ---------------- persistence ----------------

    def load(self) -> "Session":
        if self.path is None or not self.path.exists():
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            _log.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return self
        self.authenticated = bool(data.get("authenticated", False))
        self.username = data.get("username") or None
        self.christmas_mode = bool(data.get("christmas_mode", False))
        if not self.username:
            self.authenticated = False
        return self

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.as_dict(), indent=2), encoding="utf-8")

    # ---------------- lifecycle ----------------

    def login(self, username: str) -> None:
        self.authenticated = True
        self.username = username
        self.save()
        self._notify()

    def clear(self) -> None:
        self.authenticated = False
        self.username = None
        self.save()
        self._notify()

    def set_christmas_mode(self, enabled: bool) -> None:
        self.christmas_mode = bool(enabled)
        self.save()
        self._notify()

    # ---------------- observers ----------------

    def subscribe(self, fn: Callable[["Session"], None]) -> None:
        self._listeners.append(fn)

    def _notify(self) -> None:
        for fn in list(self._listeners):
            fn(self)

    def as_dict(self) -> dict:
        return {
            "authenticated": self.authenticated,
            "username": self.username,
            "christmas_mode": self.christmas_mode,
        }
