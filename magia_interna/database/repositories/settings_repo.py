from __future__ import annotations

import sqlite3
from typing import Dict

from ..seeders.default_data import DEFAULT_SETTINGS
from .errors import DomainError

_BOOL_KEYS = {"low_stock_alerts"}
_INT_KEYS = {"default_low_stock_threshold"}


class SettingsRepo:
    """Key/value application settings backed by `app_settings`."""

    def __init__(self, conn: sqlite3.Connection):
        conn.row_factory = sqlite3.Row
        self.conn = conn

    def get_all(self) -> Dict[str, object]:
        values: Dict[str, object] = dict(DEFAULT_SETTINGS)
        for r in self.conn.execute("SELECT key, value FROM app_settings").fetchall():
            values[r["key"]] = r["value"]
        return {k: self._decode(k, v) for k, v in values.items()}

    def get(self, key: str, default=None):
        r = self.conn.execute("SELECT value FROM app_settings WHERE key=?", (key,)).fetchone()
        if r is None:
            raw = DEFAULT_SETTINGS.get(key)
            return default if raw is None else self._decode(key, raw)
        return self._decode(key, r["value"])

    def save(self, values: Dict[str, object]) -> None:
        unknown = set(values) - set(DEFAULT_SETTINGS)
        if unknown:
            raise DomainError("Ajustes desconocidos: " + ", ".join(sorted(unknown)))
        if "default_low_stock_threshold" in values:
            if int(values["default_low_stock_threshold"]) < 0:
                raise DomainError("El umbral de stock bajo no puede ser negativo.")
        with self.conn:
            self.conn.executemany(
                "INSERT INTO app_settings(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                [(k, self._encode(k, v)) for k, v in values.items()],
            )

    def reset(self) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM app_settings")
            self.conn.executemany(
                "INSERT INTO app_settings(key, value) VALUES (?, ?)",
                list(DEFAULT_SETTINGS.items()),
            )

    @staticmethod
    def _encode(key: str, value) -> str:
        if key in _BOOL_KEYS:
            return "1" if value else "0"
        return "" if value is None else str(value)

    @staticmethod
    def _decode(key: str, raw):
        if key in _BOOL_KEYS:
            return str(raw) == "1"
        if key in _INT_KEYS:
            try:
                return int(raw)
            except (TypeError, ValueError):
                return int(DEFAULT_SETTINGS[key])
        return raw
