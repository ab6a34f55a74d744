# utils/helpers.py
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import logging
import re
from typing import Union, Optional

NumberLike = Union[float, int, str, Decimal]

_log = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
_CURRENCY_NOISE = re.compile(r"[$\s ]")


def today_str() -> str:
    """Return today's date as ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def format_date_for_input(value: Union[date, datetime, str, None]) -> str:
    """
    Normalize a date/datetime/ISO string to 'YYYY-MM-DD'.

    Strings are cut at the first 'T' or space so stored timestamps like
    '2025-03-01 14:22:05' keep their calendar day. Empty input returns ''.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    head = re.split(r"[T ]", text, maxsplit=1)[0]
    return date.fromisoformat(head).isoformat()


def fmt_cop(v: NumberLike, *, sentinel: Optional[str] = None) -> str:
    """
    Format a number as Colombian pesos: '$129.000'.

    No decimals (half-up rounding), dot as thousands separator and a
    leading minus for negatives ('-$1.000'). Unparseable input returns
    `sentinel` when given, else str(v).
    """
    try:
        d = Decimal(str(v))
        n = int(d.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError, TypeError) as e:
        _log.debug("fmt_cop: failed to parse %r: %s", v, e)
        return str(sentinel) if sentinel is not None else str(v)
    body = f"{abs(n):,}".replace(",", ".")
    return f"-${body}" if n < 0 else f"${body}"


def parse_cop(text: Optional[NumberLike]) -> float:
    """
    Parse a peso string ('$129.000', '129.000', '1.234,5') to a float.

    Dots are thousands separators; a comma is the decimal mark.
    Empty or invalid input yields 0.
    """
    if text is None:
        return 0.0
    if isinstance(text, (int, float, Decimal)):
        return float(text)
    clean = _CURRENCY_NOISE.sub("", str(text)).replace(".", "").replace(",", ".")
    try:
        return float(clean)
    except ValueError:
        return 0.0


def format_input_for_display(text: Optional[str]) -> str:
    """Keep only digits of a typed amount and render it as pesos; '' if none."""
    digits = _NON_DIGITS.sub("", text or "")
    if not digits:
        return ""
    return fmt_cop(int(digits))


def to_float(x, default: float = 0.0) -> float:
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def month_bounds(day: Optional[date] = None) -> tuple[str, str]:
    """('YYYY-MM-01', 'YYYY-MM-<last>') for the month containing `day` (default today)."""
    day = day or date.today()
    first = day.replace(day=1)
    nxt = first.replace(year=first.year + 1, month=1) if first.month == 12 else first.replace(month=first.month + 1)
    last = date.fromordinal(nxt.toordinal() - 1)
    return first.isoformat(), last.isoformat()
