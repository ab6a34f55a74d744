# utils/validators.py
import re

from ..constants import NAME_MAX_LENGTH

_EMAIL_RX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def non_empty(text: str) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


def name_too_long(text: str, limit: int = NAME_MAX_LENGTH) -> bool:
    return len((text or "").strip()) > limit


def looks_like_email(text: str) -> bool:
    return bool(text and _EMAIL_RX.match(text.strip()))


# ---- Numeric parsing & validators ----

def try_parse_float(x):
    """
    Best-effort parse to float.

    Returns:
        (ok: bool, value: float|None)
    """
    try:
        return True, float(x)
    except (TypeError, ValueError):
        return False, None


def parse_float(x) -> float:
    """
    Strict parse to float; raises ValueError with a clear message on failure.
    """
    ok, val = try_parse_float(x)
    if not ok:
        raise ValueError(f"Could not parse '{x}' as a number.")
    return val  # type: ignore[return-value]


def is_non_negative_number(x) -> bool:
    ok, val = try_parse_float(x)
    return bool(ok and val is not None and val >= 0)


def is_strictly_positive_number(x) -> bool:
    ok, val = try_parse_float(x)
    return bool(ok and val is not None and val > 0)
