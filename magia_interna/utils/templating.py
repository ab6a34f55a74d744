# magia_interna/utils/templating.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .dates import format_date_display
from .helpers import fmt_cop

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_env: Environment | None = None


def get_env() -> Environment:
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=True,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        _env.filters["cop"] = fmt_cop
        _env.filters["ddmmyyyy"] = format_date_display
    return _env


def render(template_name: str, context: Mapping[str, Any]) -> str:
    return get_env().get_template(template_name).render(**context)
