"""
Promotional e-mail campaigns: templates, audience filters, recipient
merging and the mailto: link handed to the system mail client.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple
from urllib.parse import quote

from ...constants import MAILTO_MAX_LENGTH, RECENT_CUSTOMER_DAYS, TOP_CUSTOMER_MIN_PURCHASES
from ...utils.dates import parse_birth_date


@dataclass(frozen=True)
class EmailTemplate:
    id: str
    name: str
    subject: str
    body: str


EMAIL_TEMPLATES: List[EmailTemplate] = [
    EmailTemplate(
        "promo-general",
        "Promoción General",
        "¡Ofertas Especiales en Magia Interna!",
        "¡Hola!\n\n"
        "Queremos contarte que tenemos descuentos increíbles en nuestra nueva colección.\n\n"
        "No te pierdas la oportunidad de renovar tu estilo con nuestras prendas únicas.\n\n"
        "Visítanos en nuestra tienda o contáctanos para más información.\n\n"
        "¡Te esperamos!",
    ),
    EmailTemplate(
        "new-collection",
        "Nueva Colección",
        "Descubre nuestra Nueva Colección ✨",
        "¡Hola!\n\n"
        "Estamos emocionados de presentarte nuestra más reciente colección. "
        "Diseños exclusivos pensados para ti.\n\n"
        "Ven a conocer las novedades que tenemos en Magia Interna.\n\n"
        "¡Esperamos verte pronto!",
    ),
    EmailTemplate(
        "birthday",
        "Feliz Cumpleaños",
        "¡Feliz Cumpleaños te desea Magia Interna! 🎂",
        "¡Hola!\n\n"
        "Sabemos que es tu mes especial y queremos celebrarlo contigo.\n\n"
        "Pasa por nuestra tienda y recibe un descuento especial en tu compra "
        "como regalo de cumpleaños.\n\n"
        "¡Que tengas un día mágico!",
    ),
    EmailTemplate(
        "black-friday",
        "Black Friday",
        "¡Black Friday en Magia Interna! 🖤",
        "¡Hola!\n\n"
        "El momento que esperabas ha llegado. Aprovecha nuestros descuentos de "
        "Black Friday en toda la tienda.\n\n"
        "Ofertas por tiempo limitado. ¡No te quedes sin tus favoritos!\n\n"
        "¡Te esperamos!",
    ),
]

FILTERS = [
    ("all", "Todos los clientes"),
    ("top", "Mejores clientes (> $100.000)"),
    ("recent", "Compras recientes (30 días)"),
]

_SEPARATORS = re.compile(r"[\n,;]")


def template_by_id(template_id: str) -> Optional[EmailTemplate]:
    return next((t for t in EMAIL_TEMPLATES if t.id == template_id), None)


def filter_customers(customers: Iterable, mode: str = "all", today: Optional[date] = None) -> list:
    """
    all:    every customer given
    top:    total_purchases > 100.000, biggest buyers first
    recent: last purchase within the last 30 days
    """
    customers = list(customers)
    if mode == "top":
        top = [c for c in customers if (c.total_purchases or 0) > TOP_CUSTOMER_MIN_PURCHASES]
        return sorted(top, key=lambda c: c.total_purchases or 0, reverse=True)
    if mode == "recent":
        cutoff = (today or date.today()) - timedelta(days=RECENT_CUSTOMER_DAYS)
        out = []
        for c in customers:
            last = parse_birth_date(c.last_purchase_date)
            if last is not None and last > cutoff:
                out.append(c)
        return out
    if mode != "all":
        raise ValueError(f"unknown customer filter: {mode}")
    return customers


def split_manual_emails(text: str) -> List[str]:
    """Split on newline, comma or semicolon; keep trimmed entries containing '@'."""
    return [e.strip() for e in _SEPARATORS.split(text or "") if "@" in e]


def merge_recipients(selected_emails: Iterable[str], manual_text: str = "") -> List[str]:
    """Selected customer e-mails followed by manual ones, first occurrence wins."""
    seen = set()
    out = []
    for e in [*(x for x in selected_emails if x), *split_manual_emails(manual_text)]:
        if e not in seen:
            seen.add(e)
            out.append(e)
    return out


def full_body(body: str, promo_link: str = "") -> str:
    return body + (f"\n\nVisita: {promo_link}" if promo_link else "")


def _encode(s: str) -> str:
    return quote(s, safe="!*'()")


def build_mailto(recipients: List[str], subject: str, body: str, promo_link: str = "") -> Tuple[str, bool]:
    """
    mailto: link with everyone in Bcc. The second value is True when the
    link is longer than mail clients reliably accept.
    """
    link = (
        f"mailto:?bcc={','.join(recipients)}"
        f"&subject={_encode(subject)}"
        f"&body={_encode(full_body(body, promo_link))}"
    )
    return link, len(link) > MAILTO_MAX_LENGTH
