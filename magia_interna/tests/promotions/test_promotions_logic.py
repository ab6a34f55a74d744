from datetime import date
from urllib.parse import unquote

import pytest

from magia_interna.constants import DEFAULT_PROMO_LINK
from magia_interna.database.repositories.customers_repo import Customer
from magia_interna.modules.promotions.logic import (
    EMAIL_TEMPLATES,
    build_mailto,
    filter_customers,
    full_body,
    merge_recipients,
    split_manual_emails,
    template_by_id,
)

TODAY = date(2025, 3, 31)


def _customer(cid, name, total, last=None, email=None):
    return Customer(customer_id=cid, name=name, email=email or f"{name.lower()}@example.com",
                    total_purchases=total, last_purchase_date=last)


CUSTOMERS = [
    _customer(1, "Ana", 350000, "2025-03-10"),
    _customer(2, "Bea", 100000, "2025-02-01"),
    _customer(3, "Caro", 820000, None),
    _customer(4, "Dani", 150000, "2025-03-30"),
]


def test_templates():
    assert [t.id for t in EMAIL_TEMPLATES] == ["promo-general", "new-collection", "birthday", "black-friday"]
    assert template_by_id("birthday").name == "Feliz Cumpleaños"
    assert template_by_id("nope") is None


def test_filter_all_keeps_everyone():
    assert filter_customers(CUSTOMERS, "all", TODAY) == CUSTOMERS


def test_filter_top_is_strictly_above_threshold_biggest_first():
    assert [c.name for c in filter_customers(CUSTOMERS, "top", TODAY)] == ["Caro", "Ana", "Dani"]


def test_filter_recent_last_thirty_days():
    assert [c.name for c in filter_customers(CUSTOMERS, "recent", TODAY)] == ["Ana", "Dani"]


def test_filter_unknown_mode():
    with pytest.raises(ValueError):
        filter_customers(CUSTOMERS, "vip", TODAY)


def test_split_manual_emails():
    text = "a@x.com, b@y.com;\nnot-an-email\n  c@z.com  ;"
    assert split_manual_emails(text) == ["a@x.com", "b@y.com", "c@z.com"]
    assert split_manual_emails("") == []


def test_merge_recipients_dedupes_keeping_order():
    merged = merge_recipients(["ana@example.com", "", "bea@example.com"], "bea@example.com\nnuevo@x.com")
    assert merged == ["ana@example.com", "bea@example.com", "nuevo@x.com"]


def test_full_body_appends_link():
    assert full_body("Hola", DEFAULT_PROMO_LINK) == f"Hola\n\nVisita: {DEFAULT_PROMO_LINK}"
    assert full_body("Hola", "") == "Hola"


def test_mailto_link():
    link, too_long = build_mailto(["a@x.com", "b@y.com"], "¡Ofertas!", "Hola amiga", DEFAULT_PROMO_LINK)
    assert link.startswith("mailto:?bcc=a@x.com,b@y.com&subject=")
    assert "&body=" in link
    assert " " not in link
    assert unquote(link.split("&body=", 1)[1]) == f"Hola amiga\n\nVisita: {DEFAULT_PROMO_LINK}"
    assert unquote(link.split("&subject=", 1)[1].split("&body=")[0]) == "¡Ofertas!"
    assert not too_long


def test_mailto_warns_when_too_long():
    recipients = [f"cliente{i}@example.com" for i in range(150)]
    link, too_long = build_mailto(recipients, "Asunto", "Cuerpo")
    assert len(link) > 2000
    assert too_long
