from magia_interna.utils.templating import get_env, render


def test_filters():
    env = get_env()
    assert env.from_string("{{ 1500 | cop }}").render() == "$1.500"
    assert env.from_string("{{ d | ddmmyyyy }}").render(d="2025-03-10") == "10/03/2025"
    assert env.from_string("{{ d | ddmmyyyy }}").render(d="") == ""


def test_promo_email_escapes_and_links():
    html = render(
        "promo_email.html",
        {
            "subject": "<b>Ofertas</b>",
            "recipients": ["a@x.com", "b@x.com"],
            "body": "Hola\n\nTenemos descuentos",
            "promo_link": "https://wa.link/i5fg5k",
            "company_name": "Magia Interna",
        },
    )
    assert "&lt;b&gt;Ofertas&lt;/b&gt;" in html
    assert "2 destinatario(s)" in html
    assert 'href="https://wa.link/i5fg5k"' in html
    assert "<p>Tenemos descuentos</p>" in html
