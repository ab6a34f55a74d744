from ...constants import APP_NAME, DEFAULT_PROMO_LINK, LOW_STOCK_THRESHOLD

DEFAULT_SETTINGS = {
    "company_name": APP_NAME,
    "company_email": "info@magiainterna.com",
    "company_phone": "",
    "company_address": "",
    "currency": "COP",
    "language": "es",
    "timezone": "America/Bogota",
    "low_stock_alerts": "1",
    "default_low_stock_threshold": str(LOW_STOCK_THRESHOLD),
    "promo_link": DEFAULT_PROMO_LINK,
}


def seed(conn):
    # settings rows the user never saved get their defaults; saved values are kept
    conn.executemany(
        "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
        list(DEFAULT_SETTINGS.items()),
    )
    conn.commit()
