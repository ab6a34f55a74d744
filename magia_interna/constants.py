APP_NAME = "Magia Interna"
STYLE_FILE = "resources/style.qss"
CHRISTMAS_STYLE_FILE = "resources/christmas.qss"

DATA_DIR = "data"
DB_FILE_NAME = "magia_interna.db"
SESSION_FILE_NAME = "session.json"

SCHEMA_VERSION = 1
TABLE_SCHEMA_VERSION = "schema_version"

# Shared by the product and customer forms.
NAME_MAX_LENGTH = 60

DEFAULT_MIN_STOCK = 5
LOW_STOCK_THRESHOLD = 5
CRITICAL_STOCK_THRESHOLD = 3

ANONYMOUS_CUSTOMER_NAME = "Cliente Anónimo"

# (value stored in DB, label shown in the UI)
PAYMENT_METHODS = [
    ("efectivo", "Efectivo"),
    ("tarjeta", "Tarjeta"),
    ("transferencia", "Transferencia"),
]

EXPENSE_PAYMENT_METHODS = PAYMENT_METHODS + [("domiciliacion", "Domiciliación")]

EXPENSE_CATEGORIES = [
    "Alquiler",
    "Inventario",
    "Servicios",
    "Marketing",
    "Transporte",
    "Equipamiento",
    "Suministros",
    "Otros",
]

CUSTOMER_TYPES = [
    ("regular", "Regular"),
    ("premium", "Premium"),
    ("vip", "VIP"),
]

DOCUMENT_TYPES = [
    ("CC", "Cédula de Ciudadanía"),
    ("CE", "Cédula de Extranjería"),
    ("NIT", "NIT"),
    ("PAS", "Pasaporte"),
    ("OTRO", "Otro"),
]

SALE_STATUSES = ("completed", "cancelled")

DEFAULT_PROMO_LINK = "https://wa.link/i5fg5k"
MAILTO_MAX_LENGTH = 2000
TOP_CUSTOMER_MIN_PURCHASES = 100000
RECENT_CUSTOMER_DAYS = 30
UPCOMING_BIRTHDAY_DAYS = 30

MONTH_NAMES_ES = [
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]
MONTH_ABBR_ES = [
    "ene", "feb", "mar", "abr", "may", "jun",
    "jul", "ago", "sep", "oct", "nov", "dic",
]
