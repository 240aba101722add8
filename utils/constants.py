APP_NAME = "Card Budget"
APP_WIDTH = 1200
APP_HEIGHT = 750
DB_FILE = "cardbudget.db"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

# Budget status thresholds, in percent of the monthly amount
BUDGET_WARNING_PCT = 75.0
BUDGET_EXCEEDED_PCT = 100.0

BUDGET_STATUS_LABELS = {
    "on_track": "On track",
    "warning":  "Warning",
    "exceeded": "Exceeded",
}

BUDGET_STATUS_COLORS = {
    "on_track": "#4CAF50",
    "warning":  "#FF9800",
    "exceeded": "#F44336",
}

REFERENCE_CURRENCY = "VND"
SUPPORTED_CURRENCIES = ("VND", "USD", "EUR", "JPY", "SGD")

CURRENCY_SYMBOLS = {
    "VND": "₫",
    "USD": "$",
    "EUR": "€",
    "JPY": "¥",
    "SGD": "S$",
}
ZERO_DECIMAL_CURRENCIES = ("VND", "JPY")

# Used only when the exchange rate API is unreachable
FALLBACK_VND_RATES = {
    "USD": 25_000.0,
    "EUR": 27_000.0,
    "JPY": 165.0,
    "SGD": 18_500.0,
}

EXCHANGE_RATE_URL = "https://api.exchangerate-api.com/v4/latest"
EXCHANGE_RATE_TTL_SECONDS = 60 * 60
EXCHANGE_RATE_TIMEOUT_SECONDS = 10.0

PAST_CYCLE_COUNT = 24

TRANSACTION_PERIODS = ["today", "current-week", "current-month", "last-month", "last-3-months"]
TIME_FILTERS = ["all", "week", "month", "year"]
CATEGORY_TOTAL_WINDOWS = {"7D": 7, "30D": 30, "90D": 90, "ALL": 0}

ASSET_TYPES = ("cash", "savings", "etf", "stock", "custom")
LIABILITY_TYPES = ("credit_card", "loan", "custom")

DEFAULT_CATEGORIES = [
    {"name": "Food & Dining",  "color_hex": "#D282A6"},
    {"name": "Groceries",      "color_hex": "#E8B4BC"},
    {"name": "Transport",      "color_hex": "#6E4555"},
    {"name": "Shopping",       "color_hex": "#FFB5A7"},
    {"name": "Bills",          "color_hex": "#FCD5CE"},
    {"name": "Entertainment",  "color_hex": "#F9DCC4"},
    {"name": "Travel",         "color_hex": "#FEC89A"},
    {"name": "Other",          "color_hex": "#888888"},
]

CATEGORY_COLORS = [
    "#D282A6", "#E8B4BC", "#6E4555", "#F5E3E0", "#FFB5A7",
    "#FCD5CE", "#F8EDEB", "#F9DCC4", "#FEC89A",
]
