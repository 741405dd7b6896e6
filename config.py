import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./billing.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Currencies
    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "INR")
    SUPPORTED_CURRENCIES = data.get(
        "SUPPORTED_CURRENCIES", ["INR", "USD", "EUR", "GBP", "AED", "JPY"]
    )
    ZERO_DECIMAL_CURRENCIES = data.get("ZERO_DECIMAL_CURRENCIES", ["JPY"])

    # Exchange rates: static table keyed "FROM:TO", used when no API URL is set
    EXCHANGE_RATES = data.get("EXCHANGE_RATES", {})
    EXCHANGE_RATE_API_URL = data.get("EXCHANGE_RATE_API_URL", None)
    EXCHANGE_RATE_TIMEOUT = data.get("EXCHANGE_RATE_TIMEOUT", 10.0)  # seconds

    # Invoice numbering (DDMMYYYY-OFFICE)
    OFFICE_CODES = data.get(
        "OFFICE_CODES",
        {"delhi": "D", "mumbai": "M", "bangalore": "B", "delhi (lt)": "LT"},
    )
    DEFAULT_OFFICE_CODE = data.get("DEFAULT_OFFICE_CODE", "M")

    # Partner shares must total 100% within this tolerance
    PARTNER_SHARE_TOLERANCE = data.get("PARTNER_SHARE_TOLERANCE", "0.01")

    # Background payment reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
