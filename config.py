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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invoices.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Create missing tables on startup (SQLite / development deployments)
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", 1))

    # Invoice numbering (INV-YYYY-NNNN)
    INVOICE_NUMBER_PREFIX = data.get("INVOICE_NUMBER_PREFIX", "INV")
    INVOICE_NUMBER_PADDING = data.get("INVOICE_NUMBER_PADDING", 4)

    # Duplication defaults
    INVOICE_DEFAULT_DUE_DAYS = data.get("INVOICE_DEFAULT_DUE_DAYS", 30)

    # Soft delete stamp author when the caller does not provide one
    DEFAULT_DELETED_BY = data.get("DEFAULT_DELETED_BY", "system")

    # Export rendering
    EXPORT_COMPANY_NAME = data.get("EXPORT_COMPANY_NAME", "Bookkeeping Platform")
