# core/config.py
import os

from dotenv import load_dotenv

# wczytanie .env (dev-friendly), zanim Config przeczyta os.environ
load_dotenv()
# Dodatkowe lokalne zmienne (niecommitowalne) – .env.local uzupełnia tylko brakujące wartości
load_dotenv(dotenv_path=".env.local", override=False)


class Config:
    # Flask
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # OCPI – moduł Tariffs po stronie eMSP
    OCPI_VERSION = os.environ.get("OCPI_VERSION", "2.2.1")
    TARIFFS_BASE_PATH = os.environ.get(
        "TARIFFS_BASE_PATH", f"/emsp/api/{OCPI_VERSION}/tariffs"
    )
    # Token C wystawiony dla CPO; pusty = brak sprawdzania (dev)
    OCPI_AUTH_TOKEN = os.environ.get("OCPI_AUTH_TOKEN", "")

    # Storage: "memory" albo "file"
    TARIFF_STORE_BACKEND = os.environ.get("TARIFF_STORE_BACKEND", "memory")
    TARIFF_STORE_PATH = os.environ.get("TARIFF_STORE_PATH", "data/tariffs/tariffs.json")
    # DELETE na nieistniejącym taryfie: 0 -> 404, 1 -> 200 (no-op)
    TARIFF_IDEMPOTENT_DELETE = bool(int(os.environ.get("TARIFF_IDEMPOTENT_DELETE", "0")))

    # CPO – opcjonalny pull (bootstrap przez tools/import_tariffs.py)
    CPO_TARIFFS_URL = os.environ.get("CPO_TARIFFS_URL", "")
    CPO_TOKEN = os.environ.get("CPO_TOKEN", "")
    CPO_PAGE_LIMIT = int(os.environ.get("CPO_PAGE_LIMIT", "100"))
