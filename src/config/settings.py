# src/config/settings.py

"""Central configuration for the umars_hands storefront."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the umars_hands storefront."""

    # --- Remote catalog ---
    CATALOG_API_URL: str = os.getenv("CATALOG_API_URL", "")
    CATALOG_API_KEY: str = os.getenv("CATALOG_API_KEY", "")
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "15"))
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Identity ---
    ADMIN_USER: str = os.getenv("ADMIN_USER", "")
    LOCAL_ADMIN_ID: str = "admin-local"

    # --- Cart ---
    CART_STORAGE_KEY: str = "modernist_cart"   # Fixed local storage key
    CURRENCY_SYMBOL: str = "$"

    # --- Filtering ---
    ALL_CATEGORIES: str = "All"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    STORAGE_PATH: Path = BASE_DIR / "data" / "local_storage.db"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    LOG_RETENTION: int = int(os.getenv("LOG_RETENTION", "20"))  # run logs kept
