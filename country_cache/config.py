"""
Configuration Management for Country Cache

Centralized configuration for the database, upstream sources, paths and settings.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent
    LOGS_DIR = Path(os.getenv("LOGS_DIR", str(PROJECT_ROOT / "logs")))
    CACHE_DIR = Path("cache")

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./countries.db")
    DB_ECHO = _env_bool("DB_ECHO")

    # Upstream sources
    COUNTRIES_API_URL = os.getenv(
        "COUNTRIES_API_URL",
        "https://restcountries.com/v2/all?fields=name,capital,region,population,flag,currencies",
    )
    EXCHANGE_RATES_API_URL = os.getenv(
        "EXCHANGE_RATES_API_URL", "https://open.er-api.com/v6/latest/USD"
    )
    FETCH_TIMEOUT_SECONDS = float(os.getenv("FETCH_TIMEOUT_SECONDS", "30"))
    USER_AGENT = "CountryCache/1.0"

    # Summary artifact
    SUMMARY_IMAGE_PATH = Path(os.getenv("SUMMARY_IMAGE_PATH", str(CACHE_DIR / "summary.png")))
    TOP_GDP_LIMIT = 5

    # API server
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8000"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def ensure_directories(cls):
        """Create necessary directories if they don't exist."""
        for directory in [cls.LOGS_DIR, cls.SUMMARY_IMAGE_PATH.parent]:
            directory.mkdir(parents=True, exist_ok=True)


# Upstream source names, reported verbatim when a fetch fails
COUNTRIES_SOURCE = "Countries API"
EXCHANGE_RATES_SOURCE = "Exchange Rates API"


if __name__ == "__main__":
    Config.ensure_directories()
    print("Configuration Summary")
    print("=" * 60)
    print(f"Project Root: {Config.PROJECT_ROOT}")
    print(f"Database URL: {Config.DATABASE_URL}")
    print(f"Countries API: {Config.COUNTRIES_API_URL}")
    print(f"Exchange Rates API: {Config.EXCHANGE_RATES_API_URL}")
    print(f"Summary image: {Config.SUMMARY_IMAGE_PATH}")
    print("\nDirectories created successfully!")
