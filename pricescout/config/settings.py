# pricescout/config/settings.py

"""Central configuration for the pricescout engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()

_ENV: str = os.getenv("APP_ENV", "development").strip().lower()
_IS_PRODUCTION: bool = _ENV == "production"


def _csv_env(name: str, default: list[str]) -> list[str]:
    """Read a comma-separated environment variable into a list."""
    raw = os.getenv(name)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


_BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent


def _logs_dir(base_dir: Path) -> Path:
    """Env override, else ``logs/`` in a source checkout, else in the cwd."""
    override = os.getenv("LOGS_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    if (base_dir / "pyproject.toml").is_file():
        return base_dir / "logs"
    # Installed into site-packages
    return Path.cwd() / "logs"


class Settings:
    """Central configuration for the pricescout engine."""

    # --- Environment ---
    ENV: str = "production" if _IS_PRODUCTION else "development"
    PORT: int = int(os.getenv("PORT", "8080" if _IS_PRODUCTION else "3000"))
    LOG_LEVEL: str = "INFO" if _IS_PRODUCTION else "DEBUG"
    CACHE_TTL: float = 7200.0 if _IS_PRODUCTION else 3600.0
    ALLOWED_ORIGINS: list[str] = (
        _csv_env("ALLOWED_ORIGINS", ["https://your-domain.com"])
        if _IS_PRODUCTION
        else ["http://localhost:8080", "http://127.0.0.1:8080"]
    )
    API_BASE_URL: str = os.getenv(
        "API_BASE_URL",
        "https://api.your-domain.com/api"
        if _IS_PRODUCTION
        else "http://localhost:3000/api",
    ).rstrip("/")

    # --- Browser ---
    BROWSER_HEADLESS: bool = (
        os.getenv("BROWSER_HEADLESS", "true").lower() != "false"
    )
    BROWSER_ARGS: list[str] = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-accelerated-2d-canvas",
        "--no-first-run",
        "--no-zygote",
        "--disable-gpu",
    ]
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/91.0.4472.124 Safari/537.36"
    )
    VIEWPORT: dict[str, int] = {"width": 1366, "height": 900}

    # --- Extraction ---
    PLACEHOLDER_IMAGE: str = f"{API_BASE_URL}/placeholder/60/60"
    FALLBACK_SAMPLE_DATA: bool = (
        os.getenv("FALLBACK_SAMPLE_DATA", "false").lower() == "true"
    )

    # --- Health probe (curl_cffi) ---
    HEALTH_TIMEOUT: int = 10            # Seconds per platform homepage
    HEALTH_SLOW_MS: float = 5000.0      # Latency above this is "slow"
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-IN,en;q=0.9",
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Paths ---
    BASE_DIR: Path = _BASE_DIR
    SELECTORS_PATH: Path = Path(__file__).resolve().parent / "selectors.json"
    LOGS_DIR: Path = _logs_dir(_BASE_DIR)

    # --- Platforms (registry; request order follows this list) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "amazon",
            "label": "Amazon",
            "extractor": "pricescout.extractors.amazon_extractor.AmazonExtractor",
        },
        {
            "id": "jiomart",
            "label": "JioMart",
            "extractor": "pricescout.extractors.jiomart_extractor.JioMartExtractor",
        },
        {
            "id": "myntra",
            "label": "Myntra",
            "extractor": "pricescout.extractors.myntra_extractor.MyntraExtractor",
        },
        {
            "id": "ajio",
            "label": "Ajio",
            "extractor": "pricescout.extractors.ajio_extractor.AjioExtractor",
        },
        {
            "id": "flipkart",
            "label": "Flipkart",
            "extractor": "pricescout.extractors.flipkart_extractor.FlipkartExtractor",
        },
    ]
