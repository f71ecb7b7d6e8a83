"""Configuration management from environment variables."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", str(PROJECT_ROOT / "data")))
DEV_DIR = DATA_DIR / "dev"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration."""

    # Source site
    BASE_URL: str = os.getenv("BASE_URL", "https://www.daft.ie/sold-properties")
    LOCATION: str = os.getenv("LOCATION", "dublin")

    # Job
    WORKERS: int = int(os.getenv("WORKERS", "6"))

    # Browser
    HEADLESS: bool = _env_bool("HEADLESS", "true")
    NAV_TIMEOUT: int = int(os.getenv("NAV_TIMEOUT", "30"))
    CARD_TIMEOUT: int = int(os.getenv("CARD_TIMEOUT", "15"))
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    )

    # Pacing
    RATE_PER_DOMAIN: float = float(os.getenv("RATE_PER_DOMAIN", "2.0"))
    RATE_JITTER: float = float(os.getenv("RATE_JITTER", "0.5"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration."""
        errors = []
        if not cls.BASE_URL.startswith(("http://", "https://")):
            errors.append("BASE_URL must be an http(s) URL")
        if not cls.LOCATION:
            errors.append("LOCATION is required")
        if cls.WORKERS < 1:
            errors.append("WORKERS must be >= 1")
        if cls.NAV_TIMEOUT <= 0 or cls.CARD_TIMEOUT <= 0:
            errors.append("NAV_TIMEOUT and CARD_TIMEOUT must be positive")
        if cls.RATE_PER_DOMAIN < 0:
            errors.append("RATE_PER_DOMAIN must be >= 0")
        if not 0 <= cls.RATE_JITTER < 1:
            errors.append("RATE_JITTER must be in [0, 1)")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


config = Config()
