"""Configuration management from environment variables."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
SALES_DB = DATA_DIR / "sales.db"

# Ensure directories exist
DATA_DIR.mkdir(exist_ok=True)


class Config:
    """Application configuration."""

    # Store
    DB_PATH: Path = Path(os.getenv("DB_PATH", str(SALES_DB)))

    # Feed
    FEED_URL: str = os.getenv(
        "FEED_URL", "https://s3.amazonaws.com/roxiler.com/product_transaction.json"
    )
    TIMEOUT: int = int(os.getenv("TIMEOUT", "20"))
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "5"))

    # API
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))
    API_PREFIX: str = os.getenv("API_PREFIX", "/api/transactions")
    CORS_ORIGINS: list[str] = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    ]

    # Reporting
    DEFAULT_PER_PAGE: int = int(os.getenv("DEFAULT_PER_PAGE", "10"))
    # 0 means no ceiling
    MAX_PER_PAGE: int = int(os.getenv("MAX_PER_PAGE", "0"))
    REPORT_TIMEOUT: float = float(os.getenv("REPORT_TIMEOUT", "30"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        errors = []
        if not cls.FEED_URL.startswith(("http://", "https://")):
            errors.append("FEED_URL must be an http(s) URL")
        if cls.DEFAULT_PER_PAGE < 1:
            errors.append("DEFAULT_PER_PAGE must be >= 1")
        if cls.MAX_PER_PAGE < 0:
            errors.append("MAX_PER_PAGE must be >= 0")
        elif cls.MAX_PER_PAGE and cls.MAX_PER_PAGE < cls.DEFAULT_PER_PAGE:
            errors.append("MAX_PER_PAGE must be 0 or >= DEFAULT_PER_PAGE")
        if cls.REPORT_TIMEOUT <= 0:
            errors.append("REPORT_TIMEOUT must be positive")
        if not cls.API_PREFIX.startswith("/"):
            errors.append("API_PREFIX must start with '/'")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


config = Config()
