import logging
import os
import sys

from pydantic_settings import BaseSettings
from typing import List, Optional


def setup_logging():
    """Configure application logging."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# Initialize logging on import
setup_logging()

logger = logging.getLogger(__name__)

# Database path - use data directory for persistence
DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")


class Settings(BaseSettings):
    # API Keys (server-side only)
    gemini_api_key: Optional[str] = None

    # Model configuration
    gemini_model: str = "gemini-flash-latest"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Generation parameters for learning paths (chat uses model defaults)
    generation_temperature: float = 0.2
    generation_top_p: float = 0.8
    generation_top_k: int = 40

    # Characters of the current step included in chat prompts
    chat_context_chars: int = 1000

    # Persistence
    database_url: str = f"sqlite+aiosqlite:///{os.path.join(DATA_DIR, 'learnmate.db')}"

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    cors_origins: List[str] = ["*"]

    # Timeout settings (seconds)
    provider_timeout: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def warn_if_unconfigured():
    """Log a warning when no model API key is set. The server still starts."""
    if not settings.gemini_api_key:
        logger.warning("=" * 60)
        logger.warning("GEMINI_API_KEY is not set!")
        logger.warning("/api/learn and /api/chat will answer 'Server API Key Missing'.")
        logger.warning("Set it in your .env file:")
        logger.warning("    GEMINI_API_KEY=your_key_here")
        logger.warning("=" * 60)


settings = Settings()
