import logging
import sys

from pydantic_settings import BaseSettings
from typing import Optional


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


class Settings(BaseSettings):
    # Chat endpoint used by the assistant client
    chat_url: str = "http://localhost:8000/api/chat"
    chat_api_key: Optional[str] = None

    # Upstream AI gateway (server-side only, OpenAI-compatible)
    ai_gateway_url: str = "https://api.openai.com/v1"
    ai_gateway_api_key: Optional[str] = None
    ai_model: str = "gpt-4.1-mini"

    # Overrides the built-in assistant prompt when set
    system_prompt: Optional[str] = None

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Timeout settings (seconds)
    provider_timeout: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def check_gateway_key() -> bool:
    """Warn when the AI gateway key is missing. Chat requests fail until it is set."""
    if settings.ai_gateway_api_key:
        return True
    logger.warning("=" * 60)
    logger.warning("AI_GATEWAY_API_KEY is not set!")
    logger.warning("The chat endpoint will answer with an error until it is configured.")
    logger.warning("Please set AI_GATEWAY_API_KEY in your .env file:")
    logger.warning("    AI_GATEWAY_API_KEY=your_gateway_key_here")
    logger.warning("=" * 60)
    return False


settings = Settings()
