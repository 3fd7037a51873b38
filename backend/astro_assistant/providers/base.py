import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx
import orjson

from astro_assistant.config import settings

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Upstream answered with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class BaseProvider(ABC):
    """Abstract base class for upstream chat providers"""

    name: str

    def __init__(self, api_key: Optional[str], model: str):
        self.api_key = api_key
        self.model = model
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def timeout(self) -> float:
        """Get the configured provider timeout in seconds."""
        return float(settings.provider_timeout)

    @abstractmethod
    async def open_stream(
        self, messages: list, system_prompt: Optional[str] = None
    ) -> httpx.Response:
        """Start a streaming chat completion and return the open response.

        The caller owns the response and must close it.
        """
        pass

    async def cleanup(self):
        """Cleanup HTTP client resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def is_configured(self) -> bool:
        """Check if provider has valid API key"""
        return bool(self.api_key)

    async def _raise_for_upstream_error(self, response: httpx.Response) -> None:
        """Read the error body of a failed upstream response, close it and raise GatewayError."""
        error_body = await response.aread()
        await response.aclose()
        try:
            error_json = orjson.loads(error_body)
            error = error_json.get("error", error_body.decode("utf-8", errors="replace"))
            error_msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
        except (orjson.JSONDecodeError, AttributeError):
            error_msg = error_body.decode("utf-8", errors="replace")
        logger.error(
            f"{self.name} API error for model '{self.model}': "
            f"status={response.status_code}, error={error_msg}"
        )
        raise GatewayError(response.status_code, error_msg)
