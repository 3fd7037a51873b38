"""
OpenAI-compatible AI gateway provider.

Relays chat completions from any gateway that speaks the OpenAI streaming format
(OpenAI, OpenRouter, LiteLLM, Ollama, vLLM, ...).
"""

from typing import Optional

import httpx

from astro_assistant.config import settings
from astro_assistant.providers.base import BaseProvider
from astro_assistant.utils.message_helpers import build_upstream_messages


class AIGatewayProvider(BaseProvider):
    """Streams chat completions from an OpenAI-compatible gateway."""

    name = "ai-gateway"

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_key: Gateway key, sent as a bearer token
            model: The model to use
            base_url: The base URL of the API (e.g., https://api.openai.com/v1)
            transport: Optional httpx transport (used in tests)
        """
        super().__init__(api_key, model)
        self.base_url = base_url.rstrip("/")

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls) -> "AIGatewayProvider":
        return cls(
            api_key=settings.ai_gateway_api_key,
            model=settings.ai_model,
            base_url=settings.ai_gateway_url,
        )

    async def open_stream(
        self, messages: list, system_prompt: Optional[str] = None
    ) -> httpx.Response:
        """Open a streaming completion. Raises GatewayError on a non-2xx answer."""
        payload = {
            "model": self.model,
            "messages": build_upstream_messages(messages, system_prompt),
            "stream": True,
        }

        request = self._client.build_request("POST", "/chat/completions", json=payload)
        response = await self._client.send(request, stream=True)
        if not response.is_success:
            await self._raise_for_upstream_error(response)
        return response
