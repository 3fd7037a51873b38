"""
Client side of the assistant chat: posts the conversation to the chat endpoint
and feeds the streamed reply through a DeltaStreamDecoder.
"""

import asyncio
import logging
from typing import Callable, Optional, Sequence

import httpx
import orjson

from astro_assistant.config import settings
from astro_assistant.models.request import Message
from astro_assistant.streaming.decoder import DeltaStreamDecoder

logger = logging.getLogger(__name__)

# Messages surfaced through on_error
FALLBACK_ERROR_MESSAGE = "Something went wrong"
NO_RESPONSE_MESSAGE = "No response"
CONNECTION_ERROR_MESSAGE = "Connection error. Please try again."


def extract_error_message(body: bytes) -> str:
    """Pull a user-facing message out of an error response body."""
    try:
        data = orjson.loads(body)
    except orjson.JSONDecodeError:
        return FALLBACK_ERROR_MESSAGE

    if not isinstance(data, dict):
        return FALLBACK_ERROR_MESSAGE
    error = data.get("error")
    # OpenAI-style bodies nest the text: {"error": {"message": "..."}}
    if isinstance(error, dict):
        error = error.get("message")
    if isinstance(error, str) and error:
        return error
    return FALLBACK_ERROR_MESSAGE


def has_readable_body(response: httpx.Response) -> bool:
    """A successful response carries no body when it is 204 or declares zero length."""
    if response.status_code == 204:
        return False
    return response.headers.get("content-length") != "0"


class ChatStreamClient:
    """Streams assistant replies from the chat endpoint.

    Each call to stream_chat is an independent exchange with its own decoder.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url or settings.chat_url
        self.api_key = api_key if api_key is not None else settings.chat_api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=float(settings.provider_timeout))

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def stream_chat(
        self,
        messages: Sequence[Message | dict],
        on_delta: Callable[[str], None],
        on_done: Callable[[], None],
        on_error: Callable[[str], None],
        stop: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Send the conversation and stream the reply.

        Args:
            messages: Full conversation history, oldest first
            on_delta: Called with each text fragment, in arrival order
            on_done: Called once when the reply is complete
            on_error: Called once with a user-facing message if the exchange fails
            stop: Optional event checked around each chunk; once seen, reading stops and on_done does not fire
        """
        payload = {
            "messages": [
                m.model_dump() if isinstance(m, Message) else {"role": m["role"], "content": m["content"]}
                for m in messages
            ]
        }
        decoder = DeltaStreamDecoder(on_delta, on_done)

        try:
            async with self._client.stream(
                "POST", self.url, json=payload, headers=self._headers()
            ) as response:
                if not response.is_success:
                    body = await response.aread()
                    message = extract_error_message(body)
                    logger.warning(f"Chat request failed: status={response.status_code}, error={message}")
                    on_error(message)
                    return

                if not has_readable_body(response):
                    on_error(NO_RESPONSE_MESSAGE)
                    return

                async for chunk in response.aiter_bytes():
                    if stop is not None and stop.is_set():
                        break
                    decoder.feed(chunk)
                    if decoder.is_done:
                        break

            if stop is not None and stop.is_set():
                decoder.cancel()
            decoder.finish()

        except httpx.HTTPError as e:
            logger.error(f"Chat stream failed: {e}")
            if not decoder.is_done:
                decoder.cancel()
                on_error(CONNECTION_ERROR_MESSAGE)

    async def aclose(self):
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ChatStreamClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
