"""
Assistant conversation: the message history plus at most one streaming exchange.

The assistant reply is built up fragment by fragment: each fragment replaces the
last message of the history with an extended copy, so observers holding the old
list never see it change.
"""

import asyncio
import logging
from typing import List, Optional

from astro_assistant.models.request import Message
from astro_assistant.streaming.client import ChatStreamClient
from astro_assistant.utils.message_helpers import (
    append_fragment,
    format_error_text,
    last_assistant_message,
)

logger = logging.getLogger(__name__)


class ExchangeInProgressError(RuntimeError):
    """Raised when send() is called while a reply is still streaming."""


class Conversation:
    """Conversation history bound to a chat stream client.

    Only one exchange may stream at a time; independent Conversation instances
    share nothing.
    """

    def __init__(self, client: ChatStreamClient):
        self.client = client
        self.messages: List[Message] = []
        self.error: Optional[str] = None
        self._streaming = False

    @property
    def is_streaming(self) -> bool:
        return self._streaming

    def _on_delta(self, fragment: str) -> None:
        self.messages = append_fragment(self.messages, fragment)

    def _on_done(self) -> None:
        logger.debug(f"Assistant reply complete after {len(self.messages)} messages")

    def _on_error(self, error: str) -> None:
        self.error = error
        self.messages = append_fragment(self.messages, format_error_text(error))

    async def send(self, text: str, stop: Optional[asyncio.Event] = None) -> Optional[Message]:
        """
        Send a user message and stream the assistant reply into the history.

        Returns the assistant message (possibly an error text), or None when the
        text is blank or nothing came back.

        Raises:
            ExchangeInProgressError: if a previous reply is still streaming
        """
        text = text.strip()
        if not text:
            return None
        if self._streaming:
            raise ExchangeInProgressError("A reply is still streaming for this conversation")

        self.messages = [*self.messages, Message(role="user", content=text)]
        self.error = None
        self._streaming = True
        try:
            await self.client.stream_chat(
                self.messages,
                on_delta=self._on_delta,
                on_done=self._on_done,
                on_error=self._on_error,
                stop=stop,
            )
        finally:
            self._streaming = False

        return last_assistant_message(self.messages)
