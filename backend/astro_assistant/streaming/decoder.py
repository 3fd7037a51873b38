"""
Incremental decoder for the assistant's delta stream.

The chat endpoint answers with newline-delimited frames:

    data: {"choices":[{"delta":{"content":"Hel"}}]}
    data: {"choices":[{"delta":{"content":"lo"}}]}
    data: [DONE]

Bytes arrive in arbitrarily sized chunks, so a frame may be split across two
reads. The decoder keeps the unresolved tail in a buffer and emits each text
fragment as soon as its frame is complete.
"""

import codecs
import logging
from enum import Enum
from typing import Callable

import orjson

from astro_assistant.utils.sse import SSE_DATA_PREFIX, SSE_DONE_SENTINEL, extract_delta_content

logger = logging.getLogger(__name__)


class DecoderState(str, Enum):
    STREAMING = "streaming"
    DONE = "done"


class DeltaStreamDecoder:
    """Turns raw stream chunks into fragment and completion callbacks.

    One instance serves exactly one exchange. on_done fires exactly once, on the
    STREAMING -> DONE transition, and nothing fires after it.
    """

    def __init__(
        self,
        on_delta: Callable[[str], None],
        on_done: Callable[[], None],
    ):
        self._on_delta = on_delta
        self._on_done = on_done
        self._buffer = ""
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self.state = DecoderState.STREAMING
        self.cancelled = False

    @property
    def is_done(self) -> bool:
        return self.state is DecoderState.DONE

    @property
    def pending(self) -> str:
        """Text received but not yet resolved into a complete frame."""
        return self._buffer

    def feed(self, chunk: bytes | str) -> None:
        """Append a chunk to the buffer and emit every frame it completes."""
        if self.is_done:
            return
        if isinstance(chunk, bytes):
            chunk = self._utf8.decode(chunk)
        self._buffer += chunk
        self._drain()

    def finish(self) -> None:
        """Signal end of stream. No-op once the decoder is done."""
        if self.is_done:
            return
        if self._buffer:
            logger.debug(f"Discarding {len(self._buffer)} unterminated chars at end of stream")
        self._buffer = ""
        self.state = DecoderState.DONE
        self._on_done()

    def cancel(self) -> None:
        """Stop decoding without signalling completion (consumer lost interest)."""
        if self.is_done:
            return
        self.cancelled = True
        self._buffer = ""
        self.state = DecoderState.DONE

    def _drain(self) -> None:
        while not self.is_done:
            idx = self._buffer.find("\n")
            if idx == -1:
                return

            line = self._buffer[:idx]
            self._buffer = self._buffer[idx + 1:]
            if line.endswith("\r"):
                line = line[:-1]
            if not line.startswith(SSE_DATA_PREFIX):
                continue

            payload = line[len(SSE_DATA_PREFIX):].strip()
            if payload == SSE_DONE_SENTINEL:
                self.finish()
                return

            try:
                data = orjson.loads(payload)
            except orjson.JSONDecodeError as e:
                # Frame may be incomplete: put it back and wait for more bytes
                logger.debug(f"Re-buffering unparsed frame: {e}")
                self._buffer = line + "\n" + self._buffer
                return

            content = extract_delta_content(data)
            if content:
                self._on_delta(content)
