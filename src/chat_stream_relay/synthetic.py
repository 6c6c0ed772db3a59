"""Synthetic stream used when no provider credential is configured."""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = (
    "I am a demo AI assistant. To make me fully functional, please add your "
    "OPENAI_API_KEY to the environment variables. I can tell you about "
    "Abhijit's skills and projects!"
)


class SyntheticStream:
    """Emit a fixed message one character per chunk with a pause between chunks.

    The stream is lazy, finite and single-use. Pacing happens inside
    ``__anext__`` so a consumer that stops iterating (or calls ``aclose``)
    leaves no timer running, and a cancelled sleep simply ends the stream.
    """

    def __init__(self, text: str = FALLBACK_MESSAGE, delay: float = 0.02, encoding: str = "utf-8"):
        self._chars = list(text)
        self._delay = delay
        self._encoding = encoding
        self._position = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def chunks_emitted(self) -> int:
        return self._position

    def __aiter__(self) -> "SyntheticStream":
        return self

    async def __anext__(self) -> bytes:
        if self._closed or self._position >= len(self._chars):
            self._closed = True
            raise StopAsyncIteration

        if self._position > 0 and self._delay > 0:
            await asyncio.sleep(self._delay)
            # Closed while sleeping
            if self._closed:
                raise StopAsyncIteration

        char = self._chars[self._position]
        self._position += 1
        return char.encode(self._encoding)

    async def aclose(self) -> None:
        if not self._closed:
            logger.debug(
                "Synthetic stream closed after %d of %d chunks",
                self._position,
                len(self._chars),
            )
        self._closed = True
