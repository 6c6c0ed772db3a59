"""Response headers and body plumbing for the two stream producers.

The upstream body is forwarded byte for byte. The relay never parses the
``data: ...`` event framing; clients read it exactly as the provider sent it.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import AsyncIterator, Protocol

from starlette.background import BackgroundTask
from starlette.responses import StreamingResponse

logger = logging.getLogger(__name__)


class ProducerKind(str, Enum):
    SYNTHETIC = "synthetic"
    UPSTREAM = "upstream"


class ByteStream(Protocol):
    def __aiter__(self) -> AsyncIterator[bytes]: ...

    async def aclose(self) -> None: ...


PLAIN_TEXT_HEADERS = {
    "Content-Type": "text/plain; charset=utf-8",
    "X-Accel-Buffering": "no",
}

EVENT_STREAM_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def headers_for(kind: ProducerKind) -> dict[str, str]:
    if kind is ProducerKind.UPSTREAM:
        return dict(EVENT_STREAM_HEADERS)
    return dict(PLAIN_TEXT_HEADERS)


async def relay_body(stream: ByteStream, deadline: float | None = None) -> AsyncIterator[bytes]:
    """Forward chunks in order until the stream ends or the deadline passes."""
    loop = asyncio.get_running_loop()
    expires_at = None if deadline is None else loop.time() + deadline
    chunks = stream.__aiter__()
    forwarded = 0
    try:
        while True:
            timeout = None if expires_at is None else max(expires_at - loop.time(), 0.0)
            try:
                chunk = await asyncio.wait_for(chunks.__anext__(), timeout)
            except StopAsyncIteration:
                break
            except asyncio.TimeoutError:
                logger.info(f"Request deadline reached after {forwarded} chunks, ending stream")
                break
            forwarded += 1
            yield chunk
    finally:
        await stream.aclose()


def frame_response(
    stream: ByteStream,
    kind: ProducerKind,
    deadline: float | None = None,
) -> StreamingResponse:
    """Wrap a producer in a streaming response with headers for its kind.

    The producer is also closed in a background task, which Starlette runs
    even when the client disconnects before the body is exhausted.
    """
    return StreamingResponse(
        relay_body(stream, deadline),
        status_code=200,
        headers=headers_for(kind),
        background=BackgroundTask(stream.aclose),
    )
