"""Relay orchestration: validate, pick a producer, frame the response."""

from __future__ import annotations

import asyncio
import json
import logging

import httpx
from fastapi import Request
from fastapi.responses import PlainTextResponse, Response

from .config import Settings
from .errors import InvalidConversationError, MethodNotAllowedError, RelayError
from .framing import ProducerKind, frame_response
from .schemas import Conversation
from .synthetic import FALLBACK_MESSAGE, SyntheticStream
from .upstream import open_upstream_stream

logger = logging.getLogger(__name__)


def select_producer(settings: Settings) -> ProducerKind:
    """Pick the stream producer from configuration alone."""
    if settings.has_credential:
        return ProducerKind.UPSTREAM
    return ProducerKind.SYNTHETIC


def remaining_deadline(deadline: float | None, started: float, now: float) -> float | None:
    """Time left of a request deadline that began at ``started``."""
    if deadline is None:
        return None
    return max(deadline - (now - started), 0.0)


async def read_conversation(request: Request) -> Conversation:
    body = await request.body()
    if not body.strip():
        raise InvalidConversationError()
    # Undecodable JSON is not a validation failure; it surfaces as a 500
    payload = json.loads(body)
    return Conversation.from_payload(payload)


async def _relay(
    request: Request,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None,
) -> Response:
    if request.method != "POST":
        raise MethodNotAllowedError()

    loop = asyncio.get_running_loop()
    started = loop.time()

    conversation = await read_conversation(request)
    kind = select_producer(settings)
    logger.debug(f"Relaying {len(conversation.messages)} turns via {kind.value} producer")

    if kind is ProducerKind.SYNTHETIC:
        stream = SyntheticStream(FALLBACK_MESSAGE, delay=settings.fallback_chunk_delay)
    else:
        stream = await open_upstream_stream(settings, conversation.messages, transport=transport)

    # Waiting for the upstream headers already used part of the deadline
    deadline = remaining_deadline(settings.request_deadline, started, loop.time())
    return frame_response(stream, kind, deadline=deadline)


async def relay_chat(
    request: Request,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Response:
    """
    Handle one chat-stream request end to end.

    Every outcome is a terminated HTTP response: a streamed 200, a plain-text
    rejection carrying the failure's status, or a generic 500 that echoes
    nothing from the request.
    """
    try:
        return await _relay(request, settings, transport)
    except RelayError as exc:
        logger.info(f"Rejected chat request with {exc.status_code}: {exc.message}")
        return exc.to_response()
    except Exception:
        logger.exception("Unhandled error while relaying chat request")
        return PlainTextResponse("Internal Server Error", status_code=500)
