"""Streaming client for the chat-completion provider."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

import httpx

from .config import Settings
from .errors import UpstreamError

logger = logging.getLogger(__name__)

COMPLETIONS_PATH = "/chat/completions"


def build_upstream_messages(system_prompt: str, messages: list[Any]) -> list[Any]:
    """Prepend the server-owned system directive to the caller's turns."""
    return [{"role": "system", "content": system_prompt}, *messages]


def _build_payload(settings: Settings, messages: list[Any]) -> dict[str, Any]:
    return {
        "model": settings.openai_model,
        "messages": build_upstream_messages(settings.system_prompt, messages),
        "stream": True,
    }


def _get_headers(api_key: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "Accept": "text/event-stream",
    }


class UpstreamStream:
    """The provider's response body, unconsumed.

    Owns both the response and the client that produced it; ``aclose``
    releases the connection and is safe to call more than once.
    """

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self._client = client
        self._response = response
        self._chunks: AsyncIterator[bytes] | None = None
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "UpstreamStream":
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration
        if self._chunks is None:
            self._chunks = self._response.aiter_bytes()
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise
        except httpx.HTTPError as exc:
            logger.warning(f"Upstream stream broke mid-flight: {exc.__class__.__name__}")
            await self.aclose()
            raise

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


async def open_upstream_stream(
    settings: Settings,
    messages: list[Any],
    transport: httpx.AsyncBaseTransport | None = None,
) -> UpstreamStream:
    """
    Open a single streaming chat-completion call.

    Args:
        settings: Process settings carrying the credential and directive
        messages: Caller conversation, forwarded as given
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)

    Returns:
        An ``UpstreamStream`` whose body has not been read yet

    Raises:
        UpstreamError: on a non-2xx status, when the request cannot be sent,
            or when no response arrives within the request deadline
    """
    if not settings.has_credential:
        raise UpstreamError("OPENAI_API_KEY is not configured in the environment", status_code=500)

    url = f"{settings.openai_base_url.rstrip('/')}{COMPLETIONS_PATH}"
    # Read timeout stays open; the request deadline bounds headers and body
    timeout = httpx.Timeout(None, connect=settings.upstream_connect_timeout)
    client = httpx.AsyncClient(timeout=timeout, transport=transport)

    request = client.build_request(
        "POST",
        url,
        headers=_get_headers(settings.openai_api_key),
        json=_build_payload(settings, messages),
    )

    try:
        response = await asyncio.wait_for(
            client.send(request, stream=True),
            settings.request_deadline,
        )
    except asyncio.TimeoutError as exc:
        await client.aclose()
        logger.warning(f"Upstream at {url} sent no response within the request deadline")
        raise UpstreamError(status_code=500) from exc
    except httpx.HTTPError as exc:
        await client.aclose()
        logger.warning(f"Upstream request to {url} failed: {exc.__class__.__name__}")
        raise UpstreamError(status_code=500) from exc
    except BaseException:
        await client.aclose()
        raise

    if not response.is_success:
        try:
            body = await response.aread()
        finally:
            await response.aclose()
            await client.aclose()
        logger.warning(f"Upstream returned {response.status_code}")
        raise UpstreamError(
            f"Upstream returned {response.status_code}",
            status_code=response.status_code,
            body=body,
        )

    return UpstreamStream(client, response)
