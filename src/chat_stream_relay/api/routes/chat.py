"""The chat-stream relay endpoint."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ...config import Settings
from ...relay import relay_chat

# Every verb is routed here so the relay answers non-POST with its own 405
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


def get_upstream_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for provider calls; ``None`` uses httpx's default."""
    return None


async def chat_stream(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_upstream_transport),
) -> Response:
    return await relay_chat(request, settings, transport=transport)


def build_router(path: str) -> APIRouter:
    router = APIRouter()
    router.add_api_route(
        path,
        chat_stream,
        methods=ROUTED_METHODS,
        response_class=Response,
    )
    return router
