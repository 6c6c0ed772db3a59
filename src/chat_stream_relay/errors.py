"""Errors raised while relaying a chat request."""

from __future__ import annotations

from fastapi.responses import PlainTextResponse


class RelayError(Exception):
    """A failure that is reported to the caller before any stream opens."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def response_headers(self) -> dict[str, str]:
        return {}

    def to_response(self) -> PlainTextResponse:
        return PlainTextResponse(
            self.message,
            status_code=self.status_code,
            headers=self.response_headers() or None,
        )


class MethodNotAllowedError(RelayError):
    """The request used a method other than POST."""

    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)

    def response_headers(self) -> dict[str, str]:
        return {"Allow": "POST"}


class InvalidConversationError(RelayError):
    """The request did not carry a usable conversation."""

    status_code = 400

    def __init__(self, message: str = "No message provided"):
        super().__init__(message)


class UpstreamError(RelayError):
    """The provider call could not be established.

    ``body`` holds the provider's error body exactly as received so it can be
    forwarded verbatim; ``status_code`` is the provider's status. When no
    response arrived at all there is nothing to mirror, so it is a generic 500.
    """

    def __init__(
        self,
        message: str = "Internal Server Error",
        status_code: int | None = None,
        body: bytes | None = None,
    ):
        super().__init__(message, status_code=status_code)
        self.body = body if body is not None else message.encode("utf-8")

    def to_response(self) -> PlainTextResponse:
        return PlainTextResponse(self.body, status_code=self.status_code)
