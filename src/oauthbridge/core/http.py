"""Shared httpx plumbing for the token, profile and revocation clients."""

from __future__ import annotations

import urllib.parse
from typing import Any

import httpx


class HTTPClientFactory:
    """Creates short-lived ``httpx.AsyncClient`` instances with a shared timeout.

    Args:
        timeout: Default request timeout in seconds.
        transport: Optional transport override (e.g. ``httpx.MockTransport``).
    """

    def __init__(self, *, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.timeout = timeout
        self._transport = transport

    def __call__(self, timeout: float | None = None) -> httpx.AsyncClient:
        kwargs: dict = {"timeout": self.timeout if timeout is None else timeout}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)


def parse_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a token endpoint body: JSON, or form-encoded as a fallback.

    Returns an empty dict for bodies that are neither.
    """
    content_type = response.headers.get("content-type", "")
    if "application/x-www-form-urlencoded" in content_type or "text/plain" in content_type:
        return dict(urllib.parse.parse_qsl(response.text))
    try:
        data = response.json()
    except ValueError:
        return dict(urllib.parse.parse_qsl(response.text))
    return data if isinstance(data, dict) else {}


def provider_error(body: dict[str, Any]) -> tuple[str | None, str | None]:
    """Extract ``(error, error_description)`` from a provider error body."""
    error = body.get("error")
    description = body.get("error_description")
    # Some providers nest {"error": {"message": ..., "status": ...}}
    if isinstance(error, dict):
        description = description or error.get("message")
        error = error.get("status") or error.get("code")
    return (
        str(error) if error else None,
        str(description) if description else None,
    )


def as_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
