"""Shared aiohttp helpers for the HTTP-backed adapters."""

from __future__ import annotations

from typing import Any

import aiohttp


def new_session(timeout_seconds: float) -> aiohttp.ClientSession:
    """Open a short-lived session with a total-time budget."""
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout_seconds)
    )


async def read_error_body(response: Any) -> Any:
    """Best-effort read of an upstream error body (JSON, else text)."""
    try:
        return await response.json()
    except (aiohttp.ContentTypeError, ValueError):
        return await response.text()
