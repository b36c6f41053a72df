# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
HTTP Capability

A minimal GET-only client. Responses are fully buffered so callers can
inspect the status before deciding how to consume the body.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import aiohttp

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300  # seconds, covers large archive downloads


class HttpResponse(ABC):
    """Response returned by an HttpClient."""

    status: int
    reason: str

    @property
    def ok(self) -> bool:
        """True for 2xx status codes."""
        return 200 <= self.status < 300

    @abstractmethod
    async def read(self) -> bytes:
        """Return the raw response body."""

    async def json(self) -> Any:
        """Decode the response body as JSON."""
        return json.loads(await self.read())


class BufferedResponse(HttpResponse):
    """Response whose body has already been read into memory."""

    def __init__(self, status: int, reason: Optional[str] = None, body: bytes = b""):
        self.status = status
        self.reason = reason or ""
        self._body = body

    async def read(self) -> bytes:
        return self._body

    def __repr__(self) -> str:
        return f"BufferedResponse(status={self.status}, reason={self.reason!r}, size={len(self._body)})"


class HttpClient(ABC):
    """Interface for fetching URLs."""

    @abstractmethod
    async def get(self, url: str) -> HttpResponse:
        """Issue a plain GET request.

        Raises:
            aiohttp.ClientError: On transport failures (connection, DNS, ...).
        """


class AiohttpClient(HttpClient):
    """HttpClient using a short-lived aiohttp session per request."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.timeout = timeout

    async def get(self, url: str) -> HttpResponse:
        async with aiohttp.ClientSession() as session:
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=self.timeout)) as resp:
                body = await resp.read()
                logger.debug("GET %s -> %d (%d bytes)", url, resp.status, len(body))
                return BufferedResponse(resp.status, resp.reason, body)
