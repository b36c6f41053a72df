# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025 The Script Updater Authors

"""
Shared test fixtures.

FakeHttp serves scripted responses and records every requested URL, so the
tests never touch the network.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Union

import pytest

from script_updater.http import BufferedResponse, HttpClient, HttpResponse


NOW = datetime(2024, 3, 15, 10, 30, 0)

MANIFEST_URL = "https://updates.example.com/version.json"


def release(version: str, **extra: Any) -> Dict[str, Any]:
    """Build a manifest entry as published."""
    entry = {
        "version": version,
        "date": "2024-01-01",
        "notes": f"Release {version}",
        "url": f"https://updates.example.com/{version}.zip",
    }
    entry.update(extra)
    return entry


def json_response(data: Any, status: int = 200, reason: str = "OK") -> BufferedResponse:
    return BufferedResponse(status, reason, json.dumps(data).encode())


class FakeHttp(HttpClient):
    """HttpClient returning canned responses (or raising canned errors)."""

    def __init__(self):
        self.responses: Dict[str, Union[HttpResponse, Exception]] = {}
        self.requests: List[str] = []

    async def get(self, url: str) -> HttpResponse:
        self.requests.append(url)
        if url not in self.responses:
            return BufferedResponse(404, "Not Found")
        result = self.responses[url]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_http():
    return FakeHttp()
