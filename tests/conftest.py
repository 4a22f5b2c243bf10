"""Shared fixtures: a SparkMailClient backed by httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from sparkmail import SparkMailClient

BASE_URL = "https://api.test"


class RecordingHandler:
    """MockTransport handler that remembers every request it sees."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def json_response(status_code: int, payload: Any) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


def error_response(status_code: int, code: str, message: str, description: str = "") -> httpx.Response:
    return json_response(
        status_code,
        {"errors": [{"code": code, "message": message, "description": description}]},
    )


@pytest.fixture
def make_client():
    """Build a client whose requests go to the given handler."""
    clients: list[SparkMailClient] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any):
        recorder = RecordingHandler(handler)
        client = SparkMailClient(
            api_key="test-key",
            base_url=BASE_URL,
            transport=httpx.MockTransport(recorder),
            **kwargs,
        )
        clients.append(client)
        return client, recorder

    yield _make

    for client in clients:
        client.close()
