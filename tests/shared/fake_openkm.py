"""An in-process stand-in for the OpenKM REST API.

Routes are keyed by HTTP method and endpoint path (relative to the base
URL). Each route answers with a fixed ``httpx.Response`` or a callable that
receives the request. Every request is recorded for assertions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Union

import httpx

from openkm_mcp.config import Settings

BASE_URL = "http://okm.test/OpenKM"

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def make_settings(**overrides) -> Settings:
    """Settings pointing at the fake repository, ignoring any local .env file."""
    values = {"base_url": BASE_URL, "user": "tester", "password": "secret"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeOpenKM:
    def __init__(self, base_url: str = BASE_URL):
        self.base_path = httpx.URL(base_url).path
        self.routes: dict[tuple[str, str], Responder] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, endpoint: str, responder: Responder) -> None:
        self.routes[(method, endpoint)] = responder

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path[len(self.base_path):]
        responder = self.routes.get((request.method, endpoint))
        if responder is None:
            return httpx.Response(404)
        if callable(responder):
            return responder(request)
        return responder

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls_to(self, endpoint: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(endpoint)]
