"""Shared fixtures: a fake cluster served through httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest


class FakeCluster:
    """Routes GET requests by path to canned responses and records them."""

    def __init__(self) -> None:
        self.routes: dict[str, httpx.Response | Exception] = {}
        self.requests: list[httpx.Request] = []

    def json(self, path: str, body: object, status_code: int = 200) -> None:
        self.routes[path] = httpx.Response(status_code, content=json.dumps(body).encode())

    def raw(self, path: str, content: bytes, status_code: int = 200) -> None:
        self.routes[path] = httpx.Response(status_code, content=content)

    def fail(self, path: str, exc: Exception) -> None:
        self.routes[path] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, content=b"{}")
        if isinstance(route, Exception):
            raise route
        return route


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def client(cluster: FakeCluster):
    with httpx.Client(transport=httpx.MockTransport(cluster.handler)) as c:
        yield c
