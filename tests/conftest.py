"""
Pytest configuration and shared fixtures for the record adapter tests
"""
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from commerce_records.client import Client
from commerce_records.core.config import Settings

NOW = 1_700_000_000.0


class FakeApi:
    """
    Stand-in for the remote API behind an ``httpx.MockTransport``.

    Responses are queued per (method, path); the last queued response of a
    route is reused once the queue is drained. Unknown routes answer 404.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], List[httpx.Response]] = {}

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        pagination: Optional[Dict[str, int]] = None,
    ) -> None:
        headers = dict(headers or {})
        if pagination is not None:
            headers["X-Pagination"] = json.dumps(pagination)
        response = httpx.Response(status, json=json_body, headers=headers) if json_body is not None \
            else httpx.Response(status, headers=headers)
        self._routes.setdefault((method.upper(), path), []).append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "Not Found"})
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    def requests_for(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]


@pytest.fixture
def settings():
    return Settings(BASE_URL="https://api.test", ACCESS_TOKEN="test-token", _env_file=None)


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def sleeps():
    """Records every backoff sleep instead of blocking."""
    return []


@pytest.fixture
def client(settings, api, sleeps):
    with Client(
        settings=settings,
        transport=httpx.MockTransport(api.handler),
        sleep=sleeps.append,
        clock=lambda: NOW,
    ) as test_client:
        yield test_client
