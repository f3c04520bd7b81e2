from __future__ import annotations

import json as _json
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

import httpx
import pytest

from gread_client.api.client import GReadApiClient
from gread_client.core.session import SessionState
from gread_client.storage import InMemoryPreferenceStore

MOCK_BASE_URL = "http://mock"

RouteResult = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class MockBackend:
    """Route table for `httpx.MockTransport` that records every request.

    Routes are keyed by method and full URL path (``/wp-json/<ns>/<endpoint>``).
    Unrouted requests answer 404 so a missing stub fails loudly.
    """

    def __init__(self) -> None:
        self._routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json: Any = None,
        text: Optional[str] = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> None:
        if handler is None:

            def handler(request: httpx.Request) -> httpx.Response:
                if text is not None:
                    return httpx.Response(status, text=text)
                return httpx.Response(status, json=json)

        self._routes[(method.upper(), path)] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"code": "rest_no_route", "message": "No route"})
        return route(request)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> List[httpx.Request]:
        return [
            r
            for r in self.requests
            if (method is None or r.method == method.upper()) and (path is None or r.url.path == path)
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return _json.loads(request.content.decode("utf-8")) if request.content else None


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


@pytest.fixture
def store() -> InMemoryPreferenceStore:
    return InMemoryPreferenceStore()


@pytest.fixture
def session() -> SessionState:
    return SessionState()


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def http_client(backend: MockBackend) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def api(http_client: httpx.AsyncClient, session: SessionState) -> GReadApiClient:
    return GReadApiClient(MOCK_BASE_URL, session=session, client=http_client)
