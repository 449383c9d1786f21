import json
from typing import Any, Dict, List, Tuple

import httpx
import pytest

from catalog_console.admin_api.http import AdminHttp
from catalog_console.session.token_store import TokenStore

BASE = "http://backend.test/admin-api"


def ok(data: Any) -> Dict[str, Any]:
    return {"code": 200, "desc": "success", "data": data}


def fail(code: int, desc: str) -> Dict[str, Any]:
    return {"code": code, "desc": desc, "data": None}


class FakeAdminBackend:
    """
    Stand-in for the admin backend behind httpx.MockTransport.
    Handlers are keyed by (METHOD, path without the base prefix); a handler is
    either a ready response body or a callable taking the httpx.Request.
    """

    def __init__(self):
        self.handlers: Dict[Tuple[str, str], Any] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, body: Any = None, status: int = 200):
        if callable(body):
            self.handlers[(method.upper(), path)] = body
        else:
            self.handlers[(method.upper(), path)] = (status, body)
        return self

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path.endswith(path)]

    def json_of(self, method: str, path: str, index: int = -1) -> Any:
        return json.loads(self.calls(method, path)[index].content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/admin-api"):
            path = path[len("/admin-api"):]
        handler = self.handlers.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"message": f"no fake for {request.method} {path}"})
        if isinstance(handler, tuple):
            return httpx.Response(handler[0], json=handler[1])
        result = handler(request)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)


@pytest.fixture
def backend() -> FakeAdminBackend:
    return FakeAdminBackend()


@pytest.fixture
def token_store(tmp_path) -> TokenStore:
    store = TokenStore(tmp_path / "session.json")
    store.set_tokens("access-abc", "refresh-xyz")
    return store


@pytest.fixture
def http(backend, token_store) -> AdminHttp:
    return AdminHttp(BASE, token_store, token_prefix="Bearer", transport=backend.transport())


def page(items: List[Dict[str, Any]], total: int = None) -> Dict[str, Any]:
    return ok({"total": len(items) if total is None else total, "list": items})

