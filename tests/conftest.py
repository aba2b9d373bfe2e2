"""Shared fixtures: an in-memory Frappe backend behind httpx.MockTransport."""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from frappe_mcp.auth import AuthCoordinator
from frappe_mcp.client import FrappeClient
from frappe_mcp.config import Settings
from frappe_mcp.engine import HandlerContext, ToolDispatcher, build_registry
from frappe_mcp.engine.core.hints import StaticHints

BASE_URL = "http://frappe.test"

NOT_FOUND = {
    "exc_type": "DoesNotExistError",
    "exception": "frappe.exceptions.DoesNotExistError: Not found",
}

Route = Callable[[httpx.Request], httpx.Response] | httpx.Response


class FakeFrappe:
    """Route table keyed by (method, path); unknown routes answer 404."""

    def __init__(self):
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, json_body: Any = None, status: int = 200) -> None:
        self.routes[(method, path)] = httpx.Response(status, json=json_body)

    def add_handler(self, method: str, path: str, handler: Route) -> None:
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json=NOT_FOUND)
        if callable(route):
            return route(request)
        return route

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if (method is None or r.method == method) and (path is None or r.url.path == path)
        ]


def doctype_meta(name: str, fields: list[dict], **extra: Any) -> dict:
    """A getdoctype response body for one DocType."""
    doc = {"name": name, "module": "Desk", "fields": fields, "permissions": [], **extra}
    return {"docs": [doc]}


def json_param(request: httpx.Request, key: str) -> Any:
    return json.loads(request.url.params[key])


@pytest.fixture
def fake_frappe() -> FakeFrappe:
    return FakeFrappe()


@pytest.fixture
def client(fake_frappe) -> FrappeClient:
    return FrappeClient(
        BASE_URL, api_key="key", api_secret="secret", transport=fake_frappe.transport
    )


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        frappe_url=BASE_URL,
        frappe_api_key="key",
        frappe_api_secret="secret",
        static_hints_dir=str(tmp_path),
    )


@pytest.fixture
def hints() -> StaticHints:
    return StaticHints()


@pytest.fixture
def ctx(client, hints, test_settings) -> HandlerContext:
    auth = AuthCoordinator(client, api_key="key", api_secret="secret")
    return HandlerContext(client=client, auth=auth, hints=hints, settings=test_settings)


@pytest.fixture
def dispatcher(ctx) -> ToolDispatcher:
    return ToolDispatcher(build_registry(), ctx)
