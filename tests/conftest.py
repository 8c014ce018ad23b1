import json
import os

import httpx
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from services.api_client import AdminApiClient

BASE_URL = "http://backend.test/api"


class FakeBackend:
    """httpx transport handler answering from a table of canned replies."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def reply(self, method, path, status=200, body=None):
        self.routes[(method, path)] = (status, body)

    def fail(self, method, path, exc):
        self.routes[(method, path)] = exc

    def calls(self, method=None, path=None):
        return [
            r for r in self.requests
            if (method is None or r.method == method)
            and (path is None or self.path_of(r) == path)
        ]

    @staticmethod
    def path_of(request):
        path = request.url.path
        return path[len("/api"):] if path.startswith("/api") else path

    def __call__(self, request):
        request.read()
        self.requests.append(request)
        route = self.routes.get((request.method, self.path_of(request)))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if isinstance(route, Exception):
            raise route
        status, body = route
        if body is None:
            return httpx.Response(status)
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(
            status,
            content=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api(backend):
    client = AdminApiClient(BASE_URL, transport=httpx.MockTransport(backend))
    yield client
    client.close()


@pytest.fixture
def qapp():
    widgets = pytest.importorskip("PyQt6.QtWidgets")
    app = widgets.QApplication.instance() or widgets.QApplication([])
    yield app
