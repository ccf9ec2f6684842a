"""
Test configuration and fixtures.

Upstream HTTP traffic is served by an in-process ``httpx.MockTransport`` so
that unit tests never touch the network. Tests marked ``integration`` start
the real server process and are deselected by default.
"""

import io
from collections.abc import Callable

import httpx
import pytest
import pytest_asyncio
from PIL import Image

from macrostrat_mcp.config import default_config
from macrostrat_mcp.core.client import MacrostratClient
from macrostrat_mcp.dispatch import Dispatcher

Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """
    Canned responses keyed by URL path, plus a log of every request.

    Parameters
    ----------
    routes : dict[str, Handler or httpx.Response]
        Path (e.g. "/api/units") to a response or a request handler
    """

    def __init__(self) -> None:
        self.routes: dict[str, Handler | httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, response: Handler | httpx.Response) -> None:
        self.routes[path] = response

    def add_json(self, path: str, body: object, status_code: int = 200) -> None:
        self.routes[path] = httpx.Response(status_code, json=body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404)
        if callable(route):
            return route(request)
        return route

    @property
    def urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]


def envelope(data: list, refs: dict | None = None) -> dict:
    """Wrap ``data`` the way the Macrostrat API does."""
    success: dict = {"v": 2, "license": "CC-BY 4.0", "data": data}
    if refs is not None:
        success["refs"] = refs
    return {"success": success}


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG tile.

    Returns
    -------
    bytes
        Encoded 256x256 PNG
    """
    buffer = io.BytesIO()
    Image.new("RGBA", (256, 256), (200, 120, 60, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def client(config, upstream):
    async with MacrostratClient(config, transport=httpx.MockTransport(upstream)) as client:
        yield client


@pytest.fixture
def geocoded() -> list[str]:
    """Place names passed to the fake geocoder."""
    return []


@pytest.fixture
def dispatcher(config, client, geocoded) -> Dispatcher:
    def geocoder(place: str) -> tuple[float, float]:
        geocoded.append(place)
        return 40.015, -105.27

    return Dispatcher(config, client, geocoder=geocoder)
