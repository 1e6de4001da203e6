from urllib.parse import quote

import pytest
import requests
from conftest import png_bytes

from matchposter.clients.images import HttpStrategy, ImageLoader, ProxyStrategy
from matchposter.errors import AssetUnavailable

LOGO = "https://cdn.example.com/logos/psg.png"
PROXIED = "https://wsrv.nl/?url=" + quote(LOGO, safe="")


class FakeResponse:
    def __init__(self, status_code=200, content=b""):
        self.status_code = status_code
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Answers GETs from a url -> response (or exception) table; unknown urls 404."""

    def __init__(self, routes):
        self.routes = routes
        self.urls = []

    def get(self, url, headers=None, timeout=None):
        self.urls.append(url)
        outcome = self.routes.get(url, FakeResponse(404))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def http_loader(session):
    return ImageLoader([HttpStrategy(session=session), ProxyStrategy("https://wsrv.nl/?url=", session=session)])


@pytest.mark.parametrize("direct", [
    requests.ConnectionError("connection reset"),
    FakeResponse(403),
])
def test_direct_failure_falls_back_to_proxy(direct):
    session = FakeSession({LOGO: direct, PROXIED: FakeResponse(200, png_bytes((0, 80, 160)))})

    image = http_loader(session).load(LOGO)

    assert image.size == (64, 64)
    assert image.convert("RGB").getpixel((0, 0)) == (0, 80, 160)
    assert session.urls == [LOGO, PROXIED]


def test_direct_success_skips_proxy():
    session = FakeSession({LOGO: FakeResponse(200, png_bytes())})

    http_loader(session).load(LOGO)

    assert session.urls == [LOGO]


def test_undecodable_direct_body_falls_back_to_proxy():
    session = FakeSession({
        LOGO: FakeResponse(200, b"<html>hotlinking forbidden</html>"),
        PROXIED: FakeResponse(200, png_bytes()),
    })

    assert http_loader(session).load(LOGO).size == (64, 64)
    assert session.urls == [LOGO, PROXIED]


def test_both_routes_failing_raises_asset_unavailable():
    session = FakeSession({LOGO: requests.Timeout("timed out"), PROXIED: FakeResponse(502)})

    with pytest.raises(AssetUnavailable, match="psg.png"):
        http_loader(session).load(LOGO)

    assert session.urls == [LOGO, PROXIED]


def test_proxied_source_is_not_proxied_again():
    session = FakeSession({})

    with pytest.raises(AssetUnavailable):
        http_loader(session).load(PROXIED)

    assert session.urls == [PROXIED]


def test_default_chain_ends_with_direct_then_proxy(blobs):
    loader = ImageLoader.default(blobs=blobs, session=FakeSession({}))

    assert [s.name for s in loader.strategies] == ["inline", "data-uri", "blob-store", "direct", "proxy"]
