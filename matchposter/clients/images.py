"""Image loading with an ordered chain of fallback strategies.

The default chain is inline bytes -> data URI -> blob store -> direct HTTP ->
image proxy rewrite. Each strategy declares which sources it handles; the
loader tries the applicable ones in order and returns the first image that
decodes.
"""

import logging
from io import BytesIO
from typing import Protocol
from urllib.parse import quote

import requests
from PIL import Image

from .. import config
from ..errors import AssetUnavailable, StorageUnavailable
from ..utils import decode_data_uri

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

ImageSource = str | bytes


class LoaderStrategy(Protocol):
    name: str

    def applies(self, source: ImageSource) -> bool:
        ...

    def fetch(self, source: ImageSource) -> bytes:
        ...


def _is_http(source: ImageSource) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


class InlineStrategy:
    name = "inline"

    def applies(self, source: ImageSource) -> bool:
        return isinstance(source, (bytes, bytearray))

    def fetch(self, source: ImageSource) -> bytes:
        return bytes(source)


class DataUriStrategy:
    name = "data-uri"

    def applies(self, source: ImageSource) -> bool:
        return isinstance(source, str) and source.startswith("data:")

    def fetch(self, source: ImageSource) -> bytes:
        data, _ = decode_data_uri(source)
        return data


class BlobStoreStrategy:
    """Reads gallery images (s3:// references) back from the blob store."""

    name = "blob-store"

    def __init__(self, blobs):
        self.blobs = blobs

    def applies(self, source: ImageSource) -> bool:
        return isinstance(source, str) and self.blobs.owns(source)

    def fetch(self, source: ImageSource) -> bytes:
        return self.blobs.get(source)


class HttpStrategy:
    name = "direct"

    def __init__(self, session: requests.Session | None = None, timeout: int = config.IMAGE_TIMEOUT):
        self.session = session or requests.Session()
        self.timeout = timeout

    def applies(self, source: ImageSource) -> bool:
        return _is_http(source)

    def fetch(self, source: ImageSource) -> bytes:
        response = self.session.get(source, headers={"User-Agent": USER_AGENT}, timeout=self.timeout)
        response.raise_for_status()
        return response.content


class ProxyStrategy(HttpStrategy):
    """Retries an HTTP source through an image proxy (wsrv.nl by default)."""

    name = "proxy"

    def __init__(
        self,
        proxy_base: str = config.IMAGE_PROXY_URL,
        session: requests.Session | None = None,
        timeout: int = config.IMAGE_TIMEOUT,
    ):
        super().__init__(session=session, timeout=timeout)
        self.proxy_base = proxy_base

    def applies(self, source: ImageSource) -> bool:
        return _is_http(source) and not source.startswith(self.proxy_base)

    def rewrite(self, source: str) -> str:
        return f"{self.proxy_base}{quote(source, safe='')}"

    def fetch(self, source: ImageSource) -> bytes:
        return super().fetch(self.rewrite(source))


class ImageLoader:
    """Loads images through an ordered list of strategies."""

    def __init__(self, strategies: list[LoaderStrategy]):
        self.strategies = strategies

    @classmethod
    def default(cls, blobs=None, session: requests.Session | None = None) -> "ImageLoader":
        session = session or requests.Session()
        strategies: list[LoaderStrategy] = [InlineStrategy(), DataUriStrategy()]
        if blobs is not None:
            strategies.append(BlobStoreStrategy(blobs))
        strategies.append(HttpStrategy(session=session))
        strategies.append(ProxyStrategy(session=session))
        return cls(strategies)

    def load(self, source: ImageSource | None) -> Image.Image:
        """Return the decoded image or raise AssetUnavailable."""
        if not source:
            raise AssetUnavailable("No image source")

        label = _describe(source)
        for strategy in self.strategies:
            if not strategy.applies(source):
                continue
            try:
                data = strategy.fetch(source)
                image = Image.open(BytesIO(data))
                image.load()
                return image
            except (requests.RequestException, OSError, ValueError, AssetUnavailable, StorageUnavailable) as e:
                logger.warning(f"Image load via {strategy.name} failed for {label}: {e}")

        raise AssetUnavailable(f"Failed to load image: {label}")


def _describe(source: ImageSource) -> str:
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} inline bytes>"
    if source.startswith("data:"):
        return source[:40] + "..."
    return source
