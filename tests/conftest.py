import os
from io import BytesIO

import pytest
from PIL import Image

# Keep boto3 and the generator off real credentials during tests
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-3")

from matchposter.clients.base import GeneratedImage  # noqa: E402
from matchposter.clients.images import BlobStoreStrategy, DataUriStrategy, ImageLoader, InlineStrategy  # noqa: E402
from matchposter.errors import AssetUnavailable, IndexUnavailable, StorageUnavailable  # noqa: E402
from matchposter.models import Fixture, Team  # noqa: E402


class FakeClock:
    """Monotonic clock whose sleep just advances time."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class InMemoryBlobStore:
    def __init__(self, bucket: str = "test-bucket"):
        self.bucket = bucket
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.deleted: list[str] = []
        self.fail_deletes = False
        self.fail_put_suffix: str | None = None

    def ref_for(self, key: str) -> str:
        return f"s3://{self.bucket}/{key}"

    def owns(self, ref: str) -> bool:
        return ref.startswith(f"s3://{self.bucket}/")

    def key_for(self, ref: str) -> str:
        if not self.owns(ref):
            raise ValueError(f"Not a reference in bucket {self.bucket}: {ref}")
        return ref[len(f"s3://{self.bucket}/"):]

    def put(self, key: str, data: bytes, content_type: str) -> str:
        if self.fail_put_suffix and key.endswith(self.fail_put_suffix):
            raise StorageUnavailable(f"Failed to upload {key}")
        ref = self.ref_for(key)
        self.objects[ref] = (data, content_type)
        return ref

    def get(self, ref: str) -> bytes:
        if ref not in self.objects:
            raise AssetUnavailable(f"Blob not found: {ref}")
        return self.objects[ref][0]

    def delete(self, ref: str) -> None:
        if self.fail_deletes:
            raise StorageUnavailable(f"Failed to delete {ref}")
        self.objects.pop(ref, None)
        self.deleted.append(ref)


class InMemoryMetadataStore:
    def __init__(self):
        self.items: dict[str, dict] = {}
        self.index_available = True
        self.fail_puts = False
        self.queries = 0
        self.scans = 0

    def put(self, item: dict) -> None:
        if self.fail_puts:
            raise StorageUnavailable(f"Failed to save poster {item['id']}")
        self.items[item["id"]] = dict(item)

    def get(self, poster_id: str):
        item = self.items.get(poster_id)
        return dict(item) if item else None

    def delete(self, poster_id: str) -> bool:
        return self.items.pop(poster_id, None) is not None

    def query_owner(self, owner_id: str, min_match_date: str) -> list[dict]:
        self.queries += 1
        if not self.index_available:
            raise IndexUnavailable("Index owner-match-date-index unavailable: ValidationException")
        return [
            dict(item) for item in self.items.values()
            if item["owner_id"] == owner_id and item["match_date"] >= min_match_date
        ]

    def scan(self):
        self.scans += 1
        yield from (dict(item) for item in list(self.items.values()))


class ScriptedTransport:
    """Replays a list of outcomes; exceptions are raised, images returned."""

    def __init__(self, outcomes, clock: FakeClock | None = None):
        self.outcomes = list(outcomes)
        self.clock = clock
        self.prompts = []
        self.dispatch_times: list[float] = []

    def dispatch(self, prompt):
        self.prompts.append(prompt)
        if self.clock is not None:
            self.dispatch_times.append(self.clock.time())
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def png_bytes(color=(200, 30, 30), size=(64, 64), fmt="PNG") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def blobs():
    return InMemoryBlobStore()


@pytest.fixture()
def metadata():
    return InMemoryMetadataStore()


@pytest.fixture()
def offline_loader(blobs):
    """Loader that never touches the network."""
    return ImageLoader([InlineStrategy(), DataUriStrategy(), BlobStoreStrategy(blobs)])


@pytest.fixture()
def generated_image():
    return GeneratedImage(data=png_bytes((20, 40, 160)), mime_type="image/png")


@pytest.fixture()
def psg_marseille():
    return Fixture(
        id="1",
        home=Team("PSG"),
        away=Team("Marseille"),
        date="2025-12-06",
        time="19:00",
        competition="Ligue 1",
    )


@pytest.fixture()
def lyon_monaco():
    return Fixture(
        id="2",
        home=Team("Lyon"),
        away=Team("Monaco"),
        date="2025-12-06",
        time="21:00",
        competition="Ligue 1",
    )
