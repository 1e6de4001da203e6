from io import BytesIO

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.response import StreamingBody
from botocore.stub import Stubber

from matchposter.errors import AssetUnavailable, IndexUnavailable, StorageUnavailable
from matchposter.storage import DynamoMetadataStore, S3BlobStore


@pytest.fixture()
def s3():
    client = boto3.client(
        "s3",
        region_name="eu-west-3",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


def test_put_returns_reference(s3):
    client, stubber = s3
    stubber.add_response(
        "put_object",
        {},
        {"Bucket": "test-bucket", "Key": "posters/a/p1/poster.jpg", "Body": b"jpeg", "ContentType": "image/jpeg"},
    )
    store = S3BlobStore("test-bucket", client=client)

    ref = store.put("posters/a/p1/poster.jpg", b"jpeg", "image/jpeg")

    assert ref == "s3://test-bucket/posters/a/p1/poster.jpg"
    assert store.owns(ref)
    assert not store.owns("s3://other-bucket/posters/a/p1/poster.jpg")


def test_get_reads_body(s3):
    client, stubber = s3
    stubber.add_response(
        "get_object",
        {"Body": StreamingBody(BytesIO(b"jpeg"), 4)},
        {"Bucket": "test-bucket", "Key": "posters/a/p1/poster.jpg"},
    )
    store = S3BlobStore("test-bucket", client=client)

    assert store.get("s3://test-bucket/posters/a/p1/poster.jpg") == b"jpeg"


def test_get_missing_blob(s3):
    client, stubber = s3
    stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)
    store = S3BlobStore("test-bucket", client=client)

    with pytest.raises(AssetUnavailable):
        store.get("s3://test-bucket/posters/a/p1/poster.jpg")


def test_delete_missing_blob_is_not_an_error(s3):
    client, stubber = s3
    stubber.add_client_error("delete_object", service_error_code="NoSuchKey", http_status_code=404)
    store = S3BlobStore("test-bucket", client=client)

    store.delete("s3://test-bucket/posters/a/p1/poster.jpg")


def test_delete_failure_is_reported(s3):
    client, stubber = s3
    stubber.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)
    store = S3BlobStore("test-bucket", client=client)

    with pytest.raises(StorageUnavailable):
        store.delete("s3://test-bucket/posters/a/p1/poster.jpg")


def test_foreign_reference_is_rejected(s3):
    client, _ = s3
    store = S3BlobStore("test-bucket", client=client)

    with pytest.raises(ValueError):
        store.key_for("https://images.example.com/bg.jpg")


def test_download_url_names_the_file(s3):
    client, _ = s3
    store = S3BlobStore("test-bucket", client=client)

    url = store.download_url("s3://test-bucket/posters/a/p1/poster.jpg", "All Sports - PSG vs Marseille.jpg")

    assert "posters/a/p1/poster.jpg" in url
    assert "response-content-disposition=attachment" in url


class FakeTable:
    def __init__(self, pages=None, error_code=None):
        self.pages = list(pages or [])
        self.error_code = error_code
        self.calls = []

    def _maybe_fail(self, operation):
        if self.error_code:
            raise ClientError({"Error": {"Code": self.error_code, "Message": "boom"}}, operation)

    def _page(self, **kwargs):
        self.calls.append(kwargs)
        return self.pages.pop(0)

    def put_item(self, Item):
        self._maybe_fail("PutItem")
        self.calls.append(Item)

    def get_item(self, Key):
        self._maybe_fail("GetItem")
        return self._page(Key=Key)

    def delete_item(self, Key, ReturnValues):
        self._maybe_fail("DeleteItem")
        return self._page(Key=Key, ReturnValues=ReturnValues)

    def query(self, **kwargs):
        self._maybe_fail("Query")
        return self._page(**kwargs)

    def scan(self, **kwargs):
        self._maybe_fail("Scan")
        return self._page(**kwargs)


def test_query_follows_pagination():
    table = FakeTable(pages=[
        {"Items": [{"id": "p1"}], "LastEvaluatedKey": {"id": "p1"}},
        {"Items": [{"id": "p2"}]},
    ])
    store = DynamoMetadataStore(index_name="owner-match-date-index", table=table)

    items = store.query_owner("owner-a", "2025-12-06")

    assert [i["id"] for i in items] == ["p1", "p2"]
    assert table.calls[0]["IndexName"] == "owner-match-date-index"
    assert table.calls[1]["ExclusiveStartKey"] == {"id": "p1"}


@pytest.mark.parametrize("code", ["ValidationException", "ResourceNotFoundException"])
def test_query_reports_missing_index(code):
    store = DynamoMetadataStore(table=FakeTable(error_code=code))

    with pytest.raises(IndexUnavailable):
        store.query_owner("owner-a", "2025-12-06")


def test_query_other_failures_are_storage_errors():
    store = DynamoMetadataStore(table=FakeTable(error_code="ProvisionedThroughputExceededException"))

    with pytest.raises(StorageUnavailable):
        store.query_owner("owner-a", "2025-12-06")


def test_scan_yields_every_page():
    table = FakeTable(pages=[
        {"Items": [{"id": "p1"}, {"id": "p2"}], "LastEvaluatedKey": {"id": "p2"}},
        {"Items": [{"id": "p3"}]},
    ])

    assert [i["id"] for i in DynamoMetadataStore(table=table).scan()] == ["p1", "p2", "p3"]


def test_delete_reports_whether_item_existed():
    table = FakeTable(pages=[{"Attributes": {"id": "p1"}}, {}])
    store = DynamoMetadataStore(table=table)

    assert store.delete("p1") is True
    assert store.delete("p1") is False


def test_get_missing_item():
    store = DynamoMetadataStore(table=FakeTable(pages=[{}]))

    assert store.get("p1") is None


def test_put_failure_is_storage_error():
    store = DynamoMetadataStore(table=FakeTable(error_code="InternalServerError"))

    with pytest.raises(StorageUnavailable):
        store.put({"id": "p1"})
