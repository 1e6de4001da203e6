"""Gallery service - stores, lists and deletes poster records."""

import logging
from datetime import date
from typing import Callable, Iterable

from ..errors import IndexUnavailable, MissingOwner, PermissionDenied, PosterNotFound, StorageUnavailable
from ..models.poster import PosterRecord
from ..utils import extension_for, today_date

logger = logging.getLogger(__name__)


def require_owner(owner_id: str | None) -> str:
    if not owner_id:
        raise MissingOwner()
    return owner_id


def owner_prefix(owner_id: str) -> str:
    return f"posters/{owner_id}/"


def _parse_items(items: Iterable[dict]) -> list[PosterRecord]:
    """Records for the well-formed items; malformed ones are logged and skipped."""
    records = []
    for item in items:
        try:
            records.append(PosterRecord.from_item(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed poster item {item.get('id', '?')}: {e!r}")
    return records


class GalleryService:
    """Poster persistence across a blob store and a metadata store.

    Records stay visible while their match date is today or later; the
    sweep removes the rest, blobs included.
    """

    def __init__(self, blobs, metadata, today: Callable[[], date] = today_date):
        self.blobs = blobs
        self.metadata = metadata
        self._today = today

    def save(self, record: PosterRecord) -> str:
        """
        Persist a record, uploading inline image payloads first.

        Args:
            record: Record with references and/or inline bytes

        Returns:
            The record id
        """
        owner_id = require_owner(record.owner_id)
        prefix = f"{owner_prefix(owner_id)}{record.id}"
        uploaded = []

        # A failure at any step removes whatever this record already uploaded
        try:
            if record.background_bytes is not None:
                ext = extension_for(record.background_mime)
                record.background_ref = self.blobs.put(
                    f"{prefix}/background.{ext}", record.background_bytes, record.background_mime
                )
                uploaded.append(record.background_ref)
            if record.poster_bytes is not None:
                record.poster_ref = self.blobs.put(f"{prefix}/poster.jpg", record.poster_bytes, "image/jpeg")
                uploaded.append(record.poster_ref)
            self.metadata.put(record.to_item())
        except StorageUnavailable:
            for ref in uploaded:
                self._delete_blob(ref)
            raise

        record.background_bytes = None
        record.poster_bytes = None
        logger.info(f"Saved poster {record.id} for owner {owner_id} ({record.match_date})")
        return record.id

    def read_owned_blob(self, owner_id: str, ref: str) -> bytes:
        """Bytes of a stored blob, provided it sits under the owner's prefix."""
        owner_id = require_owner(owner_id)
        if not self.blobs.key_for(ref).startswith(owner_prefix(owner_id)):
            raise PermissionDenied(f"Blob {ref} belongs to another owner")
        return self.blobs.get(ref)

    def list(self, owner_id: str) -> list[PosterRecord]:
        """Owner's records with a match date on or after today, newest first."""
        owner_id = require_owner(owner_id)
        today = self._today().isoformat()

        try:
            items = self.metadata.query_owner(owner_id, today)
        except IndexUnavailable as e:
            logger.warning(f"Falling back to full scan: {e}")
            items = [item for item in self.metadata.scan() if item.get("owner_id") == owner_id]

        records = _parse_items(
            item for item in items
            if item.get("owner_id") == owner_id and item.get("match_date", "") >= today
        )
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def get(self, owner_id: str, poster_id: str) -> PosterRecord:
        owner_id = require_owner(owner_id)
        item = self.metadata.get(poster_id)
        if item is None:
            raise PosterNotFound(f"Poster {poster_id} not found")
        if item.get("owner_id") != owner_id:
            raise PermissionDenied(f"Poster {poster_id} belongs to another user")
        return PosterRecord.from_item(item)

    def delete(self, owner_id: str, poster_id: str) -> None:
        """Delete blobs (best effort), then the metadata record."""
        record = self.get(owner_id, poster_id)
        self._delete_blobs(record)
        if not self.metadata.delete(poster_id):
            raise PosterNotFound(f"Poster {poster_id} not found")
        logger.info(f"Deleted poster {poster_id}")

    def sweep(self) -> int:
        """Remove every record whose match date has passed. Returns the count."""
        today = self._today().isoformat()
        expired = _parse_items(item for item in self.metadata.scan() if item.get("match_date", "") < today)
        removed = 0
        for record in expired:
            self._delete_blobs(record)
            if self.metadata.delete(record.id):
                removed += 1
        logger.info(f"Retention sweep removed {removed} poster(s) older than {today}")
        return removed

    def _delete_blobs(self, record: PosterRecord) -> None:
        for ref in record.blob_refs:
            if self.blobs.owns(ref):
                self._delete_blob(ref)

    def _delete_blob(self, ref: str) -> None:
        try:
            self.blobs.delete(ref)
        except StorageUnavailable as e:
            logger.warning(f"Blob cleanup failed for {ref}: {e}")
