"""Poster record - persisted result of a composition."""

from dataclasses import dataclass, field
from typing import Any

from .fixture import Fixture, load_snapshot
from .styles import CompositionMode, RenderStyle


@dataclass
class PosterRecord:
    """Gallery entry. Inline bytes only live here until the record is saved."""

    id: str
    owner_id: str
    fixture_snapshot: str        # canonical JSON of the fixtures list
    style: RenderStyle
    mode: CompositionMode
    match_date: str              # YYYY-MM-DD, retention key
    created_at: str              # UTC ISO timestamp
    background_ref: str | None = None
    poster_ref: str | None = None
    filename: str = ""
    background_bytes: bytes | None = field(default=None, repr=False)
    background_mime: str = "image/jpeg"
    poster_bytes: bytes | None = field(default=None, repr=False)

    @property
    def fixtures(self) -> list[Fixture]:
        return load_snapshot(self.fixture_snapshot)

    @property
    def blob_refs(self) -> list[str]:
        return [ref for ref in (self.background_ref, self.poster_ref) if ref]

    def to_item(self) -> dict[str, Any]:
        """Metadata-store document (references only, never raw bytes)."""
        item = {
            "id": self.id,
            "owner_id": self.owner_id,
            "fixture_snapshot": self.fixture_snapshot,
            "style": self.style.value,
            "mode": self.mode.value,
            "match_date": self.match_date,
            "created_at": self.created_at,
            "filename": self.filename,
        }
        if self.background_ref:
            item["background_ref"] = self.background_ref
        if self.poster_ref:
            item["poster_ref"] = self.poster_ref
        return item

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "PosterRecord":
        return cls(
            id=item["id"],
            owner_id=item["owner_id"],
            fixture_snapshot=item["fixture_snapshot"],
            style=RenderStyle(item["style"]),
            mode=CompositionMode(item["mode"]),
            match_date=item["match_date"],
            created_at=item["created_at"],
            background_ref=item.get("background_ref"),
            poster_ref=item.get("poster_ref"),
            filename=item.get("filename", ""),
        )

    def summary(self) -> dict[str, Any]:
        """JSON-friendly view for API responses."""
        return {**self.to_item(), "fixtures": [f.to_dict() for f in self.fixtures]}
