"""Poster service - orchestrates background, composition and storage."""

import logging
import threading
import uuid
from dataclasses import replace
from typing import Callable

from .. import config
from ..clients.background import BackgroundGenerator
from ..engine.compositor import Compositor
from ..errors import AssetUnavailable
from ..layout.model import DEFAULT_LAYOUT, LayoutModel
from ..models.fixture import dump_snapshot
from ..models.poster import PosterRecord
from ..models.request import BackgroundSource, CompositionRequest
from ..models.styles import CompositionMode
from ..utils import mime_for, poster_filename, utc_now_iso
from .gallery import GalleryService, require_owner

logger = logging.getLogger(__name__)


def export_filename(request: CompositionRequest) -> str:
    lead = request.lead
    extra = request.match_count - 1 if request.mode == CompositionMode.PROGRAM else 0
    return poster_filename(request.branding.brand_name, lead.home.name, lead.away.name, extra=extra)


class PosterService:
    """Turn composition requests into stored posters."""

    def __init__(
        self,
        compositor: Compositor,
        gallery: GalleryService,
        generator: BackgroundGenerator | None = None,
        layout: LayoutModel = DEFAULT_LAYOUT,
        default_background: str = config.DEFAULT_BACKGROUND_URL,
        now: Callable[[], str] = utc_now_iso,
        new_id: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self.compositor = compositor
        self.gallery = gallery
        self.generator = generator
        self.layout = layout
        self.default_background = default_background
        self._now = now
        self._new_id = new_id

    def resolve_background(
        self,
        owner_id: str,
        request: CompositionRequest,
        cancel: threading.Event | None = None,
    ) -> BackgroundSource:
        """User-chosen background if any, else a generated one, else the stock image.

        A background picked from the gallery is read back (owner checked) and
        passed on inline, so every record stores its own copy.
        """
        chosen = request.background
        if chosen is not None:
            if chosen.ref and self.gallery.blobs.owns(chosen.ref):
                try:
                    data = self.gallery.read_owned_blob(owner_id, chosen.ref)
                except AssetUnavailable as e:
                    logger.warning(f"Gallery background gone, using stock image: {e}")
                    return BackgroundSource(ref=self.default_background)
                return BackgroundSource(data=data, mime_type=mime_for(chosen.ref))
            return chosen
        if self.generator is None:
            return BackgroundSource(ref=self.default_background)

        if request.mode == CompositionMode.PROGRAM:
            image = self.generator.generate_program(request.match_count, request.style, cancel=cancel)
        else:
            image = self.generator.generate(request.lead, request.style, cancel=cancel)
        return BackgroundSource(data=image.data, mime_type=image.mime_type)

    def create(
        self,
        owner_id: str,
        request: CompositionRequest,
        cancel: threading.Event | None = None,
    ) -> PosterRecord:
        """
        Compose one poster and save it to the owner's gallery.

        1. Resolve the background (given, generated or stock)
        2. Compose the 1080x1920 raster
        3. Upload images and save the metadata record

        Returns:
            The saved record (references only, payloads dropped)
        """
        owner_id = require_owner(owner_id)
        background = self.resolve_background(owner_id, request, cancel)
        request = replace(request, background=background)

        poster_bytes = self.compositor.compose(request, self.layout)
        logger.info(f"Composed {request.mode.value} poster ({len(poster_bytes)} bytes)")

        record = PosterRecord(
            id=self._new_id(),
            owner_id=owner_id,
            fixture_snapshot=dump_snapshot(request.fixtures),
            style=request.style,
            mode=request.mode,
            match_date=request.match_date,
            created_at=self._now(),
            background_ref=background.ref,
            background_bytes=background.data,
            background_mime=background.mime_type,
            poster_bytes=poster_bytes,
            filename=export_filename(request),
        )
        self.gallery.save(record)
        return record

    def create_all(
        self,
        owner_id: str,
        requests: list[CompositionRequest],
        cancel: threading.Event | None = None,
    ) -> list[PosterRecord]:
        """Compose and save each request in order."""
        require_owner(owner_id)
        return [self.create(owner_id, request, cancel=cancel) for request in requests]
