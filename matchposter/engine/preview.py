"""Cheap preview renderer.

Reads the same scene as the compositor but emits percentage-positioned
element descriptions for the client to lay out, and can draw a small
thumbnail without any network fetch (logos become placeholders).
"""

from typing import Any

from .. import config
from ..clients.images import DataUriStrategy, ImageLoader, InlineStrategy
from ..layout.model import DEFAULT_LAYOUT, LayoutModel
from ..models.request import CompositionRequest
from .compositor import Compositor, background_source
from .scene import build_scene


class PreviewRenderer:
    """Interactive preview for a composition request."""

    def __init__(self, width: int = config.PREVIEW_WIDTH, overlay_alpha: float = 0.4):
        self.width = width
        self.height = round(width * config.POSTER_HEIGHT / config.POSTER_WIDTH)
        self.overlay_alpha = overlay_alpha

    def describe(self, request: CompositionRequest, layout: LayoutModel = DEFAULT_LAYOUT) -> dict[str, Any]:
        """Element list with CSS percentages (font sizes in container-height units)."""
        source = background_source(request)
        return {
            "aspectRatio": f"{config.POSTER_WIDTH}/{config.POSTER_HEIGHT}",
            "background": source if isinstance(source, str) else None,
            "overlay": f"rgba(0,0,0,{self.overlay_alpha})",
            "elements": [
                {
                    "id": element.id,
                    "kind": element.kind.value,
                    "text": element.text,
                    "src": element.source,
                    "color": "rgba({},{},{},{:.2f})".format(*element.color[:3], element.color[3] / 255),
                    "style": element.placement.to_css(),
                }
                for element in build_scene(request, layout)
            ],
        }

    def thumbnail(self, request: CompositionRequest, layout: LayoutModel = DEFAULT_LAYOUT) -> bytes:
        """Low-resolution JPEG using only inline images."""
        compositor = Compositor(
            loader=ImageLoader([InlineStrategy(), DataUriStrategy()]),
            size=(self.width, self.height),
            quality=70,
            overlay_alpha=self.overlay_alpha,
        )
        return compositor.compose(request, layout)
