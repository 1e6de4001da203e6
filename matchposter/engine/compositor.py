"""Final raster renderer - draws a composition request at export resolution."""

import logging
from io import BytesIO

from PIL import Image, ImageDraw

from .. import config
from ..clients.images import ImageLoader, ImageSource
from ..errors import AssetUnavailable, SurfaceUnavailable
from ..layout.model import DEFAULT_LAYOUT, LayoutModel
from ..models.request import CompositionRequest
from .drawing import draw_centered_text, fit_contain, fit_cover, fitted_font
from .scene import ElementKind, SceneElement, build_scene

logger = logging.getLogger(__name__)


def background_source(request: CompositionRequest) -> ImageSource | None:
    if request.background is None:
        return None
    if request.background.is_inline:
        return request.background.data
    return request.background.ref


class Compositor:
    """Renders posters: background, dark overlay, layout elements, footer.

    A missing background or logo degrades to a fallback colour or a
    placeholder shape; only an unusable drawing surface aborts composition.
    """

    def __init__(
        self,
        loader: ImageLoader,
        size: tuple[int, int] = (config.POSTER_WIDTH, config.POSTER_HEIGHT),
        quality: int = config.POSTER_JPEG_QUALITY,
        overlay_alpha: float = 0.4,
        fallback_color: tuple[int, int, int] = (0, 0, 0),
    ):
        self.loader = loader
        self.size = size
        self.quality = quality
        self.overlay_alpha = overlay_alpha
        self.fallback_color = fallback_color

    def compose(self, request: CompositionRequest, layout: LayoutModel = DEFAULT_LAYOUT) -> bytes:
        """Render the request and serialize it to JPEG bytes."""
        image = self.compose_image(request, layout)
        buffer = BytesIO()
        image.save(buffer, format="JPEG", quality=self.quality)
        return buffer.getvalue()

    def compose_image(self, request: CompositionRequest, layout: LayoutModel = DEFAULT_LAYOUT) -> Image.Image:
        """Render the request to an RGB image of `self.size`."""
        surface = self._new_surface()
        self._draw_background(surface, background_source(request))

        overlay = Image.new("RGBA", self.size, (0, 0, 0, round(255 * self.overlay_alpha)))
        surface = Image.alpha_composite(surface, overlay).convert("RGB")

        draw = ImageDraw.Draw(surface, "RGBA")
        # build_scene puts the footer last, so branding ends up on top
        for element in build_scene(request, layout):
            if element.kind == ElementKind.TEXT:
                self._draw_text(draw, element)
            elif element.kind == ElementKind.MARK:
                self._draw_mark(surface, draw, element)
            else:
                self._draw_divider(draw, element)
        return surface

    def _new_surface(self) -> Image.Image:
        try:
            return Image.new("RGBA", self.size, self.fallback_color + (255,))
        except (MemoryError, ValueError) as e:
            raise SurfaceUnavailable(f"Cannot allocate {self.size[0]}x{self.size[1]} surface: {e}") from e

    def _draw_background(self, surface: Image.Image, source: ImageSource | None) -> None:
        if source is None:
            return
        try:
            background = self.loader.load(source).convert("RGBA")
        except AssetUnavailable as e:
            logger.warning(f"Background unavailable, using fallback colour: {e}")
            return
        surface.paste(fit_cover(background, self.size), (0, 0))

    def _box(self, element: SceneElement) -> tuple[int, int, int, int]:
        return element.placement.to_box(*self.size)

    def _draw_text(self, draw: ImageDraw.ImageDraw, element: SceneElement) -> None:
        if not element.text:
            return
        box = self._box(element)
        font = fitted_font(
            draw,
            element.text,
            element.placement.font_px(self.size[1]),
            max_width=box[2] - box[0],
        )
        draw_centered_text(draw, element.text, box, font, element.color)

    def _draw_mark(self, surface: Image.Image, draw: ImageDraw.ImageDraw, element: SceneElement) -> None:
        left, top, right, bottom = self._box(element)
        try:
            logo = self.loader.load(element.source).convert("RGBA")
        except AssetUnavailable as e:
            if not element.placeholder:
                logger.debug(f"Skipping {element.id}: {e}")
                return
            logger.warning(f"Logo unavailable for {element.id}, drawing placeholder: {e}")
            radius = min(right - left, bottom - top) * 0.2
            cx, cy = (left + right) / 2, (top + bottom) / 2
            draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=element.color)
            return

        logo = fit_contain(logo, right - left, bottom - top)
        x = left + (right - left - logo.width) // 2
        y = top + (bottom - top - logo.height) // 2
        surface.paste(logo, (x, y), logo)

    def _draw_divider(self, draw: ImageDraw.ImageDraw, element: SceneElement) -> None:
        left, top, right, bottom = self._box(element)
        bottom = max(bottom, top + 2)
        draw.rectangle((left, top, right, bottom - 1), fill=element.color)
