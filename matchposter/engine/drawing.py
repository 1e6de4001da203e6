"""
Drawing helpers for poster rendering.

- Font loading and caching
- Background cover-fit (aspect fill, centred crop)
- Logo contain-fit
- Text fitting and centred text drawing
"""

from PIL import Image, ImageDraw, ImageFont

from .. import config

# Cache stores: size -> font
_font_cache: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}


def load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Load the poster font at a pixel size, with caching.

    Candidates from FONT_CANDIDATES are tried in order; Pillow's bundled
    default font is used when none is available.
    """
    if size in _font_cache:
        return _font_cache[size]

    for path in config.FONT_CANDIDATES:
        try:
            font = ImageFont.truetype(path, size=size)
        except OSError:
            continue
        _font_cache[size] = font
        return font

    # Not cached: a font file may be installed later in the process
    return ImageFont.load_default(size=size)


def fit_cover(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    """
    Scale an image to fully cover `size` and crop the centre.

    Args:
        img: Source image
        size: Target (width, height)

    Returns:
        Image of exactly `size`
    """
    base_w, base_h = size
    scale = max(base_w / img.width, base_h / img.height)
    new_w = max(base_w, round(img.width * scale))
    new_h = max(base_h, round(img.height * scale))
    img = img.resize((new_w, new_h), Image.LANCZOS)

    left = (new_w - base_w) // 2
    top = (new_h - base_h) // 2
    return img.crop((left, top, left + base_w, top + base_h))


def fit_contain(img: Image.Image, max_w: int, max_h: int) -> Image.Image:
    """Scale an image to fit inside max_w x max_h, keeping its aspect ratio."""
    ratio = min(max_w / img.width, max_h / img.height)
    new_w = max(1, round(img.width * ratio))
    new_h = max(1, round(img.height * ratio))
    return img.resize((new_w, new_h), Image.LANCZOS)


def text_size(draw: ImageDraw.ImageDraw, text: str, font) -> tuple[int, int, int, int]:
    return draw.textbbox((0, 0), text, font=font)


def fitted_font(draw: ImageDraw.ImageDraw, text: str, size: int, max_width: int, min_size: int = 10):
    """Shrink the font until `text` fits in max_width (or min_size is reached)."""
    current = size
    font = load_font(current)
    while current > min_size:
        left, _, right, _ = text_size(draw, text, font)
        if right - left <= max_width:
            break
        current -= 2
        font = load_font(current)
    return font


def draw_centered_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    box: tuple[int, int, int, int],
    font,
    fill: tuple[int, int, int, int],
) -> None:
    """Draw `text` centred horizontally and vertically within box."""
    left, top, right, bottom = box
    tl, tt, tr, tb = text_size(draw, text, font)
    x = (left + right) / 2 - (tr - tl) / 2 - tl
    y = (top + bottom) / 2 - (tb - tt) / 2 - tt
    draw.text((x, y), text, font=font, fill=fill)
