import base64
from io import BytesIO

import pytest
from conftest import png_bytes
from PIL import Image

from matchposter.engine import Compositor, ElementKind, build_scene
from matchposter.errors import SurfaceUnavailable
from matchposter.layout import DEFAULT_LAYOUT, row_element
from matchposter.models import BackgroundSource, Branding, CompositionMode, CompositionRequest, Fixture, Team


@pytest.fixture()
def compositor(offline_loader):
    return Compositor(loader=offline_loader)


def classic_request(fixture, background=None):
    return CompositionRequest(
        fixtures=(fixture,),
        background=background,
        branding=Branding(logo_url=None, address="12 rue du Stade, Lyon"),
    )


def program_request(*fixtures):
    return CompositionRequest(
        fixtures=tuple(fixtures),
        mode=CompositionMode.PROGRAM,
        branding=Branding(logo_url=None, address="12 rue du Stade, Lyon"),
    )


def test_classic_scene_content(psg_marseille):
    scene = {e.id: e for e in build_scene(classic_request(psg_marseille))}

    assert scene["date"].text == "SAMEDI 6 DÉCEMBRE"
    assert scene["time"].text == "19:00"
    assert scene["separator"].text == "VS"
    assert scene["home_name"].text == "PSG"
    assert scene["away_name"].text == "MARSEILLE"
    assert scene["footer_address"].text == "12 RUE DU STADE, LYON"
    assert scene["home_mark"].kind == ElementKind.MARK


def test_program_scene_rows_follow_caller_order(psg_marseille, lyon_monaco):
    scene = build_scene(program_request(psg_marseille, lyon_monaco))
    by_id = {e.id: e for e in scene}

    assert by_id["header_date"].text == "06/12/2025"
    assert by_id[row_element(0, "home_name")].text == "PSG"
    assert by_id[row_element(0, "time")].text == "19:00"
    assert by_id[row_element(1, "home_name")].text == "LYON"
    assert by_id[row_element(1, "time")].text == "21:00"
    assert [e.id for e in scene if e.kind == ElementKind.DIVIDER] == [row_element(0, "divider")]
    assert scene[-1].id == "footer_address"


def test_output_is_full_size_jpeg(compositor, psg_marseille):
    data = compositor.compose(classic_request(psg_marseille))

    image = Image.open(BytesIO(data))
    assert image.format == "JPEG"
    assert image.size == (1080, 1920)


def test_background_is_darkened_by_overlay(compositor, psg_marseille):
    background = BackgroundSource(data=png_bytes((255, 0, 0)), mime_type="image/png")

    image = compositor.compose_image(classic_request(psg_marseille, background))

    r, g, b = image.getpixel((5, 5))
    assert 140 <= r <= 165
    assert g < 10 and b < 10


def test_unloadable_background_uses_fallback_colour(offline_loader, psg_marseille):
    compositor = Compositor(loader=offline_loader, fallback_color=(0, 0, 200))
    background = BackgroundSource(ref="https://images.example.com/missing.jpg")

    image = compositor.compose_image(classic_request(psg_marseille, background))

    r, g, b = image.getpixel((5, 5))
    assert r < 10 and g < 10
    assert 110 <= b <= 130


def test_missing_logo_draws_placeholder(compositor, psg_marseille):
    image = compositor.compose_image(classic_request(psg_marseille))

    home_mark = DEFAULT_LAYOUT.resolve("home_mark", 1)
    left, top, right, bottom = home_mark.to_box(1080, 1920)
    centre = ((left + right) // 2, (top + bottom) // 2)
    assert min(image.getpixel(centre)) > 240


def test_team_logo_is_drawn_from_inline_source(offline_loader):
    logo = "data:image/png;base64," + base64.b64encode(png_bytes((0, 200, 0))).decode()
    fixture = Fixture(
        id="9",
        home=Team("Nantes", logo_url=logo),
        away=Team("Rennes"),
        date="2025-12-07",
        time="15:00",
    )
    image = Compositor(loader=offline_loader).compose_image(classic_request(fixture))

    left, top, right, bottom = DEFAULT_LAYOUT.resolve("home_mark", 1).to_box(1080, 1920)
    r, g, b = image.getpixel(((left + right) // 2, (top + bottom) // 2))
    assert g > 150 and r < 60


def test_program_divider_is_drawn(compositor, psg_marseille, lyon_monaco):
    image = compositor.compose_image(program_request(psg_marseille, lyon_monaco))

    divider = DEFAULT_LAYOUT.resolve(row_element(0, "divider"), 2)
    _, top, _, _ = divider.to_box(1080, 1920)
    value = image.getpixel((540, top))[0]
    assert 100 <= value <= 160


def test_unusable_surface_is_fatal(offline_loader, psg_marseille):
    compositor = Compositor(loader=offline_loader, size=(-1, 10))

    with pytest.raises(SurfaceUnavailable):
        compositor.compose(classic_request(psg_marseille))
