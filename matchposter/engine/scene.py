"""Scene building - what to draw where, independent of the renderer."""

from dataclasses import dataclass
from enum import Enum

from ..layout import model as lm
from ..layout.model import DEFAULT_LAYOUT, LayoutModel, Placement
from ..models.request import CompositionRequest
from ..models.styles import CompositionMode
from ..utils import long_date, short_date

WHITE = (255, 255, 255, 255)
SOFT_WHITE = (255, 255, 255, 230)
DIVIDER_COLOR = (255, 255, 255, 128)


class ElementKind(str, Enum):
    TEXT = "text"
    MARK = "mark"
    DIVIDER = "divider"


@dataclass(frozen=True)
class SceneElement:
    id: str
    kind: ElementKind
    placement: Placement
    text: str | None = None
    source: str | None = None
    color: tuple[int, int, int, int] = WHITE
    placeholder: bool = True     # draw a filled shape when the mark fails to load


def build_scene(request: CompositionRequest, layout: LayoutModel = DEFAULT_LAYOUT) -> list[SceneElement]:
    """Resolve every element of the poster. Footer elements come last."""
    placements = layout.elements(request.match_count)
    if request.mode == CompositionMode.PROGRAM:
        content = _program_content(request)
    else:
        content = _classic_content(request)
    content.update(_footer_content(request))

    scene = []
    for element_id, placement in placements.items():
        kind, value, color, placeholder = content[element_id]
        scene.append(SceneElement(
            id=element_id,
            kind=kind,
            placement=placement,
            text=value if kind == ElementKind.TEXT else None,
            source=value if kind == ElementKind.MARK else None,
            color=color,
            placeholder=placeholder,
        ))
    return scene


def _text(value: str, color=WHITE):
    return (ElementKind.TEXT, value, color, False)


def _mark(source: str | None, placeholder: bool = True):
    return (ElementKind.MARK, source, WHITE, placeholder)


def _classic_content(request: CompositionRequest) -> dict:
    fixture = request.lead
    return {
        lm.DATE: _text(long_date(fixture.date)),
        lm.TIME: _text(fixture.time, SOFT_WHITE),
        lm.HOME_MARK: _mark(fixture.home.logo_url),
        lm.AWAY_MARK: _mark(fixture.away.logo_url),
        lm.SEPARATOR: _text("VS"),
        lm.HOME_NAME: _text(fixture.home.name.upper()),
        lm.AWAY_NAME: _text(fixture.away.name.upper()),
    }


def _program_content(request: CompositionRequest) -> dict:
    content = {lm.HEADER_DATE: _text(short_date(request.match_date))}
    # Caller order is kept: row i is fixtures[i]
    for i, fixture in enumerate(request.fixtures):
        content[lm.row_element(i, lm.HOME_MARK)] = _mark(fixture.home.logo_url)
        content[lm.row_element(i, lm.HOME_NAME)] = _text(fixture.home.name.upper())
        content[lm.row_element(i, lm.TIME)] = _text(fixture.time, SOFT_WHITE)
        content[lm.row_element(i, lm.AWAY_NAME)] = _text(fixture.away.name.upper())
        content[lm.row_element(i, lm.AWAY_MARK)] = _mark(fixture.away.logo_url)
        content[lm.row_element(i, lm.DIVIDER)] = (ElementKind.DIVIDER, None, DIVIDER_COLOR, False)
    return content


def _footer_content(request: CompositionRequest) -> dict:
    branding = request.branding
    return {
        lm.FOOTER_MARK: _mark(branding.logo_url, placeholder=False),
        lm.FOOTER_ADDRESS: _text((branding.address or "").upper(), SOFT_WHITE),
    }
