"""Composition request - what the compositor is asked to draw."""

from dataclasses import dataclass, field

from .. import config
from ..errors import InvalidRequest
from .fixture import Fixture
from .styles import CompositionMode, RenderStyle


@dataclass(frozen=True)
class Branding:
    """Owner branding drawn in the footer."""

    logo_url: str | None = config.DEFAULT_OWNER_LOGO_URL
    address: str = config.DEFAULT_OWNER_ADDRESS
    brand_name: str = config.BRAND_NAME


@dataclass(frozen=True)
class BackgroundSource:
    """A background given by reference (URL / blob ref) or as inline bytes."""

    ref: str | None = None
    data: bytes | None = None
    mime_type: str = "image/jpeg"

    def __post_init__(self):
        if (self.ref is None) == (self.data is None):
            raise InvalidRequest("Background needs exactly one of ref or data")

    @property
    def is_inline(self) -> bool:
        return self.data is not None


@dataclass(frozen=True)
class ProgramBounds:
    """How many same-date fixtures make a program poster."""

    min_fixtures: int = config.PROGRAM_MIN_FIXTURES
    max_fixtures: int = config.PROGRAM_MAX_FIXTURES

    def __post_init__(self):
        if self.min_fixtures < 2 or self.max_fixtures < self.min_fixtures:
            raise ValueError(f"Invalid program bounds {self.min_fixtures}-{self.max_fixtures}")

    def accepts(self, count: int) -> bool:
        return self.min_fixtures <= count <= self.max_fixtures


@dataclass(frozen=True)
class CompositionRequest:
    """One poster: a fixture (classic) or same-date fixtures (program)."""

    fixtures: tuple[Fixture, ...]
    style: RenderStyle = RenderStyle.STADIUM
    mode: CompositionMode = CompositionMode.CLASSIC
    background: BackgroundSource | None = None
    branding: Branding = field(default_factory=Branding)
    bounds: ProgramBounds = field(default_factory=ProgramBounds)

    def __post_init__(self):
        if not self.fixtures:
            raise InvalidRequest("At least one fixture is required")
        if self.mode == CompositionMode.CLASSIC and len(self.fixtures) != 1:
            raise InvalidRequest(f"Classic mode takes one fixture, got {len(self.fixtures)}")
        if self.mode == CompositionMode.PROGRAM:
            dates = {f.date for f in self.fixtures}
            if len(dates) != 1:
                raise InvalidRequest(f"Program fixtures must share one date, got {sorted(dates)}")
            if not self.bounds.accepts(len(self.fixtures)):
                raise InvalidRequest(
                    f"Program mode takes {self.bounds.min_fixtures}-{self.bounds.max_fixtures} "
                    f"fixtures, got {len(self.fixtures)}"
                )

    @property
    def match_count(self) -> int:
        return len(self.fixtures)

    @property
    def match_date(self) -> str:
        return self.fixtures[0].date

    @property
    def lead(self) -> Fixture:
        return self.fixtures[0]


def plan_requests(
    fixtures: list[Fixture],
    style: RenderStyle = RenderStyle.STADIUM,
    mode: CompositionMode = CompositionMode.CLASSIC,
    background: BackgroundSource | None = None,
    branding: Branding | None = None,
    bounds: ProgramBounds | None = None,
) -> list[CompositionRequest]:
    """Split a selection into poster requests.

    Classic mode gives one request per fixture. Program mode groups fixtures
    by date (caller order kept inside each group); groups outside the bounds
    fall back to one classic request per fixture.
    """
    branding = branding or Branding()
    bounds = bounds or ProgramBounds()

    def classic(fixture: Fixture) -> CompositionRequest:
        return CompositionRequest(
            fixtures=(fixture,),
            style=style,
            mode=CompositionMode.CLASSIC,
            background=background,
            branding=branding,
            bounds=bounds,
        )

    if mode == CompositionMode.CLASSIC:
        return [classic(f) for f in fixtures]

    groups: dict[str, list[Fixture]] = {}
    for fixture in fixtures:
        groups.setdefault(fixture.date, []).append(fixture)

    requests = []
    for group in groups.values():
        if bounds.accepts(len(group)):
            requests.append(CompositionRequest(
                fixtures=tuple(group),
                style=style,
                mode=CompositionMode.PROGRAM,
                background=background,
                branding=branding,
                bounds=bounds,
            ))
        else:
            requests.extend(classic(f) for f in group)
    return requests
