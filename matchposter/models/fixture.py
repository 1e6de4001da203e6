"""Fixture model - one scheduled match selected for a poster."""

import json
from dataclasses import asdict, dataclass
from typing import Any

from ..errors import InvalidRequest
from ..utils import parse_match_date


@dataclass(frozen=True)
class Team:
    """One side of a fixture."""

    name: str
    logo_url: str | None = None


@dataclass(frozen=True)
class Fixture:
    """A single sporting event. Immutable once selected for composition."""

    id: str
    home: Team
    away: Team
    date: str            # YYYY-MM-DD, the event's own calendar date
    time: str            # local display string, e.g. "19:00"
    venue: str = ""
    competition: str = ""

    def __post_init__(self):
        try:
            parse_match_date(self.date)
        except (TypeError, ValueError) as e:
            raise InvalidRequest(f"Invalid fixture date {self.date!r}: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Fixture":
        """Build a fixture from the external fixture-data shape.

        Accepts both {"home": {...}} and {"homeTeam": {"name", "logoUrl"}}.
        """
        if not isinstance(data, dict):
            raise InvalidRequest(f"Fixture must be an object, got {type(data).__name__}")
        home = data.get("home") or data.get("homeTeam")
        away = data.get("away") or data.get("awayTeam")
        if not home or not away:
            raise InvalidRequest("Fixture requires home and away teams")
        for key in ("id", "date"):
            if not data.get(key):
                raise InvalidRequest(f"Fixture missing '{key}' field")
        for key in ("date", "time", "venue", "competition"):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise InvalidRequest(f"Fixture field '{key}' must be a string")

        return cls(
            id=str(data["id"]),
            home=_team_from_dict(home),
            away=_team_from_dict(away),
            date=data["date"],
            time=data.get("time") or "",
            venue=data.get("venue") or "",
            competition=data.get("competition") or "",
        )


def _team_from_dict(data: dict[str, Any]) -> Team:
    if not isinstance(data, dict):
        raise InvalidRequest("Team must be an object")
    name = data.get("name")
    if not name or not isinstance(name, str):
        raise InvalidRequest("Team requires a name")
    logo_url = data.get("logo_url") or data.get("logoUrl")
    if logo_url is not None and not isinstance(logo_url, str):
        raise InvalidRequest(f"Invalid logo url for {name}")
    return Team(name=name, logo_url=logo_url)


def dump_snapshot(fixtures: list[Fixture] | tuple[Fixture, ...]) -> str:
    return json.dumps(
        [f.to_dict() for f in fixtures],
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def load_snapshot(snapshot: str) -> list[Fixture]:
    return [Fixture.from_dict(item) for item in json.loads(snapshot)]
