"""Poster layout model.

Every element is placed with fractions of the surface width/height, so the
preview and the 1080x1920 export read the same numbers. `x` is the horizontal
centre of the element, `y` the top of its vertical band. Text sizes
(`font_scale`) are fractions of the surface height.
"""

from dataclasses import dataclass, field

# Classic element ids
DATE = "date"
TIME = "time"
HOME_MARK = "home_mark"
AWAY_MARK = "away_mark"
SEPARATOR = "separator"
HOME_NAME = "home_name"
AWAY_NAME = "away_name"

# Program element ids (row parts are prefixed with "row<i>.")
HEADER_DATE = "header_date"
ROW_PARTS = (HOME_MARK, HOME_NAME, TIME, AWAY_NAME, AWAY_MARK)
DIVIDER = "divider"

# Footer element ids (all modes)
FOOTER_MARK = "footer_mark"
FOOTER_ADDRESS = "footer_address"


@dataclass(frozen=True)
class Placement:
    x: float
    y: float
    width: float
    height: float
    font_scale: float | None = None

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_box(self, width: int, height: int) -> tuple[int, int, int, int]:
        """Pixel box (left, top, right, bottom) on a surface of the given size."""
        return (
            round(self.left * width),
            round(self.top * height),
            round(self.right * width),
            round(self.bottom * height),
        )

    def font_px(self, height: int) -> int:
        return max(1, round((self.font_scale or 0) * height))

    def to_css(self) -> dict[str, str]:
        """Absolute-positioning style, in percent of the preview container."""
        style = {
            "left": f"{self.left * 100:.3f}%",
            "top": f"{self.top * 100:.3f}%",
            "width": f"{self.width * 100:.3f}%",
            "height": f"{self.height * 100:.3f}%",
        }
        if self.font_scale is not None:
            style["fontSize"] = f"{self.font_scale * 100:.3f}cqh"
        return style

    def scaled(self, factor: float) -> "Placement":
        """Same centre line, band shrunk by `factor` (fonts too)."""
        height = self.height * factor
        return Placement(
            x=self.x,
            y=self.y + (self.height - height) / 2,
            width=self.width * factor,
            height=height,
            font_scale=self.font_scale * factor if self.font_scale is not None else None,
        )


@dataclass(frozen=True)
class ProgramBucket:
    """Row sizing for a given number of fixtures on one poster."""

    row_height: float
    mark_height: float
    mark_width: float
    label_scale: float
    time_scale: float


CLASSIC_ELEMENTS: dict[str, Placement] = {
    DATE: Placement(x=0.5, y=0.08, width=0.9, height=0.035, font_scale=0.0255),
    TIME: Placement(x=0.5, y=0.12, width=0.4, height=0.03, font_scale=0.0219),
    HOME_MARK: Placement(x=0.25, y=0.35, width=0.37, height=0.20),
    AWAY_MARK: Placement(x=0.75, y=0.35, width=0.37, height=0.20),
    SEPARATOR: Placement(x=0.5, y=0.435, width=0.08, height=0.03, font_scale=0.0188),
    HOME_NAME: Placement(x=0.25, y=0.58, width=0.45, height=0.035, font_scale=0.0219),
    AWAY_NAME: Placement(x=0.75, y=0.58, width=0.45, height=0.035, font_scale=0.0219),
}

FOOTER_ELEMENTS: dict[str, Placement] = {
    FOOTER_MARK: Placement(x=0.5, y=0.90, width=0.13, height=0.05),
    FOOTER_ADDRESS: Placement(x=0.5, y=0.96, width=0.9, height=0.015, font_scale=0.0135),
}

PROGRAM_BUCKETS: dict[int, ProgramBucket] = {
    2: ProgramBucket(row_height=0.28, mark_height=0.11, mark_width=0.19, label_scale=0.024, time_scale=0.022),
    3: ProgramBucket(row_height=0.20, mark_height=0.09, mark_width=0.16, label_scale=0.021, time_scale=0.019),
    4: ProgramBucket(row_height=0.14, mark_height=0.07, mark_width=0.125, label_scale=0.018, time_scale=0.016),
}


@dataclass(frozen=True)
class LayoutModel:
    """Pure geometry for classic (1 fixture) and program (N fixtures) posters."""

    classic: dict[str, Placement] = field(default_factory=lambda: dict(CLASSIC_ELEMENTS))
    footer: dict[str, Placement] = field(default_factory=lambda: dict(FOOTER_ELEMENTS))
    buckets: dict[int, ProgramBucket] = field(default_factory=lambda: dict(PROGRAM_BUCKETS))
    header: Placement = Placement(x=0.5, y=0.07, width=0.8, height=0.05, font_scale=0.032)
    rows_top: float = 0.15
    rows_bottom: float = 0.88
    divider_thickness: float = 0.002

    # Row columns: horizontal centre and width of each row part
    home_mark_x: float = 0.12
    home_name_x: float = 0.33
    away_name_x: float = 0.67
    away_mark_x: float = 0.88
    name_width: float = 0.20
    time_width: float = 0.12
    divider_width: float = 0.84

    def bucket_for(self, match_count: int) -> ProgramBucket:
        """Bucket for a match count; counts past the table use the smallest bucket."""
        if match_count in self.buckets:
            return self.buckets[match_count]
        return self.buckets[max(self.buckets)]

    def elements(self, match_count: int) -> dict[str, Placement]:
        """All placements for a poster with `match_count` fixtures, in draw order."""
        if match_count < 1:
            raise ValueError(f"match_count must be >= 1, got {match_count}")
        if match_count == 1:
            placements = dict(self.classic)
        else:
            placements = self._program_elements(match_count)
        placements.update(self.footer)
        return placements

    def resolve(self, element_id: str, match_count: int) -> Placement:
        placements = self.elements(match_count)
        if element_id not in placements:
            raise KeyError(f"Unknown layout element {element_id!r} for {match_count} match(es)")
        return placements[element_id]

    def _program_elements(self, match_count: int) -> dict[str, Placement]:
        bucket = self.bucket_for(match_count)
        available = self.rows_bottom - self.rows_top
        row_height = min(bucket.row_height, available / match_count)
        factor = row_height / bucket.row_height

        placements: dict[str, Placement] = {HEADER_DATE: self.header}
        for i in range(match_count):
            top = self.rows_top + i * row_height
            centre = top + row_height / 2
            label_h = bucket.label_scale * 1.4
            time_h = bucket.time_scale * 1.4

            row = {
                HOME_MARK: Placement(self.home_mark_x, centre - bucket.mark_height / 2,
                                     bucket.mark_width, bucket.mark_height),
                HOME_NAME: Placement(self.home_name_x, centre - label_h / 2,
                                     self.name_width, label_h, bucket.label_scale),
                TIME: Placement(0.5, centre - time_h / 2, self.time_width, time_h, bucket.time_scale),
                AWAY_NAME: Placement(self.away_name_x, centre - label_h / 2,
                                     self.name_width, label_h, bucket.label_scale),
                AWAY_MARK: Placement(self.away_mark_x, centre - bucket.mark_height / 2,
                                     bucket.mark_width, bucket.mark_height),
            }
            for part in ROW_PARTS:
                placement = row[part]
                placements[row_element(i, part)] = placement.scaled(factor) if factor < 1 else placement

            # No divider after the last row
            if i < match_count - 1:
                placements[row_element(i, DIVIDER)] = Placement(
                    0.5,
                    top + row_height - self.divider_thickness,
                    self.divider_width,
                    self.divider_thickness / 2,
                )
        return placements


def row_element(index: int, part: str) -> str:
    return f"row{index}.{part}"


DEFAULT_LAYOUT = LayoutModel()
