"""Data models."""

from .fixture import Fixture, Team, dump_snapshot, load_snapshot
from .poster import PosterRecord
from .request import BackgroundSource, Branding, CompositionRequest, ProgramBounds, plan_requests
from .styles import CompositionMode, PromptTemplate, RenderStyle, select_template

__all__ = [
    "BackgroundSource",
    "Branding",
    "CompositionMode",
    "CompositionRequest",
    "Fixture",
    "PosterRecord",
    "ProgramBounds",
    "PromptTemplate",
    "RenderStyle",
    "Team",
    "dump_snapshot",
    "load_snapshot",
    "plan_requests",
    "select_template",
]
