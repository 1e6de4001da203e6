"""Fraction-based poster layout shared by preview and export."""

from .model import (
    AWAY_MARK,
    AWAY_NAME,
    DATE,
    DEFAULT_LAYOUT,
    DIVIDER,
    FOOTER_ADDRESS,
    FOOTER_MARK,
    HEADER_DATE,
    HOME_MARK,
    HOME_NAME,
    SEPARATOR,
    TIME,
    LayoutModel,
    Placement,
    ProgramBucket,
    row_element,
)

__all__ = [
    "AWAY_MARK",
    "AWAY_NAME",
    "DATE",
    "DEFAULT_LAYOUT",
    "DIVIDER",
    "FOOTER_ADDRESS",
    "FOOTER_MARK",
    "HEADER_DATE",
    "HOME_MARK",
    "HOME_NAME",
    "SEPARATOR",
    "TIME",
    "LayoutModel",
    "Placement",
    "ProgramBucket",
    "row_element",
]
