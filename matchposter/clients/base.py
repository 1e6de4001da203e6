"""Shared types for background generation transports."""

import re
from dataclasses import dataclass
from typing import Any, Protocol

from ..models.styles import CompositionMode, RenderStyle

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*s?\s*$")
_MESSAGE_HINT_RES = [
    re.compile(r"retry[_ ]?delay['\":\s]+(\d+(?:\.\d+)?)", re.IGNORECASE),
    re.compile(r"retry in (\d+(?:\.\d+)?)\s*s", re.IGNORECASE),
]


@dataclass(frozen=True)
class GeneratedImage:
    data: bytes
    mime_type: str = "image/png"


@dataclass(frozen=True)
class BackgroundPrompt:
    """Everything a transport needs to issue one generation request."""

    template_id: str
    text: str
    style: RenderStyle
    mode: CompositionMode = CompositionMode.CLASSIC
    home: str = ""
    away: str = ""
    match_count: int = 1
    aspect_ratio: str = "9:16"


class UpstreamError(Exception):
    """A failed call to the generative-image service, already classified."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        retry_after: float | None = None,
        rate_limited: bool = False,
        safety_blocked: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.retry_after = retry_after
        self.rate_limited = rate_limited
        self.safety_blocked = safety_blocked


class BackgroundTransport(Protocol):
    def dispatch(self, prompt: BackgroundPrompt) -> GeneratedImage:
        ...


def parse_duration(value: Any) -> float | None:
    """Parse "3s", "3.5", 3 -> seconds."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        match = _DURATION_RE.match(value)
        if match:
            return float(match.group(1))
    return None


def find_retry_delay(details: Any = None, message: str | None = None) -> float | None:
    """Extract the upstream retry hint, in seconds.

    Looks for a RetryInfo `retryDelay` anywhere in the structured error
    payload first, then for a hint in the error message.
    """
    stack = [details]
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            for key in ("retryDelay", "retry_delay"):
                if key in node:
                    delay = parse_duration(node[key])
                    if delay is not None:
                        return delay
            stack.extend(node.values())
        elif isinstance(node, (list, tuple)):
            stack.extend(node)

    if message:
        for pattern in _MESSAGE_HINT_RES:
            match = pattern.search(message)
            if match:
                return float(match.group(1))
    return None
