"""API clients for external services."""

from .backend import BackendClient
from .background import BackgroundGenerator
from .base import BackgroundPrompt, GeneratedImage, UpstreamError
from .gemini import GeminiClient
from .images import ImageLoader
from .throttle import RateLimiter

__all__ = [
    "BackendClient",
    "BackgroundGenerator",
    "BackgroundPrompt",
    "GeminiClient",
    "GeneratedImage",
    "ImageLoader",
    "RateLimiter",
    "UpstreamError",
]
