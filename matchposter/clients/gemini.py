"""Gemini image generation client (inline variant)."""

import logging

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .. import config
from ..errors import MissingCredential
from .base import BackgroundPrompt, GeneratedImage, UpstreamError, find_retry_delay

logger = logging.getLogger(__name__)

SAFETY_FINISH_REASONS = {
    "SAFETY",
    "IMAGE_SAFETY",
    "PROHIBITED_CONTENT",
    "BLOCKLIST",
    "SPII",
    "IMAGE_PROHIBITED_CONTENT",
}


def _reason_name(reason) -> str:
    if reason is None:
        return ""
    return getattr(reason, "name", None) or str(reason).rsplit(".", 1)[-1]


class GeminiClient:
    """Client for generating poster backgrounds via Gemini 2.5 Flash Image."""

    def __init__(self, api_key: str | None, model: str = config.GEMINI_MODEL, client=None):
        if client is None:
            if not api_key:
                raise MissingCredential("GEMINI_API_KEY is not configured")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model = model

    def dispatch(self, prompt: BackgroundPrompt) -> GeneratedImage:
        """
        Issue one generation request. No retries here.

        Args:
            prompt: Rendered template plus aspect ratio

        Returns:
            Generated image bytes and mime type

        Raises:
            UpstreamError: classified as rate-limited, safety-blocked or other
        """
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt.text,
                config=types.GenerateContentConfig(
                    response_modalities=["IMAGE", "TEXT"],
                    image_config=types.ImageConfig(aspect_ratio=prompt.aspect_ratio),
                ),
            )
        except genai_errors.APIError as e:
            raise classify_api_error(e) from e

        return extract_image(response)


def classify_api_error(error: genai_errors.APIError) -> UpstreamError:
    code = getattr(error, "code", None)
    status = str(getattr(error, "status", "") or "")
    message = getattr(error, "message", None) or str(error)

    rate_limited = (
        code == 429
        or status == "RESOURCE_EXHAUSTED"
        or "quota" in message.lower()
    )
    safety_blocked = not rate_limited and "SAFETY" in message.upper()
    retry_after = None
    if rate_limited:
        retry_after = find_retry_delay(getattr(error, "details", None), message)

    return UpstreamError(
        message,
        status=code,
        retry_after=retry_after,
        rate_limited=rate_limited,
        safety_blocked=safety_blocked,
    )


def extract_image(response) -> GeneratedImage:
    """Pull the first inline image out of a generate_content response."""
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = _reason_name(getattr(feedback, "block_reason", None))
    if block_reason and block_reason != "BLOCKED_REASON_UNSPECIFIED":
        raise UpstreamError(f"Prompt blocked: {block_reason}", safety_blocked=True)

    texts = []
    if response.candidates:
        candidate = response.candidates[0]
        finish_reason = _reason_name(getattr(candidate, "finish_reason", None))
        parts = candidate.content.parts if candidate.content and candidate.content.parts else []
        for part in parts:
            if part.inline_data and part.inline_data.data and (part.inline_data.mime_type or "").startswith("image/"):
                return GeneratedImage(data=part.inline_data.data, mime_type=part.inline_data.mime_type)
            if getattr(part, "text", None):
                texts.append(part.text)
        if finish_reason in SAFETY_FINISH_REASONS:
            raise UpstreamError(f"Generation stopped: {finish_reason}", safety_blocked=True)

    if texts:
        logger.warning(f"Gemini returned text instead of an image: {texts[0][:80]}")
        raise UpstreamError(f"Gemini refused to generate image: {texts[0][:50]}...")
    raise UpstreamError("Gemini returned no image data")
