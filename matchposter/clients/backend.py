"""Backend-proxied background generation client.

The backend holds the Gemini key, validates the caller's identity token and
forwards the request. Responses are {"success": bool, "image": data-url} or
{"success": false, "error": "..."}.
"""

import json

import requests

from ..errors import MissingCredential
from ..models.styles import CompositionMode
from ..utils import decode_data_uri
from .base import BackgroundPrompt, GeneratedImage, UpstreamError, parse_duration


class BackendClient:
    """Client for the generation backend (api/gemini routes)."""

    def __init__(
        self,
        base_url: str | None,
        id_token: str | None,
        session: requests.Session | None = None,
        timeout: int = 120,
    ):
        if not base_url:
            raise MissingCredential("GENERATOR_BACKEND_URL is not configured")
        if not id_token:
            raise MissingCredential("Backend generation requires a caller identity token")
        self.base_url = base_url.rstrip("/")
        self.id_token = id_token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get_headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.id_token}",
            "Content-Type": "application/json",
        }

    def dispatch(self, prompt: BackgroundPrompt) -> GeneratedImage:
        if prompt.mode == CompositionMode.PROGRAM:
            url = f"{self.base_url}/api/gemini/generate-program-background"
            payload = {"matchCount": prompt.match_count}
        else:
            url = f"{self.base_url}/api/gemini/generate-match-background"
            payload = {"homeTeam": prompt.home, "awayTeam": prompt.away, "style": prompt.style.value}

        try:
            response = self.session.post(url, json=payload, headers=self._get_headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"Backend request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        error = body.get("error") or f"Backend error: {response.status_code}"
        if isinstance(error, dict):
            error = error.get("message") or json.dumps(error)
        error = str(error)
        lowered = error.lower()

        if response.status_code == 429 or "rate limit" in lowered or "quota" in lowered:
            raise UpstreamError(
                error,
                status=response.status_code,
                retry_after=parse_duration(response.headers.get("Retry-After")),
                rate_limited=True,
            )
        if "safety" in lowered or "blocked" in lowered:
            raise UpstreamError(error, status=response.status_code, safety_blocked=True)
        if not response.ok or not body.get("success") or not body.get("image"):
            raise UpstreamError(error, status=response.status_code)

        try:
            data, mime_type = decode_data_uri(body["image"])
        except ValueError as e:
            raise UpstreamError(f"Backend returned an unreadable image: {e}") from e
        return GeneratedImage(data=data, mime_type=mime_type)
