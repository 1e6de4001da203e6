"""Shared plumbing for the Lambda handlers."""

import base64
import binascii
import json
import logging
from typing import Any

from .. import config
from ..clients import BackendClient, BackgroundGenerator, GeminiClient, ImageLoader, RateLimiter
from ..engine import Compositor
from ..errors import (
    ContentRejected,
    FatalError,
    GenerationCancelled,
    GenerationFailed,
    InvalidRequest,
    MissingOwner,
    PermissionDenied,
    PosterError,
    PosterNotFound,
    RateLimited,
    StorageUnavailable,
)
from ..models import BackgroundSource, Branding, CompositionMode, Fixture, RenderStyle, plan_requests
from ..models.request import CompositionRequest
from ..services import GalleryService, PosterService
from ..storage import DynamoMetadataStore, S3BlobStore
from ..utils import decode_data_uri

logger = logging.getLogger(__name__)

# One throttle per process: every generation call in this container shares it
RATE_LIMITER = RateLimiter(config.MIN_REQUEST_INTERVAL)

_STATUS_BY_ERROR: list[tuple[type[PosterError], int]] = [
    (InvalidRequest, 400),
    (MissingOwner, 401),
    (PermissionDenied, 403),
    (PosterNotFound, 404),
    (ContentRejected, 422),
    (RateLimited, 429),
    (GenerationCancelled, 499),
    (GenerationFailed, 502),
    (StorageUnavailable, 503),
    (FatalError, 500),
]


def response(status_code: int, body: dict) -> dict:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def error_response(error: PosterError) -> dict:
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(error, cls)), 500)
    body: dict[str, Any] = {"error": str(error), "type": type(error).__name__}
    if isinstance(error, RateLimited):
        body["attempts"] = error.attempts
        body["retryAfter"] = error.retry_after
    if isinstance(error, FatalError):
        logger.error(f"Fatal error: {error}")
        body["error"] = "Service unavailable. Please try again later."
    return response(status, body)


def unexpected_response(error: Exception) -> dict:
    """500 for anything outside the pipeline's own error types."""
    logger.exception(f"Unexpected error: {type(error).__name__}: {error}")
    return response(500, {"error": "Internal server error", "type": type(error).__name__})


def parse_body(event: dict) -> dict:
    """Request body from an SQS record or an API Gateway event."""
    if "Records" in event:
        raw = event["Records"][0]["body"]
    else:
        raw = event.get("body") or "{}"
        if event.get("isBase64Encoded"):
            try:
                raw = base64.b64decode(raw).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError) as e:
                raise InvalidRequest(f"Invalid base64 body: {e}") from e
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidRequest(f"Invalid JSON body: {e}") from e
    if not isinstance(body, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return body


def owner_from_event(event: dict, body: dict | None = None) -> str:
    """Owner id from the authorizer claims (or the queued body for SQS)."""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = authorizer.get("claims") or {}
    owner_id = claims.get("sub") or authorizer.get("principalId")
    if not owner_id and "Records" in event and body:
        owner_id = body.get("owner_id")
    if not owner_id:
        raise MissingOwner()
    return owner_id


def id_token_from_event(event: dict, body: dict | None = None) -> str | None:
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    auth = headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return (body or {}).get("id_token")


def parse_requests(body: dict) -> list[CompositionRequest]:
    """Turn a selection payload into composition requests."""
    fixtures_data = body.get("fixtures") or []
    if not fixtures_data:
        raise InvalidRequest("Missing 'fixtures' field")
    if not isinstance(fixtures_data, list):
        raise InvalidRequest("'fixtures' must be a list")
    fixtures = [Fixture.from_dict(item) for item in fixtures_data]

    branding_data = body.get("branding") or {}
    if not isinstance(branding_data, dict):
        raise InvalidRequest("'branding' must be an object")
    branding = Branding(
        logo_url=branding_data.get("logo_url") or branding_data.get("avatarUrl") or config.DEFAULT_OWNER_LOGO_URL,
        address=branding_data.get("address") or branding_data.get("companyAddress") or config.DEFAULT_OWNER_ADDRESS,
        brand_name=branding_data.get("brand_name") or config.BRAND_NAME,
    )

    return plan_requests(
        fixtures,
        style=RenderStyle.parse(body.get("style")),
        mode=CompositionMode.parse(body.get("mode")),
        background=parse_background(body),
        branding=branding,
    )


def parse_background(body: dict) -> BackgroundSource | None:
    if body.get("background_url"):
        if not isinstance(body["background_url"], str):
            raise InvalidRequest("'background_url' must be a string")
        return BackgroundSource(ref=body["background_url"])
    encoded = body.get("background_base64")
    if not encoded:
        return None
    if not isinstance(encoded, str):
        raise InvalidRequest("'background_base64' must be a string")
    try:
        if encoded.startswith("data:"):
            data, mime_type = decode_data_uri(encoded)
        else:
            data, mime_type = base64.b64decode(encoded, validate=True), "image/jpeg"
    except (ValueError, binascii.Error) as e:
        raise InvalidRequest(f"Invalid background_base64: {e}") from e
    return BackgroundSource(data=data, mime_type=mime_type)


def build_generator(id_token: str | None) -> BackgroundGenerator:
    """Backend-proxied generator when a backend URL is configured, inline otherwise."""
    if config.GENERATOR_BACKEND_URL:
        transport = BackendClient(config.GENERATOR_BACKEND_URL, id_token)
    else:
        transport = GeminiClient(api_key=config.GEMINI_API_KEY)
    return BackgroundGenerator(transport, RATE_LIMITER)


def build_gallery() -> tuple[GalleryService, S3BlobStore]:
    blobs = S3BlobStore()
    return GalleryService(blobs, DynamoMetadataStore()), blobs


def build_poster_service(generator: BackgroundGenerator | None) -> PosterService:
    gallery, blobs = build_gallery()
    compositor = Compositor(loader=ImageLoader.default(blobs=blobs))
    return PosterService(compositor, gallery, generator=generator)
