"""AWS Lambda handler for the poster gallery (list / get / delete)."""

import json
import logging

from ..config import configure_logging
from ..errors import InvalidRequest, PosterError
from .common import build_gallery, error_response, owner_from_event, response, unexpected_response

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    """
    HTTP routes:
        GET    /posters          - owner's current posters, newest first
        GET    /posters/{id}     - one poster with a download URL
        DELETE /posters/{id}     - remove a poster and its images
    """
    method = (event.get("httpMethod") or "GET").upper()
    poster_id = (event.get("pathParameters") or {}).get("id")

    try:
        owner_id = owner_from_event(event)
        gallery, blobs = build_gallery()

        if method == "GET" and not poster_id:
            records = gallery.list(owner_id)
            return response(200, {"posters": [r.summary() for r in records]})

        if not poster_id:
            raise InvalidRequest("Missing poster id")

        if method == "GET":
            record = gallery.get(owner_id, poster_id)
            body = record.summary()
            if record.poster_ref and blobs.owns(record.poster_ref):
                body["download_url"] = blobs.download_url(record.poster_ref, record.filename)
            return response(200, body)

        if method == "DELETE":
            gallery.delete(owner_id, poster_id)
            return response(200, {"deleted": poster_id})

        raise InvalidRequest(f"Unsupported method {method}")

    except PosterError as e:
        logger.warning(f"Gallery request failed: {type(e).__name__}: {e}")
        return error_response(e)
    except Exception as e:
        return unexpected_response(e)


# Local testing
if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m matchposter.handlers.gallery <owner_id> [poster_id] [--delete]")
        sys.exit(1)

    event = {
        "httpMethod": "DELETE" if "--delete" in sys.argv else "GET",
        "requestContext": {"authorizer": {"claims": {"sub": sys.argv[1]}}},
    }
    if len(sys.argv) > 2 and sys.argv[2] != "--delete":
        event["pathParameters"] = {"id": sys.argv[2]}

    result = handler(event, None)
    print(json.dumps(json.loads(result["body"]), indent=2))
