"""AWS Lambda handler for interactive previews."""

import base64
import json
import logging

from ..config import configure_logging
from ..engine import PreviewRenderer
from ..errors import PosterError
from .common import error_response, parse_body, parse_requests, response, unexpected_response

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    """
    Describe the posters a selection would produce, without generating or saving.

    Takes the same payload as the worker. With "thumbnail": true each preview
    also carries a small base64 JPEG drawn from inline images only.
    """
    try:
        body = parse_body(event)
        requests = parse_requests(body)
        renderer = PreviewRenderer()

        previews = []
        for request in requests:
            preview = renderer.describe(request)
            preview["mode"] = request.mode.value
            if body.get("thumbnail"):
                thumb = renderer.thumbnail(request)
                preview["thumbnail"] = "data:image/jpeg;base64," + base64.b64encode(thumb).decode("ascii")
            previews.append(preview)

        return response(200, {"previews": previews})

    except PosterError as e:
        logger.warning(f"Preview failed: {type(e).__name__}: {e}")
        return error_response(e)
    except Exception as e:
        return unexpected_response(e)


# Local testing
if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m matchposter.handlers.preview <payload_json>")
        sys.exit(1)

    result = handler({"body": sys.argv[1]}, None)
    print(json.dumps(json.loads(result["body"]), indent=2))
