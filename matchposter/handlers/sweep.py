"""AWS Lambda handler for the scheduled retention sweep."""

import json
import logging

from ..config import configure_logging
from ..errors import PosterError
from .common import build_gallery, error_response, response, unexpected_response

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    """Delete every poster whose match date has passed (EventBridge schedule)."""
    try:
        gallery, _ = build_gallery()
        removed = gallery.sweep()
        return response(200, {"removed": removed})
    except PosterError as e:
        logger.error(f"Retention sweep failed: {e}")
        return error_response(e)
    except Exception as e:
        return unexpected_response(e)


# Local testing
if __name__ == "__main__":
    result = handler({}, None)
    print(json.dumps(json.loads(result["body"]), indent=2))
