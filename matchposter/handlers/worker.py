"""AWS Lambda handler for poster composition."""

import json
import logging

from ..config import configure_logging
from ..errors import FatalError, PosterError
from .common import (
    build_generator,
    build_poster_service,
    error_response,
    id_token_from_event,
    owner_from_event,
    parse_body,
    parse_requests,
    response,
    unexpected_response,
)

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    """
    AWS Lambda handler - triggered by SQS or HTTP.

    Input payload:
    {
        "fixtures": [
            {"id": "1", "date": "2025-12-06", "time": "19:00",
             "homeTeam": {"name": "PSG", "logoUrl": "..."},
             "awayTeam": {"name": "Marseille", "logoUrl": "..."}}
        ],
        "style": "stadium",
        "mode": "classic",
        "background_url": "https://...",   (optional, else generated)
        "branding": {"logo_url": "...", "address": "..."}
    }

    Output: one saved poster per planned composition request.
    """
    try:
        body = parse_body(event)
        owner_id = owner_from_event(event, body)
        requests = parse_requests(body)
        logger.info(f"Composing {len(requests)} poster(s) for owner {owner_id}")

        needs_generation = any(r.background is None for r in requests)
        generator = build_generator(id_token_from_event(event, body)) if needs_generation else None
        service = build_poster_service(generator)

        posters = []
        failures: list[PosterError] = []
        errors = []
        for index, request in enumerate(requests):
            try:
                record = service.create(owner_id, request)
            except FatalError:
                raise
            except PosterError as e:
                logger.warning(f"Request {index} ({request.lead.home.name} vs {request.lead.away.name}) failed: {e}")
                failures.append(e)
                errors.append({"request": index, "error": str(e), "type": type(e).__name__})
                continue
            posters.append(record.summary())
            logger.info(f"Saved {record.filename} as {record.id}")

        # Nothing saved: report the first failure with its own status
        if failures and not posters:
            return error_response(failures[0])

        return response(207 if errors else 200, {
            "posters_created": len(posters),
            "posters": posters,
            "errors": errors or None,
        })

    except PosterError as e:
        logger.warning(f"Poster request failed: {type(e).__name__}: {e}")
        return error_response(e)
    except Exception as e:
        return unexpected_response(e)


# Local testing
if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m matchposter.handlers.worker <payload_json> [owner_id]")
        print()
        print("Example:")
        print('  python -m matchposter.handlers.worker \'{"fixtures": [{"id": "1", "date": "2025-12-06", '
              '"time": "19:00", "homeTeam": {"name": "PSG"}, "awayTeam": {"name": "Marseille"}}]}\' local-user')
        sys.exit(1)

    test_input = json.loads(sys.argv[1])
    owner = sys.argv[2] if len(sys.argv) > 2 else "local-user"
    event = {
        "body": json.dumps(test_input),
        "requestContext": {"authorizer": {"claims": {"sub": owner}}},
    }

    result = handler(event, None)
    print("\nResult:")
    print(json.dumps(json.loads(result["body"]), indent=2))
