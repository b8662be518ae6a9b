"""
Request handlers for the image check service.

Thin shims between an already-parsed request body and the engine: they
build ImageRequest values from boundary records, map engine-level errors to
transport status codes and serialize results. Any HTTP server can mount
them; the CLI calls them directly.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .core.data_models import ImageRequest
from .core.engine import ImageCheckEngine
from .utils.error_handler import InvalidInputError, NoValidInputError

logger = logging.getLogger(__name__)

Body = Union[List[Dict[str, Any]], Dict[str, Any]]


@dataclass
class HandlerResponse:
    """Status code and JSON-serializable body."""

    status: int
    body: Body

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def build_requests(body: Any, url_field: str = "imageUrl") -> Any:
    """
    Convert a parsed request body into ImageRequest values.

    Non-list bodies are returned unchanged so the engine rejects them.
    """
    if body is None:
        return []
    if not isinstance(body, list):
        return body
    return [ImageRequest.from_record(record, url_field) for record in body]


async def check_images(
    body: Any,
    engine: ImageCheckEngine,
    cancel_event: Optional[asyncio.Event] = None,
) -> HandlerResponse:
    """
    Handle a check-images request.

    Args:
        body: Parsed JSON body, expected to be a list of {"imageUrl": ...}
        engine: Shared engine instance
        cancel_event: Optional event to stop validation early

    Returns:
        200 with the ordered result list, 400 for rejected input, 500 if the
        engine itself failed
    """
    requests = build_requests(body, engine.config.http.url_field)

    try:
        report = await engine.process(requests, cancel_event=cancel_event)
    except (InvalidInputError, NoValidInputError) as e:
        logger.info(f"Rejected check-images request: {e}")
        return HandlerResponse(status=400, body={"message": str(e)})
    except Exception as e:
        logger.exception("Error in check_images")
        return HandlerResponse(
            status=500,
            body={
                "message": "Internal server error during image validation",
                "error": str(e) or type(e).__name__,
            },
        )

    return HandlerResponse(status=200, body=report.to_list())


def clear_image_cache(engine: ImageCheckEngine) -> HandlerResponse:
    engine.clear_cache()
    return HandlerResponse(status=200, body={"message": "Image cache cleared"})


def get_cache_stats(engine: ImageCheckEngine) -> HandlerResponse:
    return HandlerResponse(status=200, body=engine.cache_stats().to_dict())


__all__ = [
    "HandlerResponse",
    "build_requests",
    "check_images",
    "clear_image_cache",
    "get_cache_stats",
]
