"""Request hygiene dependencies shared by JSON endpoints."""

from __future__ import annotations

import re

from fastapi import Request

from app.core.config import settings
from app.core.errors import UnsupportedMediaTypeAppError

_JSON_CONTENT_TYPE = re.compile(r"application/json", re.IGNORECASE)


def violates_json_content_type(request: Request) -> bool:
    """Whether a body-carrying request was not sent as application/json."""
    if not settings.app.json_content_type_required or request.method in ("GET", "HEAD"):
        return False
    return not _JSON_CONTENT_TYPE.search(request.headers.get("content-type", ""))


def unsupported_media_type() -> UnsupportedMediaTypeAppError:
    return UnsupportedMediaTypeAppError(
        code="unsupported_media_type",
        message="Use application/json",
    )


async def require_json(request: Request) -> None:
    """Reject non-GET requests that are not sent as application/json.

    FastAPI decodes bodies without a Content-Type as JSON before this
    dependency runs; undecodable ones are turned into the same 415 by
    ``request_validation_handler``.

    Raises:
        UnsupportedMediaTypeAppError: 415 when the Content-Type does not match.
    """
    if violates_json_content_type(request):
        raise unsupported_media_type()
