"""Request parsing and error response helpers shared by the API handlers."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from starlette.responses import JSONResponse

if TYPE_CHECKING:
    from starlette.requests import Request


class BadRequestError(ValueError):
    """Client input problem. The message is returned in the 400 body."""


def error_response(message: str, status_code: int = HTTPStatus.BAD_REQUEST) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def read_json_object(request: Request) -> dict[str, Any]:
    """Decode the request body as a JSON object. Raises BadRequestError otherwise."""
    raw = await request.body()
    try:
        body = json.loads(raw) if raw.strip() else None
    except ValueError:
        raise BadRequestError("Invalid JSON body") from None
    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object")
    return body
