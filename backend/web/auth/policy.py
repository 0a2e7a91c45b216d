"""Route auth policy markers.

Every route endpoint is wrapped by ``public_route`` or ``admin_only``, which
sets the ``AUTH_POLICY_ATTR`` marker. ``validate_route_auth_policy`` runs at
startup and refuses to build an app with an unmarked route.
"""

from __future__ import annotations

import functools
import hmac
from http import HTTPStatus
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.routing import BaseRoute

    Endpoint = Callable[[Request], Awaitable[Response]]

AUTH_POLICY_ATTR = "__auth_policy__"
ADMIN_KEY_HEADER = "X-Admin-Key"


def public_route(endpoint: Endpoint) -> Endpoint:
    """Mark endpoint as explicitly public.

    The marker goes on a thin wrapper, not the original function, so reusing
    the function on another route does not silently inherit the policy.
    """

    @functools.wraps(endpoint)
    async def wrapper(request: Request) -> Response:
        return await endpoint(request)

    setattr(wrapper, AUTH_POLICY_ATTR, "public")
    return wrapper


def admin_only(endpoint: Endpoint) -> Endpoint:
    """Require the X-Admin-Key header to match the configured admin key.

    Returns 503 JSON when no admin key is configured and 401 JSON when the
    header is missing or wrong.
    """

    @functools.wraps(endpoint)
    async def wrapper(request: Request) -> Response:
        expected: str | None = request.app.state.settings.admin_api_key
        if not expected:
            return JSONResponse({"error": "Admin API is not configured"}, status_code=HTTPStatus.SERVICE_UNAVAILABLE)
        provided = request.headers.get(ADMIN_KEY_HEADER, "")
        if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
            return JSONResponse({"error": "Unauthorized"}, status_code=HTTPStatus.UNAUTHORIZED)
        return await endpoint(request)

    setattr(wrapper, AUTH_POLICY_ATTR, "admin")
    return wrapper


def validate_route_auth_policy(routes: list[BaseRoute]) -> None:
    """Verify every Route has an auth policy marker. Mounts (static files) are exempt.

    Raises RuntimeError listing all unmarked routes.
    """
    unclassified: list[str] = []
    for route in routes:
        if isinstance(route, Mount):
            continue
        if isinstance(route, Route) and not hasattr(route.endpoint, AUTH_POLICY_ATTR):
            name = route.name or getattr(route.endpoint, "__name__", "unknown")
            unclassified.append(f"{route.path} ({name})")

    if unclassified:
        raise RuntimeError(f"Unclassified routes missing auth policy: {', '.join(unclassified)}")
