"""API routes for health checks, login initiation and logout"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from ..config import Settings
from ..core.exceptions import ClientNotFoundError
from ..core.http_action import HttpAction
from ..core.session import REQUESTED_URL, ProfileManager
from ..core.web_context import WebContext
from .dependencies import get_clients, get_profile_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Only verifies the process is running and responsive. Identity
    providers are not contacted.

    Returns:
        Dict with status="healthy", service name, and version number.
    """
    return {
        "status": "healthy",
        "service": "authflow",
        "version": "1.0.0",
    }


async def start_login(
    request: Request,
    client_name: str,
    requested_url: Optional[str] = None,
) -> Response:
    """
    Send the user to the identity provider of a client.

    Stores the URL to come back to in the session; the callback
    middleware consumes it once the login completes.

    Args:
        request: Current request (must be under the middleware mount prefix)
        client_name: Name of the client to log in with
        requested_url: URL to return to (default: the current request URL)

    Returns:
        The client's redirect action as a response

    Raises:
        ClientNotFoundError: If no client has this name
    """
    registry = get_clients(request)
    client = registry.find_client(client_name)
    if client is None:
        raise ClientNotFoundError(f"No client found for name: {client_name}")

    context = await WebContext.from_request(request)
    context.session_store.set(REQUESTED_URL, requested_url or str(request.url))

    try:
        action = await run_in_threadpool(
            client.get_redirect_action, context, registry.callback_url_for(client)
        )
    except HttpAction as raised:
        action = raised

    logger.info(f"Starting {client_name} login, HTTP {action.status_code}")
    return action.to_response()


def create_auth_router(settings: Settings) -> APIRouter:
    """
    Create login/logout routes under the mount prefix.

    Routes:
    - GET {mount}/login/{client_name}?requested_url=/path
    - GET {mount}/logout

    Args:
        settings: Application settings

    Returns:
        Router to include in the application
    """
    prefix = settings.mount_prefix.strip("/")
    auth_router = APIRouter(prefix=f"/{prefix}" if prefix else "")

    @auth_router.get("/login/{client_name}")
    async def login(
        request: Request,
        client_name: str,
        requested_url: Optional[str] = None,
    ) -> Response:
        """Start a login with the named client"""
        # Only same-site paths, never "//host" or absolute URLs
        if requested_url and (
            not requested_url.startswith("/") or requested_url.startswith("//")
        ):
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "error": "invalid_requested_url",
                    "message": "requested_url must be a relative path",
                },
            )
        return await start_login(request, client_name, requested_url or settings.default_url)

    @auth_router.get("/logout")
    async def logout(
        profile_manager: ProfileManager = Depends(get_profile_manager),
    ) -> Response:
        """Forget every profile of the session"""
        profile_manager.remove()
        return RedirectResponse(url=settings.default_url, status_code=status.HTTP_302_FOUND)

    return auth_router
