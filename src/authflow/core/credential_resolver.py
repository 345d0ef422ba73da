"""Credential extraction and profile resolution off the event loop"""

from typing import Optional

from starlette.concurrency import run_in_threadpool

from .auth_client import AuthenticationClient
from .user_profile import UserProfile
from .web_context import WebContext


def _resolve_blocking(
    context: WebContext, client: AuthenticationClient
) -> Optional[UserProfile]:
    credentials = client.get_credentials(context)
    if credentials is None:
        return None
    return client.get_user_profile(credentials, context)


async def resolve_profile(
    context: WebContext, client: AuthenticationClient
) -> Optional[UserProfile]:
    """
    Extract credentials and resolve them into a profile.

    Client calls may block on network I/O, so they run in the threadpool.
    Exceptions (HttpAction included) propagate unchanged.

    Returns:
        UserProfile, or None when the request carries no credentials
    """
    return await run_in_threadpool(_resolve_blocking, context, client)
