"""Redirect-based external authentication middleware for FastAPI"""

from .api import CallbackMiddleware, PublicAddress, get_clients, get_current_profile, require_profile, start_login
from .config import Settings, get_settings
from .core import (
    AuthenticationClient,
    ClientRegistry,
    Credentials,
    HttpAction,
    ProfileManager,
    RedirectAction,
    UserProfile,
    WebContext,
)

__version__ = "1.0.0"

__all__ = [
    "CallbackMiddleware",
    "PublicAddress",
    "get_clients",
    "get_current_profile",
    "require_profile",
    "start_login",
    "Settings",
    "get_settings",
    "AuthenticationClient",
    "ClientRegistry",
    "Credentials",
    "HttpAction",
    "ProfileManager",
    "RedirectAction",
    "UserProfile",
    "WebContext",
]
