"""API layer - Middleware, dependencies and routing"""

from .dependencies import get_clients, get_current_profile, get_profile_manager, require_profile
from .middleware import CallbackMiddleware, default_error_handler
from .public_address import PublicAddress
from .routes import create_auth_router, router, start_login

__all__ = [
    "CallbackMiddleware",
    "default_error_handler",
    "PublicAddress",
    "get_clients",
    "get_current_profile",
    "get_profile_manager",
    "require_profile",
    "create_auth_router",
    "router",
    "start_login",
]
