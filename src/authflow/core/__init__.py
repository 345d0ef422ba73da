"""Core domain models and interfaces for the authentication callback flow"""

from .auth_client import AuthenticationClient, Credentials
from .client_registry import ClientRegistry, ClientsProvider, PathBinding, build_client_registry
from .credential_resolver import resolve_profile
from .exceptions import AuthFlowError, ClientNotFoundError, ConfigurationError, ResolutionError
from .http_action import (
    BadRequestAction,
    ForbiddenAction,
    HttpAction,
    OkAction,
    RedirectAction,
    SeeOtherAction,
    UnauthorizedAction,
)
from .session import ProfileManager, RequestSessionStore, SessionStore
from .user_profile import UserProfile
from .web_context import WebContext

__all__ = [
    "AuthenticationClient",
    "Credentials",
    "ClientRegistry",
    "ClientsProvider",
    "PathBinding",
    "build_client_registry",
    "resolve_profile",
    "AuthFlowError",
    "ClientNotFoundError",
    "ConfigurationError",
    "ResolutionError",
    "HttpAction",
    "RedirectAction",
    "SeeOtherAction",
    "OkAction",
    "BadRequestAction",
    "UnauthorizedAction",
    "ForbiddenAction",
    "ProfileManager",
    "RequestSessionStore",
    "SessionStore",
    "UserProfile",
    "WebContext",
]
