"""Per-request access to the client registry and session profiles.

The callback middleware attaches the registry to request.state through a
compute-once cell. Route handlers read it with the FastAPI dependencies
below.
"""

import logging
from threading import Lock
from typing import Callable, Generic, Optional, TypeVar

from fastapi import HTTPException, Request, status

from ..core.client_registry import ClientRegistry
from ..core.exceptions import ConfigurationError
from ..core.session import ProfileManager, RequestSessionStore
from ..core.user_profile import UserProfile

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


class Lazy(Generic[T]):
    """Single-assignment cell: the factory runs on first get() only"""

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._value = _UNSET
        self._lock = Lock()

    @property
    def evaluated(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> T:
        if self._value is _UNSET:
            # sync route handlers may read from worker threads
            with self._lock:
                if self._value is _UNSET:
                    self._value = self._factory()
        return self._value  # type: ignore[return-value]


def attach_clients(request: Request, registry: ClientRegistry) -> None:
    """Register the request's client registry for downstream handlers"""
    request.state.authflow_clients = Lazy(lambda: registry)
    logger.debug(f"Attached {registry!r} to {request.url.path}")


def get_clients(request: Request) -> ClientRegistry:
    """
    Return the client registry attached to this request.

    Raises:
        ConfigurationError: If the callback middleware did not handle the request
    """
    cell = getattr(request.state, "authflow_clients", None)
    if cell is None:
        raise ConfigurationError("No client registry attached to request")
    return cell.get()


def get_profile_manager(request: Request) -> ProfileManager:
    return ProfileManager(RequestSessionStore(request))


def get_current_profile(request: Request) -> Optional[UserProfile]:
    """Primary authenticated profile of the session, if any"""
    return get_profile_manager(request).get()


def require_profile(request: Request) -> UserProfile:
    """Like get_current_profile, but 401 when nobody is logged in"""
    profile = get_current_profile(request)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return profile
