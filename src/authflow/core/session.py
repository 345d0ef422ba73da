"""Session-scoped state used by the authentication flow.

The session backend belongs to the host application. The flow only needs
get/set/remove on the current session, expressed by the SessionStore
protocol. RequestSessionStore adapts Starlette's SessionMiddleware.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

from fastapi import Request

from .exceptions import ConfigurationError
from .user_profile import UserProfile

logger = logging.getLogger(__name__)

# Session keys
REQUESTED_URL = "authflow.requested_url"
USER_PROFILES = "authflow.user_profiles"


class SessionStore(Protocol):
    """Key-value access to the current session"""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class RequestSessionStore:
    """SessionStore over request.session (starlette SessionMiddleware)"""

    def __init__(self, request: Request):
        if "session" not in request.scope:
            raise ConfigurationError(
                "SessionMiddleware must be installed outside the callback middleware"
            )
        self._session = request.session

    def get(self, key: str) -> Optional[Any]:
        return self._session.get(key)

    def set(self, key: str, value: Any) -> None:
        self._session[key] = value

    def remove(self, key: str) -> None:
        self._session.pop(key, None)


class ProfileManager:
    """
    Stores authenticated user profiles in the session.

    Profiles are kept as a dict keyed by client name, in insertion order.
    The first entry is the primary identity of the session.
    """

    def __init__(self, store: SessionStore):
        self.store = store

    def save(self, profile: UserProfile, exclusive: bool = True) -> None:
        """
        Save a profile into the session.

        Args:
            profile: Resolved user profile
            exclusive: Replace every stored profile with this one. Otherwise
                add it next to profiles from other clients, replacing only
                the entry of the same client.
        """
        if exclusive:
            profiles: Dict[str, Dict[str, Any]] = {}
        else:
            profiles = dict(self.store.get(USER_PROFILES) or {})

        profiles[profile.client_name] = profile.to_dict()
        self.store.set(USER_PROFILES, profiles)
        logger.debug(f"Saved profile {profile.id} from client {profile.client_name}")

    def get(self) -> Optional[UserProfile]:
        """Return the primary profile, if any"""
        profiles = self.get_all()
        return profiles[0] if profiles else None

    def get_all(self) -> List[UserProfile]:
        profiles = self.store.get(USER_PROFILES) or {}
        return [UserProfile.from_dict(data) for data in profiles.values()]

    def is_authenticated(self) -> bool:
        return bool(self.store.get(USER_PROFILES))

    def remove(self) -> None:
        """Drop all profiles (logout)"""
        self.store.remove(USER_PROFILES)
