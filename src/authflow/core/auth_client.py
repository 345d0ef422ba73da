"""Authentication client interface for pluggable login protocols"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

from .http_action import HttpAction
from .user_profile import UserProfile

if TYPE_CHECKING:
    from .web_context import WebContext


@dataclass
class Credentials:
    """Provider-specific proof of identity extracted from a callback request"""

    client_name: str
    values: Dict[str, Any] = field(default_factory=dict)


class AuthenticationClient(ABC):
    """
    Interface for authentication clients (OAuth, OIDC, CAS, SAML, ...).

    Implementations must:
    1. Build the redirect that sends the user to the identity provider
    2. Extract credentials from the provider's callback request
    3. Resolve those credentials into a user profile

    Client methods are synchronous and may block on network I/O. The
    callback middleware runs them in a worker thread. Any method may raise
    an HttpAction to have that response sent to the user instead.

    Clients are shared across requests and must not keep per-request state.
    """

    @abstractmethod
    def get_client_name(self) -> str:
        """Return the unique name used to look this client up"""
        pass

    @abstractmethod
    def get_redirect_action(self, context: "WebContext", callback_url: str) -> HttpAction:
        """
        Build the action that starts a login at the identity provider.

        Args:
            context: Current web context
            callback_url: Absolute callback URL (including client name parameter)

        Returns:
            HttpAction to send, usually a RedirectAction
        """
        pass

    @abstractmethod
    def get_credentials(self, context: "WebContext") -> Optional[Credentials]:
        """
        Extract credentials from the callback request.

        Returns:
            Credentials, or None when the callback carries none (the
            provider only signalled an intermediate step)
        """
        pass

    @abstractmethod
    def get_user_profile(
        self, credentials: Credentials, context: "WebContext"
    ) -> Optional[UserProfile]:
        """
        Validate credentials and resolve the user profile.

        Raises:
            HttpAction: To interrupt the flow with a response
            Exception: Any other failure is fatal for the request
        """
        pass
