"""Per-request registry of authentication clients"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol

from fastapi import Request
from starlette.datastructures import URL

from .auth_client import AuthenticationClient
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME_PARAMETER = "client_name"

ClientsProvider = Callable[[Request], Iterable[AuthenticationClient]]


class PublicAddressResolver(Protocol):
    def get(self, request: Request, *segments: str) -> str:
        ...


@dataclass(frozen=True)
class PathBinding:
    """
    How the current request path matched the mount point.

    bound_to is the mount prefix, past_binding the remainder of the path.
    Neither carries leading or trailing slashes.
    """

    bound_to: str
    past_binding: str

    @classmethod
    def from_path(cls, path: str, mount_prefix: str = "") -> Optional["PathBinding"]:
        """
        Bind a request path to a mount prefix.

        Returns:
            PathBinding, or None if the path is outside the mount prefix
        """
        prefix = mount_prefix.strip("/")
        remainder = path.lstrip("/")

        if prefix:
            if remainder == prefix:
                remainder = ""
            elif remainder.startswith(prefix + "/"):
                remainder = remainder[len(prefix) + 1:]
            else:
                return None

        return cls(bound_to=prefix, past_binding=remainder)

    @classmethod
    def from_scope(cls, scope: Dict[str, Any], mount_prefix: str = "") -> Optional["PathBinding"]:
        """
        Bind an ASGI request to a mount prefix.

        When the application is mounted as a sub-app, scope["root_path"]
        holds the mount path. It is matched away from the path the same way
        Starlette routing does, and prepended to bound_to so callback URLs
        keep it.
        """
        binding = cls.from_path(route_path(scope), mount_prefix)
        if binding is None:
            return None

        root = scope.get("root_path", "").strip("/")
        bound_to = "/".join(part for part in (root, binding.bound_to) if part)
        return cls(bound_to=bound_to, past_binding=binding.past_binding)


def route_path(scope: Dict[str, Any]) -> str:
    """Request path relative to the application's root_path"""
    path = scope["path"]
    root_path = scope.get("root_path", "")
    if not root_path or not path.startswith(root_path):
        return path
    if path == root_path:
        return ""
    if path[len(root_path)] == "/":
        return path[len(root_path):]
    return path


class ClientRegistry:
    """
    Authentication clients available to one request.

    Built fresh for every request because the callback URL depends on the
    request's public address and mount point. Never cache or share it.
    """

    def __init__(
        self,
        callback_url: str,
        clients: List[AuthenticationClient],
        client_name_parameter: str = DEFAULT_CLIENT_NAME_PARAMETER,
    ):
        self.callback_url = callback_url
        self.clients = clients
        self.client_name_parameter = client_name_parameter

    @property
    def names(self) -> List[str]:
        return [client.get_client_name() for client in self.clients]

    def find_client(self, name: Optional[str]) -> Optional[AuthenticationClient]:
        """Return the first client registered under name"""
        if not name:
            return None
        for client in self.clients:
            if client.get_client_name() == name:
                return client
        return None

    def callback_url_for(self, client: AuthenticationClient) -> str:
        """Callback URL carrying the client name parameter"""
        url = URL(self.callback_url).include_query_params(
            **{self.client_name_parameter: client.get_client_name()}
        )
        return str(url)

    def __len__(self) -> int:
        return len(self.clients)

    def __repr__(self) -> str:
        return f"ClientRegistry(callback_url={self.callback_url!r}, clients={self.names!r})"


def build_client_registry(
    request: Request,
    path_binding: PathBinding,
    public_address: PublicAddressResolver,
    clients_provider: ClientsProvider,
    callback_path: str,
    client_name_parameter: str = DEFAULT_CLIENT_NAME_PARAMETER,
) -> ClientRegistry:
    """
    Build the client registry for the current request.

    Args:
        request: Incoming request
        path_binding: Mount binding of the request path
        public_address: Resolver for the externally visible base address
        clients_provider: Application function returning configured clients
        callback_path: Callback sub-path relative to the mount point

    Returns:
        ClientRegistry bound to the absolute callback URL

    Raises:
        ConfigurationError: If the clients provider fails
    """
    callback_url = public_address.get(request, path_binding.bound_to, callback_path)

    try:
        clients = list(clients_provider(request))
    except Exception as e:
        logger.error(f"Clients provider failed: {str(e)}", exc_info=True)
        raise ConfigurationError("Failed to create clients") from e

    return ClientRegistry(callback_url, clients, client_name_parameter)
