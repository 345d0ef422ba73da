"""Authentication callback middleware"""

import logging
from typing import Callable, Optional

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..config import Settings, get_settings
from ..core.auth_client import AuthenticationClient
from ..core.client_registry import (
    ClientRegistry,
    ClientsProvider,
    PathBinding,
    build_client_registry,
)
from ..core.credential_resolver import resolve_profile
from ..core.exceptions import AuthFlowError, ClientNotFoundError, ResolutionError
from ..core.http_action import HttpAction
from ..core.session import REQUESTED_URL, RequestSessionStore, SessionStore
from ..core.web_context import WebContext
from .dependencies import attach_clients
from .public_address import PublicAddress

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Request, AuthFlowError], Response]
SessionStoreFactory = Callable[[Request], SessionStore]


def default_error_handler(request: Request, exc: AuthFlowError) -> Response:
    """
    Log a fatal authentication error and answer 500.

    Args:
        request: Request being processed
        exc: Fatal flow error

    Returns:
        JSON error response
    """
    logger.error(
        f"Authentication flow failed for {request.method} {request.url.path}: {exc.message}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": exc.error_code,
            "message": exc.message,
        },
    )


class CallbackMiddleware(BaseHTTPMiddleware):
    """
    Handles the identity provider callback and exposes clients to routes.

    Callback requests (path past the mount prefix equal to the callback path):
    1. Build the client registry for this request
    2. Look up the client named by the client name parameter
    3. Extract credentials and resolve the profile (worker thread)
    4. Save the profile into the session
    5. Pop the originally requested URL from the session
    6. Redirect there (or to the default URL)

    An HttpAction raised by the client is sent as-is and ends the flow
    before steps 4-6. Other failures go to the error handler.

    Other requests under the mount prefix get the registry attached lazily
    (see dependencies.get_clients) and continue down the pipeline.

    SessionMiddleware must be installed outside this middleware.
    """

    def __init__(
        self,
        app,
        clients_provider: ClientsProvider,
        settings: Optional[Settings] = None,
        public_address: Optional[PublicAddress] = None,
        error_handler: Optional[ErrorHandler] = None,
        session_store_factory: Optional[SessionStoreFactory] = None,
    ):
        """
        Initialize callback middleware.

        Args:
            app: ASGI application
            clients_provider: Returns the configured clients for a request
            settings: Application settings (default: get_settings())
            public_address: Public address resolver (default: from settings)
            error_handler: Builds the response for fatal errors
            session_store_factory: Session access for a request
                (default: RequestSessionStore over SessionMiddleware)
        """
        super().__init__(app)
        settings = settings or get_settings()
        self.clients_provider = clients_provider
        self.callback_path = settings.callback_path.strip("/")
        self.mount_prefix = settings.mount_prefix
        self.client_name_parameter = settings.client_name_parameter
        self.default_url = settings.default_url
        self.public_address = public_address or PublicAddress(settings.public_address)
        self.error_handler = error_handler or default_error_handler
        self.session_store_factory = session_store_factory or RequestSessionStore

        callback_route = "/".join(
            part for part in (self.mount_prefix.strip("/"), self.callback_path) if part
        )
        logger.info(f"Initialized CallbackMiddleware with callback path /{callback_route}")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request: complete a login on callback, otherwise continue.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Redirect, directive or error response on callback; downstream
            response otherwise
        """
        path_binding = PathBinding.from_scope(request.scope, self.mount_prefix)
        if path_binding is None:
            return await call_next(request)

        try:
            if path_binding.past_binding == self.callback_path:
                return await self._handle_callback(request, path_binding)

            registry = self._create_clients(request, path_binding)
        except AuthFlowError as e:
            return self.error_handler(request, e)

        attach_clients(request, registry)
        return await call_next(request)

    async def _handle_callback(self, request: Request, path_binding: PathBinding) -> Response:
        try:
            context = await WebContext.from_request(
                request,
                read_form=True,
                session_store=self.session_store_factory(request),
            )
        except HttpAction as action:
            logger.warning(f"Unreadable callback request: HTTP {action.status_code}")
            return action.to_response()

        registry = self._create_clients(request, path_binding)
        client = self._find_client(context, registry)

        try:
            profile = await resolve_profile(context, client)
        except HttpAction as action:
            logger.debug(
                f"Client {client.get_client_name()} answered callback with "
                f"HTTP {action.status_code}"
            )
            return action.to_response()
        except Exception as e:
            raise ResolutionError("Failed to get user profile") from e

        if profile is not None:
            context.profile_manager.save(profile, exclusive=True)

        requested_url = context.session_store.get(REQUESTED_URL)
        context.session_store.remove(REQUESTED_URL)

        target = requested_url or self.default_url
        logger.info(
            f"Completed {client.get_client_name()} callback "
            f"({'authenticated' if profile else 'no profile'}), redirecting to {target}"
        )
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    def _create_clients(self, request: Request, path_binding: PathBinding) -> ClientRegistry:
        return build_client_registry(
            request,
            path_binding,
            self.public_address,
            self.clients_provider,
            self.callback_path,
            self.client_name_parameter,
        )

    def _find_client(self, context: WebContext, registry: ClientRegistry) -> AuthenticationClient:
        """
        Look up the client named by the request.

        Raises:
            ClientNotFoundError: If the parameter is missing or unknown
        """
        client_name = context.get_request_parameter(self.client_name_parameter)
        if not client_name:
            logger.warning(f"Callback without '{self.client_name_parameter}' parameter")
            raise ClientNotFoundError(
                f"Missing client name parameter: {self.client_name_parameter}"
            )

        client = registry.find_client(client_name)
        if client is None:
            logger.warning(f"Callback for unknown client: {client_name}")
            raise ClientNotFoundError(f"No client found for name: {client_name}")

        return client
