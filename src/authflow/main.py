"""
authflow - Main Application

Redirect-based external authentication for FastAPI applications:
- Pluggable authentication clients (OAuth, OIDC, CAS, SAML, ...)
- Identity provider callback handling in middleware
- Session-scoped user profiles and post-login redirect
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from .config import Settings, get_settings
from .core.client_registry import ClientsProvider
from .core.exceptions import AuthFlowError
from .api.middleware import CallbackMiddleware, default_error_handler
from .api.routes import router, create_auth_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


def no_clients(request: Request) -> list:
    """Default clients provider: nothing configured"""
    return []


def create_app(
    clients_provider: Optional[ClientsProvider] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        clients_provider: Returns the authentication clients for a request
        settings: Application settings (default: get_settings())

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    clients_provider = clients_provider or no_clients

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """Application lifespan manager for startup/shutdown events"""
        logger.info("Starting authflow v1.0.0")
        logger.info(f"Listening on {settings.host}:{settings.port}")

        yield

        logger.info("Shutting down authflow")

    app = FastAPI(
        title="authflow",
        description="Redirect-based external authentication",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Middleware added last runs first: CORS, then session, then callback
    app.add_middleware(
        CallbackMiddleware,
        clients_provider=clients_provider,
        settings=settings,
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        https_only=settings.session_https_only,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Fatal flow errors raised from route handlers
    app.add_exception_handler(AuthFlowError, default_error_handler)

    app.include_router(router)
    app.include_router(create_auth_router(settings))

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    # Configure logging level from settings
    logging.getLogger().setLevel(settings.log_level)

    uvicorn.run(
        "authflow.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
