"""Request view handed to authentication clients"""

from typing import Mapping, Optional

from fastapi import Request
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from .http_action import BadRequestAction
from .session import ProfileManager, RequestSessionStore, SessionStore

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class WebContext:
    """
    Synchronous view over the current request.

    Clients run in worker threads and cannot await the request body, so
    parameters are collected up front by from_request().
    """

    def __init__(
        self,
        request: Request,
        parameters: Mapping[str, str],
        session_store: SessionStore,
    ):
        self.request = request
        self.parameters = dict(parameters)
        self.session_store = session_store
        self.profile_manager = ProfileManager(session_store)

    @classmethod
    async def from_request(
        cls,
        request: Request,
        read_form: bool = False,
        session_store: Optional[SessionStore] = None,
    ) -> "WebContext":
        """
        Build a context for the request.

        Args:
            request: Incoming request
            read_form: Also read form parameters from the body (callbacks
                may be POSTed by the provider)
            session_store: Session access (default: request.session)

        Raises:
            BadRequestAction: If the form body cannot be parsed
        """
        parameters = dict(request.query_params)

        content_type = request.headers.get("content-type", "")
        if read_form and content_type.startswith(FORM_CONTENT_TYPES):
            try:
                form = await request.form()
            except HTTPException as e:
                raise BadRequestAction(e.detail) from e
            except MultiPartException as e:
                raise BadRequestAction(e.message) from e
            for name, value in form.items():
                if isinstance(value, str):
                    parameters.setdefault(name, value)

        if session_store is None:
            session_store = RequestSessionStore(request)

        return cls(request, parameters, session_store)

    def get_request_parameter(self, name: str) -> Optional[str]:
        return self.parameters.get(name)

    def get_request_header(self, name: str) -> Optional[str]:
        return self.request.headers.get(name)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def full_request_url(self) -> str:
        return str(self.request.url)
