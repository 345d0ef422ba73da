"""HTTP actions raised by authentication clients mid-protocol.

An HttpAction is not an error: it is a complete HTTP response the client
wants sent (redirect to the identity provider, 401, 403, ...). The callback
middleware sends it verbatim and stops processing the request.
"""

from typing import Dict, Optional

from fastapi import Response, status
from fastapi.responses import HTMLResponse, RedirectResponse


class HttpAction(Exception):
    """Response directive carried as an exception"""

    def __init__(
        self,
        status_code: int,
        content: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(f"HTTP action {status_code}")
        self.status_code = status_code
        self.content = content
        self.headers = dict(headers or {})

    def to_response(self) -> Response:
        """Build the exact response this action describes"""
        return Response(
            content=self.content,
            status_code=self.status_code,
            headers=self.headers,
        )


class RedirectAction(HttpAction):
    """Redirect to another location, typically the identity provider"""

    def __init__(
        self,
        location: str,
        status_code: int = status.HTTP_302_FOUND,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code, headers=headers)
        self.location = location

    def to_response(self) -> Response:
        return RedirectResponse(
            url=self.location,
            status_code=self.status_code,
            headers=self.headers,
        )


class SeeOtherAction(RedirectAction):
    def __init__(self, location: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(location, status.HTTP_303_SEE_OTHER, headers=headers)


class OkAction(HttpAction):
    """
    200 with an HTML body.

    Used by protocols that answer with an auto-submitting form (SAML POST
    binding, OIDC form_post).
    """

    def __init__(self, content: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status.HTTP_200_OK, content=content, headers=headers)

    def to_response(self) -> Response:
        return HTMLResponse(
            content=self.content,
            status_code=self.status_code,
            headers=self.headers,
        )


class BadRequestAction(HttpAction):
    def __init__(self, content: Optional[str] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, content=content)


class UnauthorizedAction(HttpAction):
    def __init__(self, content: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(status.HTTP_401_UNAUTHORIZED, content=content, headers=headers)


class ForbiddenAction(HttpAction):
    def __init__(self, content: Optional[str] = None):
        super().__init__(status.HTTP_403_FORBIDDEN, content=content)
