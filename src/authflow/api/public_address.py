"""Externally visible address of the server"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import Request

logger = logging.getLogger(__name__)


class PublicAddress:
    """
    Resolves absolute URLs as seen by browsers.

    Uses the configured public address when set. Otherwise the address is
    inferred from the request, honouring reverse proxy headers:
    1. X-Forwarded-Proto / X-Forwarded-Host (first value)
    2. Host header with the request scheme
    """

    def __init__(self, configured: Optional[str] = None):
        self.configured = configured.rstrip("/") if configured else None

    def base(self, request: Request) -> str:
        if self.configured:
            return self.configured

        scheme = _first(request.headers.get("X-Forwarded-Proto")) or request.url.scheme
        host = (
            _first(request.headers.get("X-Forwarded-Host"))
            or request.headers.get("Host")
            or request.url.netloc
        )
        return f"{scheme}://{host}"

    def get(self, request: Request, *segments: str) -> str:
        """
        Build an absolute URL from path segments.

        Empty segments are skipped. Segments are percent-encoded unless
        already encoded, and joined with single slashes.
        """
        parts = [quote(segment.strip("/"), safe="/%") for segment in segments]
        path = "/".join(part for part in parts if part)
        return f"{self.base(request)}/{path}"


def _first(header_value: Optional[str]) -> Optional[str]:
    """First entry of a comma-separated proxy header"""
    if not header_value:
        return None
    return header_value.split(",")[0].strip() or None
