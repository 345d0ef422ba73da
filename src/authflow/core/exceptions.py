"""Exceptions raised by the authentication callback flow"""


class AuthFlowError(Exception):
    """
    Base class for fatal authentication flow errors.

    These are surfaced to the middleware's error handler and never retried.
    """

    error_code = "authentication_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientNotFoundError(AuthFlowError):
    """Client name parameter missing or naming no configured client"""

    error_code = "client_not_found"


class ResolutionError(AuthFlowError):
    """Credential extraction or profile resolution failed"""

    error_code = "authentication_failed"


class ConfigurationError(AuthFlowError):
    """Clients provider failed or the host pipeline is misconfigured"""

    error_code = "configuration_error"
