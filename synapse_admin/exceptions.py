"""
Custom exceptions for the Synapse admin client library.
"""

from typing import Optional


class SynapseAdminError(Exception):
    """Base exception for Synapse admin client errors."""
    pass


class ConfigurationError(SynapseAdminError):
    """Raised when client configuration is invalid."""
    pass


class InvalidRequestError(SynapseAdminError, ValueError):
    """Raised when a request is malformed before it is sent (e.g. GET with a body)."""
    pass


class TransportError(SynapseAdminError):
    """Raised when the HTTP transport cannot complete the exchange."""
    pass


class ParseError(SynapseAdminError, ValueError):
    """Raised when a response body is not the JSON the caller expects."""
    pass


class ApiError(SynapseAdminError):
    """
    Raised when the homeserver answers with a 3xx or 4xx status.

    Attributes:
        status_code: HTTP status code of the response
        errcode: machine-readable error code; not populated yet, always None
    """

    def __init__(self, message: str, status_code: int, errcode: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errcode = errcode
