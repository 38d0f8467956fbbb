"""
Synapse Admin API client library

A Python client for the admin endpoints of a Synapse homeserver
(everything below /_synapse/admin/).

Example usage:
    from synapse_admin import SynapseAdminClient

    client = SynapseAdminClient("http://localhost:8008", "admin-access-token")
    user = client.query_user("@admin:localhost")
"""

__version__ = "1.0.0"
__author__ = "Synapse Admin Client"

from .client import SynapseAdminClient, registration_mac
from .exceptions import (
    SynapseAdminError,
    ConfigurationError,
    InvalidRequestError,
    TransportError,
    ApiError,
    ParseError
)
from .constants import (
    ADMIN_PATH_PREFIX,
    DEFAULT_CONFIG
)

__all__ = [
    "SynapseAdminClient",
    "registration_mac",
    "SynapseAdminError",
    "ConfigurationError",
    "InvalidRequestError",
    "TransportError",
    "ApiError",
    "ParseError",
    "ADMIN_PATH_PREFIX",
    "DEFAULT_CONFIG"
]
