"""
Client for the Synapse homeserver admin API.

This module wraps the endpoints below ``/_synapse/admin/`` and computes the
HMAC-SHA1 MAC required for shared-secret user registration.

Caveat: only 3xx and 4xx responses are turned into ``ApiError``. A 5xx
response is handed back to the caller like any other response, so callers
that care about server failures must check ``status_code`` themselves.
"""

import hashlib
import hmac
import json
import logging
from typing import Any, Callable, Dict, Optional

import requests

from . import __version__
from .constants import (
    ADMIN_PATH_PREFIX,
    DEFAULT_CONFIG,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_USER_AGENT,
    JOIN_ROOM_ENDPOINT,
    JSON_CONTENT_TYPE,
    MAC_ADMIN,
    MAC_NOT_ADMIN,
    REGISTER_ENDPOINT,
    ROOM_MEMBERS_ENDPOINT,
    USER_ENDPOINT,
)
from .exceptions import (
    ApiError,
    ConfigurationError,
    InvalidRequestError,
    ParseError,
    TransportError,
)

logger = logging.getLogger(__name__)


def registration_mac(shared_secret: str, nonce: str, username: str,
                     password: str, admin: bool = False) -> str:
    """
    Compute the MAC for shared-secret registration.

    Format: HMAC-SHA1(nonce + "\\0" + username + "\\0" + password + "\\0" + "admin"|"notadmin")

    Args:
        shared_secret: registration_shared_secret from the homeserver config
        nonce: Nonce issued by GET v1/register
        username: Localpart of the user to register
        password: Password of the user to register
        admin: Whether the user is registered as a server admin

    Returns:
        Lowercase hex-encoded MAC
    """
    # user_type is not supported yet
    message = "\0".join([
        nonce,
        username,
        password,
        MAC_ADMIN if admin else MAC_NOT_ADMIN,
    ])
    mac = hmac.new(
        shared_secret.encode('utf-8'),
        message.encode('utf-8'),
        hashlib.sha1
    )
    return mac.hexdigest()


class SynapseAdminClient:
    """
    Client for the Synapse admin API.

    Requests are sent to ``{base_url}/_synapse/admin/{relative_url}`` and carry
    an ``authorization: Bearer <token>`` header once a token is set.
    """

    def __init__(self, base_url: str, token: Optional[str] = None,
                 session: Optional[requests.Session] = None,
                 request_factory: Optional[Callable[..., requests.Request]] = None,
                 **config):
        """
        Initialize the admin client.

        Args:
            base_url: Base URL of the homeserver, e.g. "http://localhost:8008"
            token: Access token of an admin user; may be set later
            session: HTTP transport; a private session is created when omitted
            request_factory: Builds a request from (method, url); defaults to requests.Request
            **config: Configuration options (timeout, user_agent)
        """
        self.base_url = (base_url or '').rstrip('/')

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}
        if not self.config['user_agent']:
            self.config['user_agent'] = f"synapse-admin-client/{__version__}"

        self._validate_config()

        self._token: Optional[str] = None
        if token:
            self.set_admin_access_token(token)

        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.request_factory = request_factory or requests.Request

    def _validate_config(self):
        """Validate client configuration."""
        if not self.base_url:
            raise ConfigurationError("base_url cannot be empty")

        # requests accepts a single number or a (connect, read) pair
        timeout = self.config['timeout']
        if timeout is None:
            return
        if isinstance(timeout, tuple):
            if len(timeout) != 2:
                raise ConfigurationError("timeout tuple must be (connect, read)")
            parts = timeout
        else:
            parts = (timeout,)
        for part in parts:
            if part is None:
                continue
            if isinstance(part, bool) or not isinstance(part, (int, float)) or part <= 0:
                raise ConfigurationError("timeout must be a positive number or a (connect, read) tuple")

    @property
    def token(self) -> Optional[str]:
        """Access token sent with each request, if any."""
        return self._token

    def set_admin_access_token(self, token: str):
        """Replace the access token used for subsequent requests."""
        self._token = token

    def _url(self, relative_url: str) -> str:
        return self.base_url + ADMIN_PATH_PREFIX + relative_url

    def send(self, method: str, relative_url: str, payload: Optional[str] = None) -> requests.Response:
        """
        Send a request to the admin API.

        Args:
            method: HTTP method
            relative_url: URL relative to the admin root, in the form [version]/api
            payload: Request body, usually JSON text; not allowed with GET

        Returns:
            requests.Response object for any status below 300 or from 500 up

        Raises:
            InvalidRequestError: If a payload is given with GET
            TransportError: If the request could not be completed
            ApiError: If the response status is in [300, 500); redirects are not followed
        """
        method = method.upper()
        if method == 'GET' and payload is not None:
            raise InvalidRequestError("GET is incompatible with payload")

        request = self.request_factory(method, self._url(relative_url))
        request.headers[HEADER_USER_AGENT] = self.config['user_agent']
        request.headers[HEADER_ACCEPT] = JSON_CONTENT_TYPE
        if payload:
            request.data = payload.encode('utf-8')
            request.headers[HEADER_CONTENT_TYPE] = JSON_CONTENT_TYPE
        if self._token:
            request.headers[HEADER_AUTHORIZATION] = f"Bearer {self._token}"

        prepared = self.session.prepare_request(request)
        logger.debug("Request: %s %s", method, prepared.url)

        # Proxies and CA bundles from the environment, as Session.request would apply them
        send_kwargs = self.session.merge_environment_settings(prepared.url, {}, None, None, None)
        send_kwargs.update(timeout=self.config['timeout'], allow_redirects=False)

        try:
            response = self.session.send(prepared, **send_kwargs)
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

        logger.debug("Response: %s %s -> %d", method, relative_url, response.status_code)

        if 300 <= response.status_code < 500:
            message = self._error_message(response)
            logger.warning(
                "Admin API error [%s %s] status=%d: %s",
                method, relative_url, response.status_code, message
            )
            raise ApiError(message, response.status_code)

        return response

    def _error_message(self, response: requests.Response) -> str:
        """Message from the "error" field of the body, falling back to the reason phrase."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get('error'):
            return str(body['error'])
        return response.reason or ''

    def _decode(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON in response from {response.url}: {e}") from e

    def _post_json(self, relative_url: str, data: Dict[str, Any]) -> requests.Response:
        return self.send('POST', relative_url, json.dumps(data, separators=(',', ':')))

    def register_user(self, registration_shared_secret: str, username: str, password: str,
                      admin: bool = False, display_name: str = '') -> Dict[str, Any]:
        """
        Register a user non-interactively with the registration shared secret.

        See https://github.com/matrix-org/synapse/blob/master/docs/admin_api/register_api.rst

        Args:
            registration_shared_secret: Registration shared secret
            username: Username
            password: Password
            admin: Should the user be a server admin?
            display_name: Display name

        Returns:
            Returned user data

        Raises:
            ParseError: If the nonce response is not JSON or has no string nonce
        """
        nonce_body = self._decode(self.send('GET', REGISTER_ENDPOINT))
        if not isinstance(nonce_body, dict) or not isinstance(nonce_body.get('nonce'), str):
            raise ParseError("Nonce missing from registration response")
        nonce = nonce_body['nonce']

        mac = registration_mac(registration_shared_secret, nonce, username, password, admin)
        payload = {
            'nonce': nonce,
            'username': username,
            'displayname': display_name,
            'password': password,
            'admin': admin,
            'mac': mac,
        }
        response = self._post_json(REGISTER_ENDPOINT, payload)
        logger.info("Registered user %s (admin=%s)", username, admin)
        return self._decode(response)

    def query_user(self, user_id: str) -> Dict[str, Any]:
        """
        Query user information.

        Args:
            user_id: User ID, e.g. "@admin:localhost"

        Returns:
            User data
        """
        response = self.send('GET', USER_ENDPOINT.format(user_id=user_id))
        return self._decode(response)

    def query_room_members(self, room_id: str) -> Dict[str, Any]:
        """Query room members; returns the members list and total as sent by the server."""
        response = self.send('GET', ROOM_MEMBERS_ENDPOINT.format(room_id=room_id))
        return self._decode(response)

    def join_user_to_room(self, room_id: str, user_id: str):
        """
        Join a user to a room.

        Args:
            room_id: Room ID or alias
            user_id: User ID
        """
        self._post_json(JOIN_ROOM_ENDPOINT.format(room_id=room_id), {'user_id': user_id})

    def close(self):
        """Close the HTTP session if this client created it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
