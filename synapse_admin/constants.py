"""
Constants for the Synapse admin client library.
Paths follow https://github.com/matrix-org/synapse/tree/master/docs/admin_api
"""

# Every admin endpoint lives below this segment of the homeserver URL
ADMIN_PATH_PREFIX = "/_synapse/admin/"

# HTTP headers
HEADER_AUTHORIZATION = "authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"
HEADER_ACCEPT = "Accept"

JSON_CONTENT_TYPE = "application/json"

# Relative endpoint templates
REGISTER_ENDPOINT = "v1/register"
USER_ENDPOINT = "v2/users/{user_id}"
ROOM_MEMBERS_ENDPOINT = "v1/rooms/{room_id}/members"
JOIN_ROOM_ENDPOINT = "v1/join/{room_id}"

# Literal values of the admin flag in the registration MAC
MAC_ADMIN = "admin"
MAC_NOT_ADMIN = "notadmin"

# Default configuration values
DEFAULT_CONFIG = {
    'timeout': 30,      # HTTP timeout in seconds
    'user_agent': None, # filled in from the package version when None
}
