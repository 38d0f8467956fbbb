"""
Integration tests against a running Synapse homeserver.

Set SYNAPSE_URL and SYNAPSE_REGISTRATION_SECRET (the homeserver's
registration_shared_secret) to run them, e.g. against
`docker run -p 8008:8008 matrixdotorg/synapse`.
"""

import os
import uuid

import pytest
import requests

from synapse_admin import SynapseAdminClient, ApiError


class TestIntegration:
    """Integration tests with a Synapse homeserver."""
    SERVER_URL = os.environ.get("SYNAPSE_URL", "")
    REGISTRATION_SECRET = os.environ.get("SYNAPSE_REGISTRATION_SECRET", "")

    @pytest.fixture(scope="class", autouse=True)
    def homeserver(self):
        """Skip unless a homeserver is reachable."""
        if not self.SERVER_URL or not self.REGISTRATION_SECRET:
            pytest.skip("SYNAPSE_URL and SYNAPSE_REGISTRATION_SECRET not set")

        try:
            response = requests.get(f"{self.SERVER_URL}/health", timeout=5)
            if response.status_code != 200:
                raise Exception("Server not responding")
        except Exception as e:
            pytest.skip(f"Synapse not reachable: {e}")

    @pytest.fixture(scope="class")
    def admin(self):
        """Register an admin user and return (client, user_id)."""
        client = SynapseAdminClient(self.SERVER_URL)
        username = f"admin{uuid.uuid4().hex[:8]}"
        result = client.register_user(
            self.REGISTRATION_SECRET, username, "admin-password", admin=True
        )
        client.set_admin_access_token(result["access_token"])
        yield client, result["user_id"]
        client.close()

    def test_register_with_wrong_secret(self):
        """Test that a bad MAC is rejected by the server."""
        client = SynapseAdminClient(self.SERVER_URL)

        with pytest.raises(ApiError) as exc_info:
            client.register_user("wrong-secret", f"user{uuid.uuid4().hex[:8]}", "pw")

        assert exc_info.value.status_code == 403

    def test_query_user(self, admin):
        """Test querying the registered admin."""
        client, user_id = admin

        user = client.query_user(user_id)

        assert user["name"] == user_id
        assert user["admin"] in (True, 1)

    def test_query_user_without_token(self, admin):
        """Test that admin endpoints reject unauthenticated requests."""
        _, user_id = admin
        client = SynapseAdminClient(self.SERVER_URL)

        with pytest.raises(ApiError) as exc_info:
            client.query_user(user_id)

        assert exc_info.value.status_code == 401

    def test_register_plain_user(self, admin):
        """Test registering a non-admin user with a display name."""
        client, _ = admin
        username = f"user{uuid.uuid4().hex[:8]}"

        result = client.register_user(
            self.REGISTRATION_SECRET, username, "pw", display_name="Plain User"
        )

        user = client.query_user(result["user_id"])
        assert user["displayname"] == "Plain User"
        assert user["admin"] in (False, 0)

    def test_room_members_and_join(self, admin):
        """Test joining a user to a room and listing members."""
        client, admin_id = admin

        room = requests.post(
            f"{self.SERVER_URL}/_matrix/client/v3/createRoom",
            json={"preset": "public_chat"},
            headers={"Authorization": f"Bearer {client.token}"},
            timeout=10,
        ).json()
        room_id = room["room_id"]

        user = client.register_user(
            self.REGISTRATION_SECRET, f"user{uuid.uuid4().hex[:8]}", "pw"
        )
        client.join_user_to_room(room_id, user["user_id"])

        members = client.query_room_members(room_id)
        assert admin_id in members["members"]
        assert user["user_id"] in members["members"]
        assert members["total"] == 2

    def test_unknown_room(self, admin):
        """Test that joining an unknown room raises ApiError."""
        client, admin_id = admin

        with pytest.raises(ApiError):
            client.join_user_to_room("!doesnotexist:localhost", admin_id)
