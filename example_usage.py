#!/usr/bin/env python3
"""
Basic usage examples for the Synapse admin client library.

This script registers an admin user with the registration shared secret,
then uses its access token to query users and rooms on the homeserver.

Environment:
    SYNAPSE_URL                  homeserver base URL (default http://localhost:8008)
    SYNAPSE_REGISTRATION_SECRET  registration_shared_secret from homeserver.yaml
    SYNAPSE_ADMIN_TOKEN          existing admin token (skips registration)
    SYNAPSE_ROOM_ID              room to inspect (optional)
"""

import logging
import os
import sys
import uuid

from synapse_admin import SynapseAdminClient, SynapseAdminError, ApiError


def main():
    """Run basic usage examples."""

    server_url = os.environ.get("SYNAPSE_URL", "http://localhost:8008")
    shared_secret = os.environ.get("SYNAPSE_REGISTRATION_SECRET", "")
    token = os.environ.get("SYNAPSE_ADMIN_TOKEN")
    room_id = os.environ.get("SYNAPSE_ROOM_ID")

    print("=== Synapse Admin Client Usage Examples ===\n")

    with SynapseAdminClient(server_url, token) as client:
        print(f"1. Client created for: {server_url}\n")

        try:
            if not client.token:
                if not shared_secret:
                    print("Set SYNAPSE_ADMIN_TOKEN or SYNAPSE_REGISTRATION_SECRET first.")
                    sys.exit(1)

                print("2. Registering an admin user...")
                username = f"admin-{uuid.uuid4().hex[:8]}"
                result = client.register_user(
                    shared_secret, username, "change-me", admin=True, display_name="Example Admin"
                )
                client.set_admin_access_token(result["access_token"])
                user_id = result["user_id"]
                print(f"   ✓ Registered {user_id}\n")
            else:
                user_id = None

            if user_id:
                print("3. Querying the new user...")
                user = client.query_user(user_id)
                print(f"   ✓ {user['name']} admin={user.get('admin')} displayname={user.get('displayname')}\n")

            if room_id:
                print(f"4. Querying members of {room_id}...")
                members = client.query_room_members(room_id)
                print(f"   ✓ {members.get('total')} members: {', '.join(members.get('members', []))}")

                if user_id:
                    print(f"   Joining {user_id} to {room_id}...")
                    client.join_user_to_room(room_id, user_id)
                    print("   ✓ Joined")
                print()

            print("5. Demonstrating error handling...")
            try:
                client.query_user("@nobody-here:invalid.example")
            except ApiError as e:
                print(f"   ✓ ApiError {e.status_code}: {e.message}")

            # 5xx responses are not raised, inspect the status yourself
            response = client.send('GET', 'v1/server_version')
            print(f"   Server version endpoint answered {response.status_code}: {response.text.strip()}")
            print()

            print("=== All Examples Completed Successfully! ===")

        except SynapseAdminError as e:
            print(f"Synapse admin error: {e}")
            sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    main()
