"""
Tests for social platform connections
"""
from conftest import auth


def connect(client, uid, platform="github", username="alice", url="https://github.com/alice"):
    return client.post(
        "/social/connections",
        json={"platform": platform, "username": username, "profile_url": url},
        headers=auth(uid),
    )


class TestSocialConnections:

    def test_add_then_update_same_platform(self, client):
        first = connect(client, "alice").json()
        assert first["updated"] is False

        second = connect(client, "alice", username="alice-dev", url="https://github.com/alice-dev").json()
        assert second["updated"] is True
        assert second["connection_id"] == first["connection_id"]

        connections = client.get("/social/connections", headers=auth("alice")).json()
        assert len(connections) == 1
        assert connections[0]["username"] == "alice-dev"

    def test_unknown_platform_is_rejected(self, client):
        response = connect(client, "alice", platform="myspace")
        assert response.status_code == 422

    def test_remove_is_owner_only(self, client):
        connection_id = connect(client, "alice").json()["connection_id"]

        assert client.delete(f"/social/connections/{connection_id}", headers=auth("bob")).status_code == 404
        assert client.delete(f"/social/connections/{connection_id}", headers=auth("alice")).status_code == 200
        assert client.get("/social/connections", headers=auth("alice")).json() == []
