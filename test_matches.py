"""
Tests for the match list and per-match messaging
"""
from conftest import auth


def like(client, uid, user_id):
    return client.post("/discovery/swipe", json={"swiped_user_id": user_id, "direction": "right"}, headers=auth(uid))


class TestMessaging:

    def test_messages_come_back_in_send_order(self, client, matched_pair):
        alice, bob, match_id = matched_pair
        for uid, content in (("alice", "hi"), ("bob", "hey!"), ("alice", "coffee?")):
            response = client.post(f"/matches/{match_id}/messages", json={"content": content}, headers=auth(uid))
            assert response.status_code == 201

        messages = client.get(f"/matches/{match_id}/messages", headers=auth("bob")).json()
        assert [m["content"] for m in messages] == ["hi", "hey!", "coffee?"]
        assert messages[0]["sender_id"] == alice["user_id"]

    def test_outsider_cannot_read_messages(self, client, matched_pair, create_profile):
        _, _, match_id = matched_pair
        create_profile("carol", "Carol")
        response = client.get(f"/matches/{match_id}/messages", headers=auth("carol"))
        assert response.status_code == 403
        assert response.json()["detail"] == "Not authorized to view this match"

    def test_empty_message_is_invalid(self, client, matched_pair):
        _, _, match_id = matched_pair
        response = client.post(f"/matches/{match_id}/messages", json={"content": ""}, headers=auth("alice"))
        assert response.status_code == 422


class TestMatchList:

    def test_latest_activity_first(self, client, matched_pair, create_profile):
        alice, bob, bob_match = matched_pair
        carol = create_profile("carol", "Carol")
        like(client, "carol", alice["user_id"])
        like(client, "alice", carol["user_id"])

        client.post(f"/matches/{bob_match}/messages", json={"content": "ping"}, headers=auth("bob"))

        matches = client.get("/matches/", headers=auth("alice")).json()
        assert [m["profile"]["name"] for m in matches] == ["Bob", "Carol"]
        assert matches[0]["latest_message"]["content"] == "ping"
        assert matches[1]["latest_message"] is None
