"""
Tests for swiping, match creation and the discovery feed
"""
from sqlalchemy.dialects import postgresql

from app.models.match import Match
from app.models.notification import Notification, NotificationType
from app.models.swipe import Swipe, SwipeDirection
from app.models.user import User
from app.services.match_service import SwipeService, canonical_pair, lock_user_pair
from conftest import auth


def swipe(client, uid, target_user_id, direction="right"):
    return client.post(
        "/discovery/swipe",
        json={"swiped_user_id": str(target_user_id), "direction": direction},
        headers=auth(uid),
    )


class TestSwipeUniqueness:
    """A pair can be swiped at most once"""

    def test_second_swipe_is_rejected(self, client, db, create_profile):
        create_profile("alice", "Alice")
        bob = create_profile("bob", "Bob")

        first = swipe(client, "alice", bob["user_id"], "left")
        assert first.status_code == 200
        assert first.json() == {"is_match": False, "match_id": None}

        second = swipe(client, "alice", bob["user_id"], "right")
        assert second.status_code == 409
        assert second.json()["detail"] == "Already swiped on this user"

        swipes = db.query(Swipe).all()
        assert len(swipes) == 1
        assert swipes[0].direction.value == "left"

    def test_self_swipe_rejected(self, client, db, create_profile):
        alice = create_profile("alice", "Alice")
        response = swipe(client, "alice", alice["user_id"])
        assert response.status_code == 400
        assert db.query(Swipe).count() == 0

    def test_unknown_target_rejected(self, client, db, create_profile):
        create_profile("alice", "Alice")
        response = swipe(client, "alice", "00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert db.query(Swipe).count() == 0

    def test_unauthenticated_swipe_rejected(self, client, create_profile):
        bob = create_profile("bob", "Bob")
        response = client.post("/discovery/swipe", json={"swiped_user_id": bob["user_id"], "direction": "right"})
        assert response.status_code == 401


class TestMatchCreation:

    def test_one_sided_like_is_not_a_match(self, client, db, create_profile):
        create_profile("alice", "Alice")
        bob = create_profile("bob", "Bob")

        response = swipe(client, "alice", bob["user_id"])
        assert response.json()["is_match"] is False
        assert db.query(Match).count() == 0

    def test_reciprocal_right_swipes_create_one_canonical_match(self, client, db, create_profile):
        alice = create_profile("alice", "Alice")
        bob = create_profile("bob", "Bob")

        swipe(client, "bob", alice["user_id"])
        response = swipe(client, "alice", bob["user_id"])

        body = response.json()
        assert body["is_match"] is True
        assert body["match_id"]

        matches = db.query(Match).all()
        assert len(matches) == 1
        expected = canonical_pair(matches[0].user1_id, matches[0].user2_id)
        assert (matches[0].user1_id, matches[0].user2_id) == expected
        assert str(matches[0].user1_id) < str(matches[0].user2_id)

    def test_left_swipe_back_does_not_match(self, client, db, create_profile):
        alice = create_profile("alice", "Alice")
        bob = create_profile("bob", "Bob")

        swipe(client, "alice", bob["user_id"])
        response = swipe(client, "bob", alice["user_id"], "left")

        assert response.json()["is_match"] is False
        assert db.query(Match).count() == 0

    def test_match_notifies_both_participants(self, client, db, matched_pair):
        alice, bob, match_id = matched_pair

        notifications = db.query(Notification).filter(Notification.type == NotificationType.MATCH).all()
        assert sorted(str(n.user_id) for n in notifications) == sorted([alice["user_id"], bob["user_id"]])
        assert all(str(n.related_match_id) == match_id for n in notifications)


class TestCanonicalPair:

    def test_order_is_independent_of_arguments(self):
        a = "0a000000-0000-0000-0000-000000000000"
        b = "ff000000-0000-0000-0000-000000000000"
        assert canonical_pair(a, b) == (a, b)
        assert canonical_pair(b, a) == (a, b)


class TestDiscovery:

    def test_no_profile_means_empty_feed(self, client, create_profile):
        create_profile("bob", "Bob")
        response = client.get("/discovery/profiles", headers=auth("alice"))
        assert response.status_code == 200
        assert response.json() == []

    def test_feed_excludes_self_and_swiped(self, client, create_profile):
        create_profile("alice", "Alice")
        bob = create_profile("bob", "Bob")
        carol = create_profile("carol", "Carol")

        swipe(client, "alice", bob["user_id"], "left")

        response = client.get("/discovery/profiles", headers=auth("alice"))
        ids = [p["user_id"] for p in response.json()]
        assert ids == [carol["user_id"]]

    def test_feed_excludes_inactive_profiles(self, client, create_profile):
        create_profile("alice", "Alice")
        create_profile("bob", "Bob")
        client.patch("/profiles/me", json={"is_active": False}, headers=auth("bob"))

        response = client.get("/discovery/profiles", headers=auth("alice"))
        assert response.json() == []

    def test_feed_is_capped_at_ten(self, client, create_profile):
        create_profile("alice", "Alice")
        for i in range(12):
            create_profile(f"founder{i}", f"Founder {i}")

        response = client.get("/discovery/profiles", headers=auth("alice"))
        assert len(response.json()) == 10

    def test_liked_profiles_flag_matches(self, client, matched_pair, create_profile):
        alice, bob, _ = matched_pair
        carol = create_profile("carol", "Carol")
        swipe(client, "alice", carol["user_id"])

        response = client.get("/discovery/liked", headers=auth("alice"))
        liked = {p["user_id"]: p["is_match"] for p in response.json()}
        assert liked == {bob["user_id"]: True, carol["user_id"]: False}

    def test_agent_directory_lists_complete_profiles(self, client, create_profile):
        create_profile("alice", "Alice")
        create_profile("bob", "Bob")
        client.post("/profiles/", json={"name": "Drafty"}, headers=auth("dan"))

        response = client.get("/discovery/agent-profiles", headers=auth("alice"))
        body = response.json()
        assert [p["name"] for p in body["profiles"]] == ["Bob"]
        assert body["current_user"]["name"] == "Alice"


class TestMatchScenario:
    """A without a profile matches Dana, then messages her"""

    def test_end_to_end(self, client, db, create_profile):
        # A signs in but never creates a profile
        me = client.get("/profiles/me", headers=auth("founder-a"))
        assert me.status_code == 200
        assert me.json() is None
        a_user_id = db.query(User).filter(User.firebase_uid == "founder-a").one().id

        dana = create_profile("founder-b", "Dana", skills=["ML"])
        create_profile("founder-c", "Carl")

        assert swipe(client, "founder-b", a_user_id).json()["is_match"] is False

        result = swipe(client, "founder-a", dana["user_id"]).json()
        assert result["is_match"] is True
        match_id = result["match_id"]

        matches = client.get("/matches/", headers=auth("founder-a")).json()
        assert [m["profile"]["name"] for m in matches] == ["Dana"]
        assert matches[0]["profile"]["skills"] == ["ML"]

        sent = client.post(f"/matches/{match_id}/messages", json={"content": "hi"}, headers=auth("founder-a"))
        assert sent.status_code == 201
        assert sent.json()["content"] == "hi"

        rejected = client.post(f"/matches/{match_id}/messages", json={"content": "hi"}, headers=auth("founder-c"))
        assert rejected.status_code == 403


class TestConcurrentSwipes:
    """Opposite swipes on one pair are serialized by row locks on both users"""

    def test_pair_lock_is_taken_in_id_order(self, db, create_user):
        alice = create_user("alice")
        bob = create_user("bob")

        sql = str(lock_user_pair(db, bob.id, alice.id).statement.compile(dialect=postgresql.dialect()))

        assert "ORDER BY users.id" in sql
        assert sql.rstrip().endswith("FOR UPDATE")

    def test_duplicate_insert_race_is_reported_as_conflict(self, client, db, create_profile, monkeypatch):
        create_profile("alice", "Alice")
        bob = create_profile("bob", "Bob")
        assert swipe(client, "alice", bob["user_id"]).status_code == 200

        # The second request misses the first swipe and reaches the unique index
        monkeypatch.setattr(SwipeService, "find_swipe", staticmethod(lambda db, swiper_id, swiped_id: None))
        response = swipe(client, "alice", bob["user_id"], "left")

        assert response.status_code == 409
        assert response.json()["detail"] == "Already swiped on this user"
        swipes = db.query(Swipe).all()
        assert len(swipes) == 1
        assert swipes[0].direction == SwipeDirection.RIGHT

    def test_existing_match_is_returned_not_duplicated(self, client, db, create_user):
        alice = create_user("alice")
        bob = create_user("bob")
        user1_id, user2_id = canonical_pair(alice.id, bob.id)
        existing = Match(user1_id=user1_id, user2_id=user2_id)
        db.add_all([existing, Swipe(swiper_id=bob.id, swiped_id=alice.id, direction=SwipeDirection.RIGHT)])
        db.commit()

        response = swipe(client, "alice", bob.id)

        assert response.json() == {"is_match": True, "match_id": str(existing.id)}
        assert db.query(Match).count() == 1
        assert db.query(Notification).count() == 0

    def test_match_collision_is_not_reported_as_duplicate_swipe(self, client, db, create_user, monkeypatch):
        alice = create_user("alice")
        bob = create_user("bob")
        user1_id, user2_id = canonical_pair(alice.id, bob.id)
        db.add_all([
            Match(user1_id=user1_id, user2_id=user2_id),
            Swipe(swiper_id=bob.id, swiped_id=alice.id, direction=SwipeDirection.RIGHT),
        ])
        db.commit()

        monkeypatch.setattr("app.services.match_service.find_match", lambda db, user_a, user_b: None)
        response = swipe(client, "alice", bob.id)

        assert response.status_code == 409
        assert response.json()["detail"] == "Match already exists for this pair, please retry"
        assert db.query(Match).count() == 1
