"""
Tests for profiles, photos and usernames
"""
from app.models.profile import Profile
from app.schemas.profile import ProfileUpdate
from app.services.profile_service import apply_profile_update, is_profile_complete, validate_username
from conftest import auth, profile_payload


class TestProfileLifecycle:

    def test_create_and_fetch(self, client, create_profile):
        created = create_profile("alice", "Alice")
        assert created["is_complete"] is True
        assert created["photos"] == []

        me = client.get("/profiles/me", headers=auth("alice")).json()
        assert me["id"] == created["id"]

    def test_second_profile_conflicts(self, client, create_profile):
        create_profile("alice", "Alice")
        response = client.post("/profiles/", json=profile_payload("Alice Again"), headers=auth("alice"))
        assert response.status_code == 409

    def test_partial_update_only_touches_given_fields(self, client, create_profile):
        create_profile("alice", "Alice")
        response = client.patch("/profiles/me", json={"bio": "New bio"}, headers=auth("alice"))
        body = response.json()
        assert body["bio"] == "New bio"
        assert body["name"] == "Alice"
        assert body["skills"] == ["python"]

    def test_update_without_profile_is_not_found(self, client):
        response = client.patch("/profiles/me", json={"bio": "x"}, headers=auth("ghost"))
        assert response.status_code == 404


class TestApplyProfileUpdate:

    def test_none_fields_are_ignored_and_completeness_recomputed(self):
        profile = Profile(name="Alice", bio="", looking_for="designer", experience="expert", skills=["go"])
        changed = apply_profile_update(profile, ProfileUpdate(bio="Builder", skills=None))

        assert changed == ["bio"]
        assert profile.skills == ["go"]
        assert profile.is_complete is True

    def test_blank_required_field_is_incomplete(self):
        profile = Profile(name="Alice", bio="  ", looking_for="designer", experience="expert")
        assert is_profile_complete(profile) is False


class TestPhotos:

    def test_add_photo_creates_placeholder_profile(self, client):
        response = client.post("/profiles/me/photos", json={"storage_id": "photos/p1.jpg"}, headers=auth("alice"))
        assert response.status_code == 200
        body = response.json()
        assert body["is_complete"] is False
        assert body["photos"][0]["id"] == "photos/p1.jpg"
        assert body["photos"][0]["url"].startswith("https://blobs.test/test-bucket/photos/p1.jpg")

    def test_remove_photo(self, client, create_profile):
        create_profile("alice", "Alice")
        client.post("/profiles/me/photos", json={"storage_id": "photos/p1.jpg"}, headers=auth("alice"))
        client.post("/profiles/me/photos", json={"storage_id": "photos/p2.jpg"}, headers=auth("alice"))

        response = client.delete("/profiles/me/photos/photos/p1.jpg", headers=auth("alice"))
        assert [p["id"] for p in response.json()["photos"]] == ["photos/p2.jpg"]

    def test_upload_url(self, client):
        response = client.post("/profiles/upload-url", headers=auth("alice"))
        body = response.json()
        assert body["storage_id"].startswith("photos/")
        assert "op=put_object" in body["upload_url"]


class TestUsernames:

    def test_validation_rules(self):
        assert validate_username("ab") is not None
        assert validate_username("a" * 31) is not None
        assert validate_username("Has_Caps") is not None
        assert validate_username("-edge") is not None
        assert validate_username("edge-") is not None
        assert validate_username("good-name-42") is None

    def test_claim_and_public_lookup(self, client, create_profile):
        create_profile("alice", "Alice")
        response = client.put("/profiles/me/username", json={"username": "Alice-Builds"}, headers=auth("alice"))
        assert response.status_code == 200
        assert response.json()["username"] == "alice-builds"

        public = client.get("/profiles/u/alice-builds")
        assert public.status_code == 200
        assert public.json()["name"] == "Alice"

    def test_taken_username_conflicts(self, client, create_profile):
        create_profile("alice", "Alice")
        create_profile("bob", "Bob")
        client.put("/profiles/me/username", json={"username": "founder"}, headers=auth("alice"))

        response = client.put("/profiles/me/username", json={"username": "founder"}, headers=auth("bob"))
        assert response.status_code == 409

        check = client.get("/profiles/username/check", params={"username": "founder"}, headers=auth("bob")).json()
        assert check["available"] is False

    def test_invalid_username_is_bad_request(self, client, create_profile):
        create_profile("alice", "Alice")
        response = client.put("/profiles/me/username", json={"username": "no"}, headers=auth("alice"))
        assert response.status_code == 400

    def test_generated_username_gets_suffix_when_taken(self, client, create_profile):
        create_profile("alice", "Ada Lovelace")
        create_profile("bob", "Ada Lovelace")
        client.put("/profiles/me/username", json={"username": "ada-lovelace"}, headers=auth("alice"))

        response = client.post("/profiles/username/generate", headers=auth("bob"))
        assert response.json()["username"] == "ada-lovelace-2"

    def test_inactive_profile_is_hidden_publicly(self, client, create_profile):
        create_profile("alice", "Alice")
        client.put("/profiles/me/username", json={"username": "alice"}, headers=auth("alice"))
        client.patch("/profiles/me", json={"is_active": False}, headers=auth("alice"))

        assert client.get("/profiles/u/alice").status_code == 404
