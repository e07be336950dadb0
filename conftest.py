"""
Shared fixtures: an in-memory SQLite database, Firebase verification that
treats the bearer token as the uid, an S3 client double and a task queue
that runs persona replies synchronously.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TASK_WORKER_ENABLED", "false")

import pytest
from fastapi import Header, HTTPException, status
from fastapi.testclient import TestClient
from langchain_core.language_models import FakeListChatModel
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.auth import verify_firebase_token
from app.core.database import Base, get_db
from app.models.user import User
from app.services.ai_chat_service import GENERATE_AI_RESPONSE
from app.services.persona import PersonaResponder
from app.services.storage import BlobStore
from app.services.task_queue import TaskQueue

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def fake_verify_firebase_token(authorization: str = Header(None)):
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    uid = authorization.split(" ", 1)[1]
    return {"uid": uid, "email": f"{uid}@example.com", "name": uid.title(), "picture": None}


class FakeS3Client:
    """Records deletes and hands out predictable presigned URLs"""

    def __init__(self):
        self.deleted = []

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn):
        return f"https://blobs.test/{Params['Bucket']}/{Params['Key']}?op={ClientMethod}"

    def delete_object(self, Bucket, Key):
        self.deleted.append(Key)


class FailingChatModel(FakeListChatModel):
    """Chat model whose provider call always fails"""

    def _call(self, *args, **kwargs):
        raise RuntimeError("completion provider unavailable")


def auth(uid: str) -> dict:
    return {"Authorization": f"Bearer {uid}"}


def profile_payload(name: str, **overrides) -> dict:
    payload = {
        "name": name,
        "bio": f"{name} builds things.",
        "skills": ["python"],
        "interests": ["startups"],
        "looking_for": "technical co-founder",
        "experience": "intermediate",
        "location": "Berlin",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def blob_store():
    return BlobStore(client=FakeS3Client(), bucket="test-bucket")


@pytest.fixture
def chat_model():
    return FakeListChatModel(responses=["Happy to talk about what I'm building."])


@pytest.fixture
def task_queue(chat_model):
    responder = PersonaResponder(llm=chat_model, session_factory=TestingSessionLocal)
    queue = TaskQueue()
    queue.register(GENERATE_AI_RESPONSE, responder.generate_response)
    return queue


@pytest.fixture
def client(db, blob_store, task_queue):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[verify_firebase_token] = fake_verify_firebase_token
    app.state.blob_store = blob_store
    app.state.task_queue = task_queue
    app.state.embeddings_model = None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def create_user(db):
    def _create(uid: str) -> User:
        user = User(firebase_uid=uid, email=f"{uid}@example.com", name=uid.title())
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _create


@pytest.fixture
def create_profile(client):
    """Create a profile through the API and return its JSON"""
    def _create(uid: str, name: str, **overrides) -> dict:
        response = client.post("/profiles/", json=profile_payload(name, **overrides), headers=auth(uid))
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def matched_pair(client, create_profile):
    """Alice and Bob with profiles who swiped right on each other"""
    alice = create_profile("alice", "Alice")
    bob = create_profile("bob", "Bob")
    client.post("/discovery/swipe", json={"swiped_user_id": bob["user_id"], "direction": "right"}, headers=auth("alice"))
    response = client.post("/discovery/swipe", json={"swiped_user_id": alice["user_id"], "direction": "right"}, headers=auth("bob"))
    assert response.json()["is_match"] is True
    return alice, bob, response.json()["match_id"]
