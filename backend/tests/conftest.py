import os
import tempfile
from datetime import datetime, timedelta

# Settings are read at import time, so the environment must be ready first
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["UPLOAD_TEMP_DIR"] = tempfile.mkdtemp(prefix="videohub-uploads-")
os.environ["ASSET_CLEANUP_ATTEMPTS"] = "3"
os.environ["ASSET_CLEANUP_BACKOFF_SECONDS"] = "0"

import pytest
from fastapi.testclient import TestClient

from videohub.database import database
from videohub.main import app
from videohub.repositories.user_repository import UserRepository
from videohub.repositories.video_repository import VideoRepository
from videohub.services.asset_cleanup import LeakedAssetLedger, get_leak_ledger
from videohub.services.auth_service import AuthService
from videohub.services.media_store import VIDEO, MediaAsset, get_media_store

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0)


class FakeMediaStore:
    """Records uploads and deletes instead of talking to Supabase."""

    def __init__(self, video_duration: float = 42.5):
        self.video_duration = video_duration
        self.uploads: list[tuple[str, str]] = []
        self.deletes: list[tuple[str, str]] = []
        self.failing_uploads: set[str] = set()
        self.delete_failures = 0

    async def upload(self, local_path, resource_type="image"):
        if not local_path:
            return None
        self.uploads.append((local_path, resource_type))
        if resource_type in self.failing_uploads:
            return None

        name = os.path.basename(local_path)
        return MediaAsset(
            url=f"https://media.test/{resource_type}s/{len(self.uploads)}-{name}",
            resource_type=resource_type,
            duration=self.video_duration if resource_type == VIDEO else None,
        )

    async def delete(self, url, resource_type="image"):
        self.deletes.append((url, resource_type))
        if self.delete_failures > 0:
            self.delete_failures -= 1
            return False
        return True


class FakeRedis:
    def __init__(self):
        self.lists: dict[str, list[str]] = {}

    def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)
        return True

    def lrange(self, key):
        return list(self.lists.get(key, []))


@pytest.fixture
def db_session():
    database.create_all()
    session = database.session()
    try:
        yield session
    finally:
        session.close()
        database.drop_all()


@pytest.fixture
def media_store():
    return FakeMediaStore()


@pytest.fixture
def ledger():
    return LeakedAssetLedger(FakeRedis())


@pytest.fixture
def client(db_session, media_store, ledger):
    app.dependency_overrides[get_media_store] = lambda: media_store
    app.dependency_overrides[get_leak_ledger] = lambda: ledger
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    users = UserRepository(db_session)
    counter = {"n": 0}

    def _make_user(username=None, password="secret-pass", **fields):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        return users.create(
            username=username,
            email=fields.pop("email", f"{username}@videohub.io"),
            full_name=fields.pop("full_name", f"User {counter['n']}"),
            avatar=fields.pop("avatar", f"https://media.test/images/{username}.png"),
            password_hash=AuthService.hash_password(password),
            **fields,
        )

    return _make_user


@pytest.fixture
def make_video(db_session):
    videos = VideoRepository(db_session)
    counter = {"n": 0}

    def _make_video(owner_id, title="A video", **fields):
        counter["n"] += 1
        n = counter["n"]
        return videos.create(
            owner_id=owner_id,
            title=title,
            description=fields.pop("description", f"Description {n}"),
            video_file=fields.pop("video_file", f"https://media.test/videos/{n}.mp4"),
            thumbnail=fields.pop("thumbnail", f"https://media.test/images/{n}.jpg"),
            duration=fields.pop("duration", 60.0),
            created_at=fields.pop("created_at", BASE_TIME + timedelta(minutes=n)),
            **fields,
        )

    return _make_video


@pytest.fixture
def auth_headers():
    def _auth_headers(user) -> dict[str, str]:
        token = AuthService.create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
