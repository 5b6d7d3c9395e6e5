import os

os.environ["DATABASE_URL"] = "sqlite:///./test_collegestack.db"
os.environ["ENVIRONMENT"] = "development"
os.environ["UNANSWERED_MONITOR_ENABLED"] = "false"
os.environ["ALLOWED_EMAIL_DOMAINS"] = ""

import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from collegestack.core.clock import utcnow
from collegestack.core.config import settings
from collegestack.core.security import create_access_token
from collegestack.db.base import Base
from collegestack.db.session import get_db
from collegestack.main import app
from collegestack.modules.posts.comments.models.comment import Comment
from collegestack.modules.posts.models.post import Post
from collegestack.modules.posts.services.post import make_preview
from collegestack.modules.profiles.models.profile import Profile
from collegestack.modules.tags.services.tag import set_post_tags

TEST_DB_URL = "sqlite:///./test_collegestack.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

API = settings.API_V1_STR


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


def auth_headers(profile: Profile) -> dict:
    return {"Authorization": f"Bearer {create_access_token(profile.id)}"}


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIRECTORY", str(tmp_path / "uploads"))
    return tmp_path / "uploads"


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_profiles(db):
    profiles = {
        "student": Profile(id="student-1", email="alice@college.edu", username="alice", role="student",
                           course="CSE", semester="Semester 3"),
        "student2": Profile(id="student-2", email="bob@college.edu", username="bob", role="student"),
        "teacher": Profile(id="teacher-1", email="tina@college.edu", username="tina", role="teacher"),
        "admin": Profile(id="admin-1", email="root@college.edu", username="root", role="admin"),
    }
    for p in profiles.values():
        db.add(p)
    db.commit()
    for p in profiles.values():
        db.refresh(p)
    return profiles


@pytest.fixture
def make_post(db):
    """Insert a post with tags directly; age shifts created_at into the past"""
    def _make(author, title="A question", tags=(), content="Some content", age=timedelta(0), votes=0):
        post = Post(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            preview=make_preview(content),
            votes=votes,
            author_id=author.id,
            attachments=[],
            created_at=utcnow() - age,
        )
        db.add(post)
        db.flush()
        set_post_tags(db, post.id, list(tags))
        db.commit()
        db.refresh(post)
        return post

    return _make


@pytest.fixture
def make_comment(db):
    def _make(post, author, content="An answer"):
        comment = Comment(id=str(uuid.uuid4()), content=content, user_id=author.id, post_id=post.id)
        db.add(comment)
        db.commit()
        return comment

    return _make
