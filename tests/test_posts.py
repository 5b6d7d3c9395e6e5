from collegestack.core.errors import CollegeStackError, ErrorKind
from collegestack.core.storage import r2_storage
from collegestack.modules.posts.comments.models.comment import Comment
from collegestack.modules.posts.models.post import Post
from collegestack.modules.posts.services.post import make_preview
from collegestack.modules.posts.votes.services.vote import handle_vote
from collegestack.modules.tags.models.tag import PostTag, Tag

from tests.conftest import auth_headers


def _create(client, profile, **overrides):
    payload = {"title": "How do joins work?", "content": "Explain inner joins", "tags": ["DBMS", "CSE"]}
    payload.update(overrides)
    return client.post("/api/v1/posts", json=payload, headers=auth_headers(profile))


def test_preview_truncates_to_fifty_words():
    content = " ".join(f"w{i}" for i in range(60))
    preview = make_preview(content)
    assert preview.endswith("...")
    assert len(preview[:-3].split()) == 50
    assert make_preview("short post") == "short post"


def test_create_post_creates_unknown_tags_and_sorts_them(client, db, seed_profiles):
    response = _create(client, seed_profiles["student"], tags=["Semester 3", "Brand New Tag", "CSE"])
    assert response.status_code == 201
    body = response.json()
    assert body["tags"] == ["Brand New Tag", "CSE", "Semester 3"]
    assert body["author"]["username"] == "alice"
    assert body["votes"] == 0
    assert body["comment_count"] == 0
    assert db.query(Tag).filter(Tag.name == "Brand New Tag").count() == 1


def test_create_post_requires_auth_and_title(client, seed_profiles):
    assert client.post("/api/v1/posts", json={"title": "x", "content": "y"}).status_code == 401
    assert _create(client, seed_profiles["student"], title="   ").status_code == 422


def test_read_post_with_comment_count(client, seed_profiles, make_post, make_comment):
    post = make_post(seed_profiles["student"], tags=["IT"])
    make_comment(post, seed_profiles["teacher"])

    body = client.get(f"/api/v1/posts/{post.id}").json()
    assert body["comment_count"] == 1
    assert body["tags"] == ["IT"]
    assert client.get("/api/v1/posts/missing").status_code == 404


def test_only_author_can_edit(client, seed_profiles):
    post_id = _create(client, seed_profiles["student"]).json()["id"]

    response = client.put(
        f"/api/v1/posts/{post_id}", json={"title": "Hijacked"}, headers=auth_headers(seed_profiles["student2"])
    )
    assert response.status_code == 403

    response = client.put(
        f"/api/v1/posts/{post_id}",
        json={"content": "Updated body", "tags": ["ECE"]},
        headers=auth_headers(seed_profiles["student"]),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "How do joins work?"
    assert body["preview"] == "Updated body"
    assert body["tags"] == ["ECE"]


def test_delete_post_removes_rows(client, db, seed_profiles, make_post, make_comment):
    alice = seed_profiles["student"]
    post = make_post(alice, tags=["CSE"])
    make_comment(post, seed_profiles["teacher"])
    handle_vote(db, post.id, seed_profiles["teacher"].id)

    response = client.delete(f"/api/v1/posts/{post.id}", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json() == {"post_id": post.id, "deleted": True, "failed_steps": []}

    db.expire_all()
    assert db.query(Post).count() == 0
    assert db.query(Comment).count() == 0
    assert db.query(PostTag).count() == 0
    # tags themselves survive
    assert db.query(Tag).filter(Tag.name == "CSE").count() == 1


def test_delete_post_reports_attachment_failures(client, db, seed_profiles, make_post, monkeypatch):
    alice = seed_profiles["student"]
    post = make_post(alice)
    post.attachments = [
        {"name": "a.pdf", "url": "u1", "size": 1, "key": "post_attachments/a.pdf"},
        {"name": "b.pdf", "url": "u2", "size": 1, "key": "post_attachments/b.pdf"},
    ]
    db.commit()

    def flaky_delete(key):
        if key.endswith("a.pdf"):
            raise CollegeStackError(ErrorKind.STORAGE_FAILURE, "bucket unavailable")

    monkeypatch.setattr(r2_storage, "delete_object", flaky_delete)

    response = client.delete(f"/api/v1/posts/{post.id}", headers=auth_headers(alice))
    assert response.status_code == 200
    body = response.json()
    assert body["deleted"] is True
    assert body["failed_steps"] == [{"step": "remove_attachment:post_attachments/a.pdf", "error": "bucket unavailable"}]

    db.expire_all()
    assert db.query(Post).count() == 0


def test_search_by_title_and_tags(client, seed_profiles, make_post):
    alice = seed_profiles["student"]
    make_post(alice, title="Normalization help", tags=["DBMS", "Questions"])
    make_post(alice, title="Exam schedule", tags=["Announcement"])
    make_post(alice, title="Deadlock question", tags=["Operating System", "Questions"])

    titles = lambda r: sorted(p["title"] for p in r.json())

    assert titles(client.get("/api/v1/posts/search", params={"q": "NORMAL"})) == ["Normalization help"]
    # tag names match too
    assert titles(client.get("/api/v1/posts/search", params={"q": "announce"})) == ["Exam schedule"]
    assert titles(client.get("/api/v1/posts/search", params={"tags": ["Questions"]})) == [
        "Deadlock question", "Normalization help",
    ]
    assert titles(client.get("/api/v1/posts/search", params={"q": "dead", "tags": ["Questions", "DBMS"]})) == []


def test_upload_and_remove_attachment(client, seed_profiles, make_post, upload_dir):
    alice = seed_profiles["student"]
    post = make_post(alice)

    response = client.post(
        f"/api/v1/posts/{post.id}/attachments",
        files=[("files", ("notes.pdf", b"%PDF-1.4 notes", "application/pdf"))],
        headers=auth_headers(alice),
    )
    assert response.status_code == 200
    attachment = response.json()["attachments"][0]
    assert attachment["name"] == "notes.pdf"
    assert attachment["size"] == len(b"%PDF-1.4 notes")
    assert attachment["key"].startswith("post_attachments/")
    assert (upload_dir / attachment["key"]).exists()

    media = client.get(f"/api/v1/media/{attachment['key']}")
    assert media.status_code == 200
    assert media.content == b"%PDF-1.4 notes"

    response = client.delete(f"/api/v1/posts/{post.id}/attachments/{attachment['key']}", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["attachments"] == []
    assert not (upload_dir / attachment["key"]).exists()


def test_attachment_validation(client, seed_profiles, make_post, monkeypatch):
    from collegestack.core.config import settings

    alice = seed_profiles["student"]
    post = make_post(alice)

    response = client.post(
        f"/api/v1/posts/{post.id}/attachments",
        files=[("files", ("script.exe", b"MZ", "application/octet-stream"))],
        headers=auth_headers(alice),
    )
    assert response.status_code == 400
    assert response.json()["kind"] == "unsupported_file_type"

    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 4)
    response = client.post(
        f"/api/v1/posts/{post.id}/attachments",
        files=[("files", ("big.txt", b"0123456789", "text/plain"))],
        headers=auth_headers(alice),
    )
    assert response.status_code == 413
    assert response.json()["kind"] == "file_too_large"


def test_media_rejects_paths_outside_upload_dir(client):
    assert client.get("/api/v1/media/../conftest.py").status_code == 404
