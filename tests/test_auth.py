from datetime import timedelta

import pytest

from collegestack.core.events import session_events, SIGNED_IN, SIGNED_OUT
from collegestack.core.security import create_access_token, create_magic_link_token
from collegestack.modules.auth.services import auth as auth_service
from collegestack.modules.profiles.models.profile import Profile

from tests.conftest import auth_headers


@pytest.fixture
def sent_links(monkeypatch):
    links = []

    def fake_send(email, link):
        links.append((email, link))
        return True

    monkeypatch.setattr(auth_service.email_service, "send_magic_link", fake_send)
    return links


def _token_from(link: str) -> str:
    return link.split("token=", 1)[1]


def test_magic_link_round_trip_creates_profile(client, db, sent_links):
    response = client.post("/api/v1/auth/magic-link", json={
        "email": "New.Student@College.edu", "role": "student", "course": "IT", "semester": "Semester 2",
    })
    assert response.status_code == 202
    assert response.json()["delivered"] is True

    email, link = sent_links[0]
    assert email == "new.student@college.edu"
    assert link.startswith("http://localhost:5173/auth/callback?token=")

    response = client.post("/api/v1/auth/callback", json={"token": _token_from(link)})
    assert response.status_code == 200
    body = response.json()
    assert body["redirect"] == "/student"
    assert body["is_new_user"] is True

    profile = db.query(Profile).filter(Profile.email == "new.student@college.edu").one()
    assert profile.username == "new.student"
    assert (profile.course, profile.semester) == ("IT", "Semester 2")


def test_existing_profile_keeps_its_role(client, seed_profiles, sent_links):
    client.post("/api/v1/auth/magic-link", json={"email": "tina@college.edu", "role": "student"})
    token = _token_from(sent_links[0][1])

    body = client.post("/api/v1/auth/callback", json={"token": token}).json()
    assert body["role"] == "teacher"
    assert body["redirect"] == "/teacher"
    assert body["is_new_user"] is False


def test_callback_without_role_claim_is_missing_role(client):
    token = create_magic_link_token("ghost@college.edu", role=None)
    response = client.post("/api/v1/auth/callback", json={"token": token})
    assert response.status_code == 401
    assert response.json()["kind"] == "missing_role"
    assert response.json()["redirect"] == "/login"


def test_callback_rejects_garbage_and_access_tokens(client, seed_profiles):
    assert client.post("/api/v1/auth/callback", json={"token": "garbage"}).status_code == 401
    access = create_access_token(seed_profiles["student"].id)
    response = client.post("/api/v1/auth/callback", json={"token": access})
    assert response.json()["kind"] == "session_expired"


def test_magic_link_can_only_be_used_once(client, db):
    token = create_magic_link_token("eve@college.edu", "student")

    first = client.post("/api/v1/auth/callback", json={"token": token})
    assert first.status_code == 200

    replay = client.post("/api/v1/auth/callback", json={"token": token})
    assert replay.status_code == 401
    assert replay.json()["kind"] == "session_expired"
    assert db.query(Profile).filter(Profile.email == "eve@college.edu").count() == 1


def test_rejected_link_is_not_consumed(client, db):
    token = create_magic_link_token("ghost@college.edu", role=None)
    assert client.post("/api/v1/auth/callback", json={"token": token}).json()["kind"] == "missing_role"
    # Still unused, so the same error comes back rather than session_expired
    assert client.post("/api/v1/auth/callback", json={"token": token}).json()["kind"] == "missing_role"


def test_magic_link_domain_restriction(client, monkeypatch, sent_links):
    monkeypatch.setattr(auth_service, "verify_email_domain", lambda email: email.endswith("@college.edu"))
    response = client.post("/api/v1/auth/magic-link", json={"email": "someone@gmail.com", "role": "student"})
    assert response.status_code == 400
    assert sent_links == []


def test_magic_link_cannot_request_admin(client):
    response = client.post("/api/v1/auth/magic-link", json={"email": "x@college.edu", "role": "admin"})
    assert response.status_code == 422


def test_session_and_signout(client, seed_profiles):
    student = seed_profiles["student"]
    headers = auth_headers(student)
    signed_out = []
    unsubscribe = session_events.subscribe(SIGNED_OUT, signed_out.append)
    try:
        session = client.get("/api/v1/auth/session", headers=headers).json()
        assert session["profile"]["username"] == "alice"
        assert session["is_teacher"] is False
        assert session["is_moderator"] is False

        assert client.post("/api/v1/auth/signout", headers=headers).status_code == 204
        assert signed_out == [{"profile_id": student.id}]

        response = client.get("/api/v1/auth/session", headers=headers)
        assert response.status_code == 401
        assert response.json()["redirect"] == "/login"
    finally:
        unsubscribe()


def test_expired_access_token(client, seed_profiles):
    token = create_access_token(seed_profiles["student"].id, expires_delta=timedelta(seconds=-1))
    response = client.get("/api/v1/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_google_signin_with_development_token(client, db):
    signed_in = []
    unsubscribe = session_events.subscribe(SIGNED_IN, signed_in.append)
    try:
        response = client.post("/api/v1/auth/google-signin", json={
            "firebase_token": "test_firebase_token", "role": "teacher",
        })
    finally:
        unsubscribe()

    assert response.status_code == 200
    assert response.json()["redirect"] == "/teacher"
    profile = db.query(Profile).filter(Profile.email == "test@example.com").one()
    assert profile.auth_provider == "google"
    assert signed_in[0]["is_new_user"] is True


def test_google_signin_email_mismatch(client):
    response = client.post("/api/v1/auth/google-signin", json={
        "firebase_token": "test_firebase_token", "email": "other@college.edu",
    })
    assert response.status_code == 401


def test_smtp_failure_is_reported(client, monkeypatch):
    import smtplib

    class BrokenSMTP:
        def __init__(self, *args, **kwargs):
            raise smtplib.SMTPConnectError(421, "service not available")

    service = auth_service.email_service
    monkeypatch.setattr(service, "smtp_server", "smtp.college.edu")
    monkeypatch.setattr(service, "smtp_user", "mailer")
    monkeypatch.setattr(service, "smtp_password", "secret")
    monkeypatch.setattr("collegestack.core.mailer.smtplib.SMTP", BrokenSMTP)

    response = client.post("/api/v1/auth/magic-link", json={"email": "x@college.edu", "role": "student"})
    assert response.status_code == 502
    assert response.json()["kind"] == "email_delivery_failure"


def test_magic_link_course_must_be_known(client, seed_profiles, sent_links):
    request = {"email": "mech.student@college.edu", "role": "student", "course": "MECH"}
    response = client.post("/api/v1/auth/magic-link", json=request)
    assert response.status_code == 400
    assert sent_links == []

    client.post("/api/v1/catalog/courses", json={"name": "MECH"}, headers=auth_headers(seed_profiles["admin"]))
    assert client.post("/api/v1/auth/magic-link", json=request).status_code == 202
    assert len(sent_links) == 1
