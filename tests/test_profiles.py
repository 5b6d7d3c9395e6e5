from collegestack.core.events import session_events, PROFILE_UPDATED

from tests.conftest import auth_headers


def test_nickname_can_be_set_once(client, seed_profiles):
    headers = auth_headers(seed_profiles["student"])

    response = client.put("/api/v1/profiles/me/nickname", json={"nickname": "  Ally  "}, headers=headers)
    assert response.status_code == 200
    assert response.json()["nickname"] == "Ally"
    assert response.json()["nickname_changed"] is True

    response = client.put("/api/v1/profiles/me/nickname", json={"nickname": "Other"}, headers=headers)
    assert response.status_code == 409
    assert client.get("/api/v1/profiles/me", headers=headers).json()["nickname"] == "Ally"


def test_blank_nickname_rejected(client, seed_profiles):
    response = client.put(
        "/api/v1/profiles/me/nickname", json={"nickname": "   "}, headers=auth_headers(seed_profiles["student"])
    )
    assert response.status_code == 422


def test_update_course_and_semester_publishes_event(client, seed_profiles):
    received = []
    unsubscribe = session_events.subscribe(PROFILE_UPDATED, received.append)
    try:
        response = client.patch(
            "/api/v1/profiles/me",
            json={"course": "ECE", "semester": "Semester 5"},
            headers=auth_headers(seed_profiles["student2"]),
        )
    finally:
        unsubscribe()

    assert response.status_code == 200
    assert (response.json()["course"], response.json()["semester"]) == ("ECE", "Semester 5")
    assert received == [{"profile_id": "student-2", "fields": ["course", "semester"]}]


def test_update_rejects_unknown_course(client, seed_profiles):
    response = client.patch("/api/v1/profiles/me", json={"course": "LAW"}, headers=auth_headers(seed_profiles["student"]))
    assert response.status_code == 400
    assert response.json()["kind"] == "validation"


def test_update_accepts_admin_created_course(client, seed_profiles):
    client.post("/api/v1/catalog/courses", json={"name": "MECH"}, headers=auth_headers(seed_profiles["admin"]))
    response = client.patch("/api/v1/profiles/me", json={"course": "MECH"}, headers=auth_headers(seed_profiles["student"]))
    assert response.status_code == 200
    assert response.json()["course"] == "MECH"


def test_list_by_role_and_stats(client, seed_profiles, make_post, make_comment):
    headers = auth_headers(seed_profiles["teacher"])
    students = client.get("/api/v1/profiles", params={"role": "student"}, headers=headers).json()
    assert [s["username"] for s in students] == ["alice", "bob"]
    assert "email" not in students[0]

    assert client.get("/api/v1/profiles", params={"role": "janitor"}, headers=headers).status_code == 400

    post = make_post(seed_profiles["teacher"])
    make_comment(post, seed_profiles["teacher"])
    make_comment(post, seed_profiles["student"])
    assert client.get("/api/v1/profiles/me/stats", headers=headers).json() == {"posts": 1, "comments": 1}
