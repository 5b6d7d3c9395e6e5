from collegestack.modules.catalog.models.catalog import Subject

from tests.conftest import auth_headers


def test_catalog_requires_admin(client, seed_profiles):
    response = client.post("/api/v1/catalog/courses", json={"name": "LAW"}, headers=auth_headers(seed_profiles["teacher"]))
    assert response.status_code == 403
    assert response.json()["kind"] == "role_mismatch"


def test_course_and_subject_lifecycle(client, db, seed_profiles):
    headers = auth_headers(seed_profiles["admin"])

    course = client.post("/api/v1/catalog/courses", json={"name": "CSE"}, headers=headers).json()
    assert client.post("/api/v1/catalog/courses", json={"name": "CSE"}, headers=headers).status_code == 409

    response = client.post(
        "/api/v1/catalog/subjects",
        json={"name": "Compilers", "course_id": course["id"], "semester": 3},
        headers=headers,
    )
    assert response.status_code == 201
    assert client.post(
        "/api/v1/catalog/subjects",
        json={"name": "Bad", "course_id": course["id"], "semester": 9},
        headers=headers,
    ).status_code == 422

    subjects = client.get("/api/v1/catalog/subjects-for", params={"course": "CSE", "semester": "Semester 3"}).json()
    assert subjects["subjects"] == ["Electrical Science", "DBMS", "Compilers"]

    assert client.delete(f"/api/v1/catalog/courses/{course['id']}", headers=headers).status_code == 204
    assert db.query(Subject).count() == 0
    assert client.get("/api/v1/catalog/courses", headers=headers).json() == []


def test_new_course_joins_vocabulary_and_semester_view(client, seed_profiles):
    headers = auth_headers(seed_profiles["admin"])
    client.post("/api/v1/catalog/courses", json={"name": "LAW"}, headers=headers)

    vocabulary = client.get("/api/v1/catalog/vocabulary").json()
    assert vocabulary["courses"][-1] == "LAW"
    assert "Miscellaneous" in vocabulary["semesters"]
    assert len(vocabulary["general_categories"]) == 10

    assert client.get("/api/v1/semester-view", params={"course": "LAW"}).status_code == 200
