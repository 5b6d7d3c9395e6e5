from collegestack.modules.moderation.models.assignment import ModeratorAssignment
from collegestack.modules.moderation.services.assignment import assign_moderator

from tests.conftest import auth_headers


def test_slot_holds_exactly_one_assignment(db, seed_profiles):
    teacher = seed_profiles["teacher"]
    assign_moderator(db, seed_profiles["student"].id, "morning", teacher.id)
    assign_moderator(db, seed_profiles["student2"].id, "morning", teacher.id)

    rows = db.query(ModeratorAssignment).filter(ModeratorAssignment.time_slot == "morning").all()
    assert len(rows) == 1
    assert rows[0].student_id == seed_profiles["student2"].id


def test_student_moves_to_new_slot(client, db, seed_profiles):
    teacher, student = seed_profiles["teacher"], seed_profiles["student"]
    assign_moderator(db, student.id, "morning", teacher.id)
    assign_moderator(db, student.id, "evening", teacher.id)

    rows = db.query(ModeratorAssignment).filter(ModeratorAssignment.student_id == student.id).all()
    assert [row.time_slot for row in rows] == ["evening"]

    headers = auth_headers(teacher)
    by_id = {s["id"]: s for s in client.get("/api/v1/moderation/students", headers=headers).json()}
    assert by_id[student.id]["time_slot"] == "evening"
    session = client.get("/api/v1/auth/session", headers=auth_headers(student)).json()
    assert session["moderator_time_slot"] == "evening"


def test_assignment_endpoints(client, seed_profiles):
    teacher, student = seed_profiles["teacher"], seed_profiles["student"]
    headers = auth_headers(teacher)

    response = client.post(
        "/api/v1/moderation/assignments",
        json={"student_id": student.id, "time_slot": "evening"},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["time_slot_label"] == "Evening (3 PM - 6 PM)"

    students = client.get("/api/v1/moderation/students", headers=headers).json()
    by_id = {s["id"]: s for s in students}
    assert by_id[student.id]["time_slot"] == "evening"
    assert by_id[seed_profiles["student2"].id]["time_slot"] is None

    session = client.get("/api/v1/auth/session", headers=auth_headers(student)).json()
    assert session["is_moderator"] is True
    assert session["moderator_time_slot"] == "evening"

    response = client.delete("/api/v1/moderation/assignments/evening", headers=headers)
    assert response.status_code == 204
    assert client.get("/api/v1/moderation/assignments", headers=headers).json() == []


def test_only_teachers_assign(client, seed_profiles):
    response = client.post(
        "/api/v1/moderation/assignments",
        json={"student_id": seed_profiles["student"].id, "time_slot": "morning"},
        headers=auth_headers(seed_profiles["student2"]),
    )
    assert response.status_code == 403


def test_cannot_assign_teacher_or_unknown_slot(client, seed_profiles):
    headers = auth_headers(seed_profiles["teacher"])
    response = client.post(
        "/api/v1/moderation/assignments",
        json={"student_id": seed_profiles["teacher"].id, "time_slot": "morning"},
        headers=headers,
    )
    assert response.status_code == 400

    response = client.post(
        "/api/v1/moderation/assignments",
        json={"student_id": seed_profiles["student"].id, "time_slot": "midnight"},
        headers=headers,
    )
    assert response.status_code == 422


def test_delete_empty_slot_is_not_found(client, seed_profiles):
    response = client.delete("/api/v1/moderation/assignments/morning", headers=auth_headers(seed_profiles["teacher"]))
    assert response.status_code == 404
