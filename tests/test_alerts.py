import asyncio
import time
from datetime import datetime, timedelta

from collegestack.core.clock import utcnow
from collegestack.core.events import SessionEvents, UNANSWERED_POSTS_CHANGED
from collegestack.modules.catalog.schemas.catalog import CourseCreate
from collegestack.modules.catalog.services.catalog import create_course
from collegestack.modules.moderation.services.alerts import derive_labels, find_unanswered_posts, is_stale
from collegestack.modules.moderation.services.monitor import UnansweredPostMonitor

from tests.conftest import TestingSession, auth_headers

NOW = datetime(2026, 10, 19, 12, 0, 0)
TWO_HOURS = timedelta(hours=2)


def test_exactly_two_hours_is_not_stale():
    assert not is_stale(NOW - TWO_HOURS, 0, NOW, TWO_HOURS)


def test_one_second_past_two_hours_is_stale():
    assert is_stale(NOW - TWO_HOURS - timedelta(seconds=1), 0, NOW, TWO_HOURS)


def test_commented_post_is_never_stale():
    assert not is_stale(NOW - timedelta(days=3), 1, NOW, TWO_HOURS)


def test_derive_labels_skips_general_categories():
    labels = derive_labels(sorted(["Academic", "CSE", "Questions", "Semester 3"]))
    assert labels == {"course": "CSE", "semester": "Semester 3", "subject": None}


def test_derive_labels_picks_first_subject():
    labels = derive_labels(sorted(["DBMS", "Announcement", "Miscellaneous", "IT"]))
    assert labels["course"] == "IT"
    assert labels["semester"] == "Miscellaneous"
    assert labels["subject"] == "DBMS"


def test_derive_labels_general_category_is_never_subject():
    for category in ["Academic", "Events", "Campus Life", "Questions", "Discussion",
                     "Announcement", "Help Wanted", "Resources", "Student Activities", "Faculty"]:
        assert derive_labels([category])["subject"] is None


def test_derive_labels_with_admin_created_course():
    labels = derive_labels(sorted(["MECH", "Semester 1", "Thermodynamics"]), courses=["CSE", "MECH"])
    assert labels == {"course": "MECH", "semester": "Semester 1", "subject": "Thermodynamics"}


def test_unanswered_labels_know_admin_created_courses(db, seed_profiles, make_post):
    create_course(db, CourseCreate(name="MECH"))
    make_post(seed_profiles["student"], tags=["MECH", "Semester 1"], age=timedelta(hours=3))

    [post] = find_unanswered_posts(db)
    assert (post.course, post.semester, post.subject) == ("MECH", "Semester 1", None)


def test_find_unanswered_posts_oldest_first(db, seed_profiles, make_post, make_comment):
    alice = seed_profiles["student"]
    newer = make_post(alice, title="newer", tags=["CSE", "DBMS"], age=timedelta(hours=3))
    older = make_post(alice, title="older", age=timedelta(hours=5))
    answered = make_post(alice, title="answered", age=timedelta(hours=6))
    make_post(alice, title="fresh", age=timedelta(minutes=30))
    make_comment(answered, seed_profiles["teacher"])

    posts = find_unanswered_posts(db)
    assert [p.post_id for p in posts] == [older.id, newer.id]
    assert posts[1].author == "alice"
    assert posts[1].course == "CSE"
    assert posts[1].subject == "DBMS"


def test_unanswered_endpoint_access(client, seed_profiles, make_post):
    make_post(seed_profiles["student"], age=timedelta(hours=3))

    response = client.get("/api/v1/moderation/unanswered", headers=auth_headers(seed_profiles["teacher"]))
    assert response.status_code == 200
    assert response.json()["count"] == 1

    response = client.get("/api/v1/moderation/unanswered", headers=auth_headers(seed_profiles["student"]))
    assert response.status_code == 403
    assert response.json()["redirect"] == "/"


def test_moderator_student_can_see_alerts(client, seed_profiles):
    teacher, student = seed_profiles["teacher"], seed_profiles["student"]
    client.post(
        "/api/v1/moderation/assignments",
        json={"student_id": student.id, "time_slot": "morning"},
        headers=auth_headers(teacher),
    )
    response = client.get("/api/v1/moderation/unanswered", headers=auth_headers(student))
    assert response.status_code == 200
    assert response.json() == {"count": 0, "threshold_minutes": 120, "posts": []}


def test_monitor_publishes_only_when_flagged_set_changes(seed_profiles, make_post, make_comment):
    events = SessionEvents()
    received = []
    events.subscribe(UNANSWERED_POSTS_CHANGED, received.append)
    monitor = UnansweredPostMonitor(session_factory=TestingSession, events=events, interval_seconds=1)

    assert monitor.check_once() is False
    post = make_post(seed_profiles["student"], age=timedelta(hours=3))

    assert monitor.check_once() is True
    assert received[-1]["post_ids"] == [post.id]
    assert monitor.check_once() is False

    make_comment(post, seed_profiles["teacher"])
    assert monitor.check_once() is True
    assert received[-1] == {"count": 0, "post_ids": []}
    assert len(received) == 2


def test_staleness_uses_naive_utc_clock():
    assert utcnow().tzinfo is None


def test_monitor_survives_failing_checks_and_stops_cleanly():
    attempts = []

    def broken_session():
        attempts.append(1)
        raise RuntimeError("database unavailable")

    monitor = UnansweredPostMonitor(session_factory=broken_session, events=SessionEvents(), interval_seconds=0.01)

    async def scenario():
        monitor.start()
        await asyncio.sleep(0.2)
        still_running = monitor.running
        await monitor.stop()
        return still_running

    assert asyncio.run(scenario()) is True
    assert len(attempts) > 1
    assert not monitor.running


def test_monitor_check_does_not_block_the_event_loop(seed_profiles, make_post):
    post = make_post(seed_profiles["student"], age=timedelta(hours=3))

    def slow_session():
        time.sleep(0.5)
        return TestingSession()

    monitor = UnansweredPostMonitor(session_factory=slow_session, events=SessionEvents(), interval_seconds=60)

    async def scenario():
        monitor.start()
        await asyncio.sleep(0)
        started = time.perf_counter()
        await asyncio.sleep(0.05)
        elapsed = time.perf_counter() - started
        # Let the slow check finish before shutting down
        while not monitor.flagged and time.perf_counter() - started < 2:
            await asyncio.sleep(0.05)
        await monitor.stop()
        return elapsed

    assert asyncio.run(scenario()) < 0.3
    assert monitor.flagged == {post.id}
