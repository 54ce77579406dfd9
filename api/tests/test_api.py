"""
HTTP-level tests for the v1 API.
"""
from datetime import date, timedelta

import pytest

from conftest import FakeEmailSender, FakePushSender
from leetcoach.api.v1.endpoints.cron import get_digest_dispatcher
from leetcoach.core.config import settings
from leetcoach.main import app
from leetcoach.services.digest_service import DigestDispatcher
from leetcoach.services.problem_service import problem_slug

PREFIX = settings.api_v1_prefix
TODAY = "2024-03-10"

COURSE_SCHEDULE = {
    "url": "https://leetcode.com/problems/course-schedule/",
    "title": "Course Schedule",
    "difficulty": "Medium",
    "tags": ["Graph", " ", "Topological Sort "],
}


def _add_problem(client, user_id, payload=None):
    response = client.post(
        f"{PREFIX}/problems",
        params={"user_id": user_id, "today": TODAY},
        json=payload or COURSE_SCHEDULE,
    )
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_problem_slug():
    assert problem_slug("https://leetcode.com/problems/two-sum/description/", "Two Sum") == "two-sum"
    assert problem_slug("https://neetcode.io/problems/islands", "Number  of Islands") == "number-of-islands"


def test_add_problem_creates_card_due_today(client, make_user):
    alice = make_user("alice")

    problem = _add_problem(client, alice.id)

    assert problem["slug"] == "course-schedule"
    assert problem["source"] == "LeetCode"
    assert problem["tags"] == ["Graph", "Topological Sort"]
    assert problem["card"]["due_at"] == TODAY
    assert problem["card"]["state"] == "learning"
    assert problem["card"]["ease_factor"] == 2.5
    assert problem["card"]["repetitions"] == 0


def test_add_same_problem_twice_updates_in_place(client, make_user):
    alice = make_user("alice")
    first = _add_problem(client, alice.id)

    second = _add_problem(client, alice.id, {**COURSE_SCHEDULE, "title": "Course Schedule I", "difficulty": "Hard"})

    assert second["id"] == first["id"]
    assert second["title"] == "Course Schedule I"
    assert second["difficulty"] == "Hard"
    assert second["card"]["id"] == first["card"]["id"]

    problems = client.get(f"{PREFIX}/problems", params={"user_id": alice.id}).json()["problems"]
    assert len(problems) == 1


@pytest.mark.parametrize("payload", [
    {**COURSE_SCHEDULE, "difficulty": "Impossible"},
    {**COURSE_SCHEDULE, "url": "leetcode.com/problems/course-schedule"},
    {**COURSE_SCHEDULE, "title": ""},
])
def test_add_problem_rejects_invalid_input(client, make_user, payload):
    alice = make_user("alice")

    response = client.post(f"{PREFIX}/problems", params={"user_id": alice.id}, json=payload)

    assert response.status_code == 422


def test_list_problems_only_returns_own(client, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    _add_problem(client, alice.id)
    _add_problem(client, alice.id, {**COURSE_SCHEDULE, "url": "https://leetcode.com/problems/two-sum/", "title": "Two Sum"})
    _add_problem(client, bob.id)

    problems = client.get(f"{PREFIX}/problems", params={"user_id": alice.id}).json()["problems"]

    assert [problem["slug"] for problem in problems] == ["two-sum", "course-schedule"]


def test_delete_problem(client, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    problem = _add_problem(client, alice.id)
    client.post(f"{PREFIX}/reviews", json={
        "user_id": alice.id, "card_id": problem["card"]["id"], "result": "pass", "q": 4,
        "duration_sec": 60, "today": TODAY,
    })

    response = client.delete(f"{PREFIX}/problems/{problem['id']}", params={"user_id": bob.id})
    assert response.status_code == 404

    response = client.delete(f"{PREFIX}/problems/{problem['id']}", params={"user_id": alice.id})
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert client.get(f"{PREFIX}/problems", params={"user_id": alice.id}).json()["problems"] == []
    assert client.get(f"{PREFIX}/reviews", params={"user_id": alice.id}).json()["reviews"] == []


def test_reschedule_card(client, make_user):
    alice = make_user("alice")
    card_id = _add_problem(client, alice.id)["card"]["id"]

    response = client.patch(f"{PREFIX}/cards/{card_id}", params={"user_id": alice.id}, json={"due_at": "2024-04-01"})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "due_at": "2024-04-01"}
    queue = client.get(f"{PREFIX}/review-queue", params={"user_id": alice.id, "date": TODAY}).json()
    assert queue["items"] == []


def test_reschedule_other_users_card(client, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    card_id = _add_problem(client, alice.id)["card"]["id"]

    response = client.patch(f"{PREFIX}/cards/{card_id}", params={"user_id": bob.id}, json={"due_at": "2024-04-01"})

    assert response.status_code == 404


def test_submit_review(client, make_user):
    alice = make_user("alice")
    card_id = _add_problem(client, alice.id)["card"]["id"]

    response = client.post(f"{PREFIX}/reviews", json={
        "user_id": alice.id,
        "card_id": card_id,
        "result": "pass",
        "q": 5,
        "duration_sec": 900,
        "error_types": ["off-by-one"],
        "notes": "Forgot the visited set at first",
        "today": TODAY,
    })

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["ok"] is True
    assert body["next_due"] == "2024-03-11"
    assert body["card"]["repetitions"] == 1
    assert body["card"]["ease_factor"] == pytest.approx(2.6)

    reviews = client.get(f"{PREFIX}/reviews", params={"user_id": alice.id}).json()["reviews"]
    assert len(reviews) == 1
    assert reviews[0]["mode"] == "learn"
    assert reviews[0]["q"] == 5


@pytest.mark.parametrize("override", [
    {"q": 6},
    {"q": -1},
    {"result": "skipped"},
    {"duration_sec": -5},
    {"notes": "x" * 201},
])
def test_submit_review_rejects_invalid_input(client, make_user, override):
    alice = make_user("alice")
    card_id = _add_problem(client, alice.id)["card"]["id"]
    payload = {"user_id": alice.id, "card_id": card_id, "result": "pass", "q": 4, "duration_sec": 60}
    payload.update(override)

    response = client.post(f"{PREFIX}/reviews", json=payload)

    assert response.status_code == 422


def test_submit_review_unknown_card(client, make_user):
    alice = make_user("alice")

    response = client.post(f"{PREFIX}/reviews", json={
        "user_id": alice.id, "card_id": 999, "result": "pass", "q": 4, "duration_sec": 60,
    })

    assert response.status_code == 404
    assert response.json()["type"] == "NotFoundError"


def test_review_queue(client, make_user, make_card):
    alice = make_user("alice")
    today = date(2024, 3, 10)
    overdue = make_card(alice.id, today - timedelta(days=2), title="Two Sum")
    due = make_card(alice.id, today, title="Course Schedule")
    make_card(alice.id, today + timedelta(days=1), title="Word Ladder")

    body = client.get(f"{PREFIX}/review-queue", params={"user_id": alice.id, "date": TODAY}).json()

    assert body["reference_date"] == TODAY
    assert [item["id"] for item in body["items"]] == [overdue.id, due.id]
    assert body["items"][0]["problem"]["title"] == "Two Sum"


def test_review_week(client, make_user, make_card):
    alice = make_user("alice")
    today = date(2024, 3, 10)
    overdue = make_card(alice.id, today - timedelta(days=2))
    later = make_card(alice.id, today + timedelta(days=3))
    make_card(alice.id, today + timedelta(days=8))

    body = client.get(f"{PREFIX}/review-week", params={"user_id": alice.id, "today": TODAY}).json()

    assert body["from"] == TODAY
    assert body["to"] == "2024-03-16"
    assert [item["id"] for item in body["items"]] == [overdue.id, later.id]

    future = client.get(
        f"{PREFIX}/review-week",
        params={"user_id": alice.id, "today": TODAY, "from": "2024-03-12", "to": "2024-03-20"},
    ).json()
    assert len(future["items"]) == 2
    assert overdue.id not in [item["id"] for item in future["items"]]


def test_review_week_rejects_inverted_range(client, make_user):
    alice = make_user("alice")

    response = client.get(
        f"{PREFIX}/review-week",
        params={"user_id": alice.id, "from": "2024-03-12", "to": "2024-03-11"},
    )

    assert response.status_code == 400


def test_push_subscribe_is_idempotent(client, make_user):
    alice = make_user("alice")
    payload = {"endpoint": "https://push.example/alice", "keys": {"p256dh": "p256dh-key", "auth": "auth-key"}}

    first = client.post(f"{PREFIX}/push/subscribe", params={"user_id": alice.id}, json=payload)
    second = client.post(f"{PREFIX}/push/subscribe", params={"user_id": alice.id}, json=payload)

    assert first.json() == {"ok": True, "created": True}
    assert second.json() == {"ok": True, "created": False}


@pytest.fixture
def cron(client, monkeypatch, session_factory):
    """Client with a configured cron secret and fake notification senders."""
    monkeypatch.setattr(settings, "cron_secret", "s3cret")
    senders = {"email": FakeEmailSender(), "push": FakePushSender()}
    app.dependency_overrides[get_digest_dispatcher] = lambda: DigestDispatcher(
        session_factory=session_factory,
        email_sender=senders["email"],
        push_sender=senders["push"],
        app_url="https://leetcoach.example",
    )
    return client, senders


def test_cron_daily_requires_key(cron):
    client, senders = cron

    assert client.post(f"{PREFIX}/cron/daily").status_code == 403
    assert client.post(f"{PREFIX}/cron/daily", headers={"X-Cron-Key": "wrong"}).status_code == 403
    assert senders["email"].sent == []


def test_cron_daily_rejects_everything_without_configured_secret(cron, monkeypatch):
    client, _senders = cron
    monkeypatch.setattr(settings, "cron_secret", "")

    assert client.post(f"{PREFIX}/cron/daily", headers={"X-Cron-Key": ""}).status_code == 403


def test_cron_daily_sends_digest(cron, make_user, make_card, make_subscription):
    client, senders = cron
    alice = make_user("alice", email="alice@example.com")
    bob = make_user("bob")
    make_card(alice.id, date.today() - timedelta(days=1))
    make_card(bob.id, date.today() + timedelta(days=2))
    make_subscription(alice.id, "https://push.example/alice")

    response = client.post(f"{PREFIX}/cron/daily", headers={"X-Cron-Key": "s3cret"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["users"] == 1
    assert body["reference_date"] == date.today().isoformat()
    assert [mail["to"] for mail in senders["email"].sent] == ["alice@example.com"]
    assert [push["endpoint"] for push in senders["push"].sent] == ["https://push.example/alice"]


def test_push_public_key(client, monkeypatch):
    monkeypatch.setattr(settings, "vapid_public_key", "BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA_0QTpQtUbVlUls0VJXg7A8u-Ts1XbjhazAkj7I99e8QcYP7DkM")

    response = client.get(f"{PREFIX}/push/public-key")

    assert response.status_code == 200
    assert response.json() == {"public_key": settings.vapid_public_key}


def test_push_public_key_not_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "vapid_public_key", "")

    assert client.get(f"{PREFIX}/push/public-key").status_code == 404
