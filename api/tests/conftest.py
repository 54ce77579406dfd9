import os
from datetime import date, datetime

import pytest

# Settings are read at import time and require a database URL
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import SQLModel, Session, create_engine  # noqa: E402

from leetcoach.main import app  # noqa: E402
from leetcoach.core.database import get_session, get_session_factory  # noqa: E402
from leetcoach.models.models import Card, Problem, PushSubscription, Review, User  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    # File-backed so the digest's worker threads each get their own connection
    engine = create_engine(
        f"sqlite:///{tmp_path / 'leetcoach-test.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return lambda: Session(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine, session_factory):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    def _make_user(username, email=None, email_verified=True, full_name=None):
        user = User(username=username, email=email, email_verified=email_verified, full_name=full_name)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_card(session):
    """Create a problem and its card in one go."""
    counter = {"n": 0}

    def _make_card(user_id, due_at, title=None, difficulty="Medium", tags=None, **card_fields):
        counter["n"] += 1
        title = title or f"Problem {counter['n']}"
        slug = title.lower().replace(" ", "-")
        problem = Problem(
            user_id=user_id,
            slug=slug,
            url=f"https://leetcode.com/problems/{slug}/",
            title=title,
            difficulty=difficulty,
            tags=tags or [],
        )
        session.add(problem)
        session.flush()
        card = Card(user_id=user_id, problem_id=problem.id, due_at=due_at, **card_fields)
        session.add(card)
        session.commit()
        session.refresh(card)
        return card
    return _make_card


@pytest.fixture
def make_review(session):
    def _make_review(card, finished_at, result="pass", q=4):
        review = Review(
            user_id=card.user_id,
            problem_id=card.problem_id,
            card_id=card.id,
            mode="review",
            started_at=finished_at,
            finished_at=finished_at,
            duration_sec=0,
            result=result,
            q=q,
            error_types=[],
        )
        session.add(review)
        session.commit()
        return review
    return _make_review


@pytest.fixture
def make_subscription(session):
    def _make_subscription(user_id, endpoint):
        subscription = PushSubscription(user_id=user_id, endpoint=endpoint, p256dh="p256dh-key", auth="auth-key")
        session.add(subscription)
        session.commit()
        return subscription
    return _make_subscription


class FakeEmailSender:
    """Records sent emails; can be told to fail or raise."""

    def __init__(self, succeed=True, raise_error=False):
        self.succeed = succeed
        self.raise_error = raise_error
        self.sent = []

    def send(self, to, subject, html):
        if self.raise_error:
            raise RuntimeError("smtp down")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return self.succeed


class FakePushSender:
    """Records pushes; endpoints listed in failing_endpoints raise."""

    def __init__(self, failing_endpoints=()):
        self.failing_endpoints = set(failing_endpoints)
        self.sent = []

    def send(self, subscription_info, payload):
        if subscription_info["endpoint"] in self.failing_endpoints:
            raise RuntimeError("push service unavailable")
        self.sent.append({"endpoint": subscription_info["endpoint"], "payload": payload})
        return True


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture
def push_sender():
    return FakePushSender()


@pytest.fixture
def today():
    return date(2024, 3, 10)


@pytest.fixture
def noon():
    def _noon(day):
        return datetime(day.year, day.month, day.day, 12, 0, 0)
    return _noon
