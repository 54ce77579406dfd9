"""
Tests for the email and web push senders, with the network calls replaced.
"""
import json

import requests
from pywebpush import WebPushException

from leetcoach.services import notification_service
from leetcoach.services.notification_service import EmailSender, PushSender

SUBSCRIPTION = {
    "endpoint": "https://push.example/alice",
    "keys": {"p256dh": "p256dh-key", "auth": "auth-key"},
}


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


def test_email_sender_posts_to_resend(monkeypatch):
    calls = []

    def fake_post(url, headers, json, timeout):
        calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        return FakeResponse()

    monkeypatch.setattr(notification_service.requests, "post", fake_post)
    sender = EmailSender(api_key="re_test", from_email="coach@example.com", timeout=3)

    assert sender.send("alice@example.com", "LeetCoach: 1 problem due today", "<p>hi</p>") is True
    assert calls == [{
        "url": "https://api.resend.com/emails",
        "headers": {"Authorization": "Bearer re_test"},
        "json": {
            "from": "coach@example.com",
            "to": "alice@example.com",
            "subject": "LeetCoach: 1 problem due today",
            "html": "<p>hi</p>",
        },
        "timeout": 3,
    }]


def test_email_sender_reports_rejected_message(monkeypatch):
    monkeypatch.setattr(notification_service.requests, "post", lambda *args, **kwargs: FakeResponse(422))
    sender = EmailSender(api_key="re_test", from_email="coach@example.com")

    assert sender.send("alice@example.com", "subject", "body") is False


def test_email_sender_reports_network_error(monkeypatch):
    def unreachable(*args, **kwargs):
        raise requests.exceptions.ConnectTimeout("timed out")

    monkeypatch.setattr(notification_service.requests, "post", unreachable)
    sender = EmailSender(api_key="re_test", from_email="coach@example.com")

    assert sender.send("alice@example.com", "subject", "body") is False


def test_unconfigured_email_sender_sends_nothing(monkeypatch):
    def must_not_post(*args, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr(notification_service.requests, "post", must_not_post)

    assert EmailSender(api_key="", from_email="coach@example.com").send("a@example.com", "s", "b") is False


def test_push_sender_signs_with_vapid_key(monkeypatch):
    calls = []
    monkeypatch.setattr(notification_service, "webpush", lambda **kwargs: calls.append(kwargs))
    sender = PushSender(vapid_private_key="vapid-private", vapid_subject="mailto:coach@example.com", timeout=5)

    assert sender.send(SUBSCRIPTION, {"title": "LeetCoach: Review time", "body": "hi"}) is True
    assert len(calls) == 1
    assert calls[0]["subscription_info"] == SUBSCRIPTION
    assert json.loads(calls[0]["data"]) == {"title": "LeetCoach: Review time", "body": "hi"}
    assert calls[0]["vapid_private_key"] == "vapid-private"
    assert calls[0]["vapid_claims"] == {"sub": "mailto:coach@example.com"}
    assert calls[0]["timeout"] == 5


def test_push_sender_reports_rejected_subscription(monkeypatch):
    def gone(**kwargs):
        raise WebPushException("Push failed: 410 Gone")

    monkeypatch.setattr(notification_service, "webpush", gone)
    sender = PushSender(vapid_private_key="vapid-private", vapid_subject="mailto:coach@example.com")

    assert sender.send(SUBSCRIPTION, {"title": "t", "body": "b"}) is False


def test_unconfigured_push_sender_sends_nothing(monkeypatch):
    def must_not_push(**kwargs):
        raise AssertionError("no push expected")

    monkeypatch.setattr(notification_service, "webpush", must_not_push)

    assert PushSender(vapid_private_key="", vapid_subject="").send(SUBSCRIPTION, {"title": "t"}) is False
