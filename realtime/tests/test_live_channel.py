import datetime
import uuid

import pytest
from django.apps import apps
from django.urls import reverse
from rest_framework.test import APIClient

from realtime.broadcast import LiveChannel
from realtime.groups import ROOM_ID_MAX_LENGTH, is_valid_room_id
from realtime.ratelimit import EventRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestEventRateLimiter:
    def test_limits_per_event(self):
        limiter = EventRateLimiter({"join": 2, "leave": 1}, clock=FakeClock())
        assert [limiter.allow("join") for _ in range(3)] == [True, True, False]
        assert limiter.allow("leave") is True
        assert limiter.allow("leave") is False
        assert limiter.used("join") == 2

    def test_unlisted_event_is_unlimited(self):
        limiter = EventRateLimiter({"join": 1}, clock=FakeClock())
        assert all(limiter.allow("other") for _ in range(100))

    def test_window_resets_all_counters(self):
        clock = FakeClock()
        limiter = EventRateLimiter({"join": 1, "leave": 1}, window=60, clock=clock)
        limiter.allow("join")
        limiter.allow("leave")
        clock.now = 59.9
        assert limiter.allow("join") is False
        clock.now = 60.0
        assert limiter.allow("join") is True
        assert limiter.used("leave") == 0

    def test_reset(self):
        limiter = EventRateLimiter({"join": 1}, clock=FakeClock())
        limiter.allow("join")
        limiter.reset()
        assert limiter.allow("join") is True


@pytest.mark.parametrize(
    "value,ok",
    [
        ("abc", True),
        ("3f2c9a4e-7f6b-4d6e-9b1a-1c2d3e4f5a6b", True),
        ("x" * ROOM_ID_MAX_LENGTH, True),
        ("x" * (ROOM_ID_MAX_LENGTH + 1), False),
        ("", False),
        ("has space", False),
        (None, False),
        (123, False),
    ],
)
def test_room_id_rules(value, ok):
    assert is_valid_room_id(value) is ok


class RecordingLayer:
    def __init__(self, fail_on=()):
        self.messages = []
        self.fail_on = set(fail_on)

    async def group_send(self, group, message):
        if group in self.fail_on:
            raise ConnectionError("redis gone")
        self.messages.append((group, message))


class TestLiveChannel:
    def test_to_user_wraps_message(self):
        layer = RecordingLayer()
        assert LiveChannel(layer).to_user("u1", "notification", {"a": 1}) == 1
        assert layer.messages == [("user.u1", {"type": "live.event", "event": "notification", "data": {"a": 1}})]

    def test_payload_is_json_normalized(self):
        layer = RecordingLayer()
        pk = uuid.uuid4()
        LiveChannel(layer).to_content(pk, "new_comment", {"id": pk, "at": datetime.datetime(2024, 1, 2, 3, 4, 5)})
        group, message = layer.messages[0]
        assert group == f"content.{pk}"
        assert message["data"] == {"id": str(pk), "at": "2024-01-02T03:04:05"}

    def test_to_users_dedupes_and_survives_failures(self):
        layer = RecordingLayer(fail_on={"user.b"})
        sent = LiveChannel(layer).to_users(["a", "b", "a", "c"], "new-doc", {})
        assert sent == 2
        assert [g for g, _ in layer.messages] == ["user.a", "user.c"]

    def test_unserializable_payload_is_dropped(self):
        layer = RecordingLayer()
        assert LiveChannel(layer).to_user("a", "x", {"obj": object()}) == 0
        assert layer.messages == []

    def test_created_once_by_app_config(self):
        channel = apps.get_app_config("realtime").live_channel
        assert isinstance(channel, LiveChannel)


def test_capabilities_document_is_public():
    res = APIClient().get(reverse("realtime-capabilities"))
    assert res.status_code == 200
    body = res.json()
    assert body["websocket_url"] == "/ws/live/"
    assert {e["type"] for e in body["events"]} >= {"join-user-room", "notification", "new_comment"}
