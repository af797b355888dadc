import itertools

import pytest
from django.apps import apps
from rest_framework.test import APIClient

_seq = itertools.count(1)


class RecordingLiveChannel:
    """LiveChannel 대역. 보낸 이벤트를 (room, event, data) 로 쌓아둔다."""

    def __init__(self):
        self.sent = []

    def to_rooms(self, rooms, event, payload):
        rooms = list(dict.fromkeys(rooms))
        for room in rooms:
            self.sent.append((room, event, payload))
        return len(rooms)

    def to_user(self, user_id, event, payload):
        return self.to_rooms([f"user.{user_id}"], event, payload)

    def to_users(self, user_ids, event, payload):
        return self.to_rooms([f"user.{u}" for u in user_ids], event, payload)

    def to_content(self, content_id, event, payload):
        return self.to_rooms([f"content.{content_id}"], event, payload)

    def events(self, name):
        return [(room, data) for room, event, data in self.sent if event == name]


@pytest.fixture
def live(monkeypatch):
    fake = RecordingLiveChannel()
    monkeypatch.setattr(apps.get_app_config("realtime"), "live_channel", fake)
    return fake


@pytest.fixture
def make_user(db):
    from core.models import User

    def _make(username=None, **extra):
        return User.objects.create_user(username or f"dev{next(_seq)}", **extra)

    return _make


@pytest.fixture
def api():
    return APIClient()
