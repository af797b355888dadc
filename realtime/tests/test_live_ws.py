import pytest
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from codegram.asgi import application
from core.models import Role
from realtime.groups import content_room, user_room

pytestmark = pytest.mark.django_db(transaction=True)

ORIGIN = [(b"origin", b"http://localhost")]


@pytest.mark.asyncio
class TestLiveWebSocket:
    # ---- Utility ----
    @staticmethod
    def _token(user_id):
        t = AccessToken()
        t[api_settings.USER_ID_CLAIM] = str(user_id)
        return str(t)

    @staticmethod
    async def _connect(path="/ws/live/", **kwargs):
        comm = WebsocketCommunicator(application, path, headers=ORIGIN, **kwargs)
        connected, _ = await comm.connect()
        assert connected is True
        return comm

    @staticmethod
    async def _push(room, event="ping-test", data=None):
        await get_channel_layer().group_send(room, {"type": "live.event", "event": event, "data": data or {}})

    # ---- Fixture ----
    @pytest.fixture(autouse=True)
    def in_memory_channel_layer(self, settings):
        settings.CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}

    @pytest.fixture
    def user(self):
        return get_user_model().objects.create_user("wsuser")

    # ---- Testcase ----
    async def test_anonymous_connection_accepted_and_ping(self):
        comm = await self._connect()
        await comm.send_json_to({"type": "ping"})
        assert await comm.receive_json_from(timeout=1) == {"event": "pong"}
        await comm.disconnect()

    async def test_rejects_foreign_origin(self):
        comm = WebsocketCommunicator(application, "/ws/live/", headers=[(b"origin", b"http://evil.example")])
        connected, _ = await comm.connect()
        assert connected is False

    async def test_join_content_room_receives_broadcast(self):
        comm = await self._connect()
        await comm.send_json_to({"type": "join-content-room", "data": "c0ffee"})
        await comm.send_json_to({"type": "ping"})
        await comm.receive_json_from(timeout=1)

        await self._push(content_room("c0ffee"), "new_comment", {"id": "1"})
        assert await comm.receive_json_from(timeout=1) == {"event": "new_comment", "data": {"id": "1"}}

        await comm.send_json_to({"type": "leave-content-room", "data": "c0ffee"})
        await comm.send_json_to({"type": "ping"})
        await comm.receive_json_from(timeout=1)
        await self._push(content_room("c0ffee"), "new_comment", {"id": "2"})
        assert await comm.receive_nothing(timeout=0.2)
        await comm.disconnect()

    async def test_user_room_only_for_own_authenticated_id(self, user):
        anon = await self._connect()
        await anon.send_json_to({"type": "join-user-room", "data": str(user.id)})

        authed = await self._connect(f"/ws/live/?token={self._token(user.id)}")
        await authed.send_json_to({"type": "join-user-room", "data": str(user.id)})
        await authed.send_json_to({"type": "ping"})
        await authed.receive_json_from(timeout=1)

        await self._push(user_room(user.id), "notification", {"type": "LIKE"})
        assert (await authed.receive_json_from(timeout=1))["event"] == "notification"
        assert await anon.receive_nothing(timeout=0.2)
        await anon.disconnect()
        await authed.disconnect()

    async def test_token_via_subprotocol(self, user):
        comm = await self._connect(subprotocols=[self._token(user.id)])
        await comm.send_json_to({"type": "join-user-room", "data": str(user.id)})
        await comm.send_json_to({"type": "ping"})
        await comm.receive_json_from(timeout=1)
        await self._push(user_room(user.id), "new-follower", {"username": "x"})
        assert (await comm.receive_json_from(timeout=1))["event"] == "new-follower"
        await comm.disconnect()

    async def test_suspended_user_is_anonymous(self):
        blocked = await database_sync_to_async(get_user_model().objects.create_user)("gone", role=Role.BLOCKED)
        comm = await self._connect(f"/ws/live/?token={self._token(blocked.id)}")
        await comm.send_json_to({"type": "join-user-room", "data": str(blocked.id)})
        await comm.send_json_to({"type": "ping"})
        await comm.receive_json_from(timeout=1)
        await self._push(user_room(blocked.id), "notification")
        assert await comm.receive_nothing(timeout=0.2)
        await comm.disconnect()

    async def test_invalid_frames_are_dropped_silently(self):
        comm = await self._connect()
        await comm.send_to(text_data="{not json")
        await comm.send_json_to(["a", "list"])
        await comm.send_json_to({"type": "no-such-event", "data": "x"})
        await comm.send_json_to({"type": "join-content-room", "data": "x" * 51})
        await comm.send_json_to({"type": "join-content-room", "data": 42})
        await comm.send_json_to({"type": "ping"})
        assert await comm.receive_json_from(timeout=1) == {"event": "pong"}

        await self._push(content_room("x" * 51))
        assert await comm.receive_nothing(timeout=0.2)
        await comm.disconnect()

    async def test_rate_limit_drops_excess_joins(self):
        comm = await self._connect()
        for i in range(11):
            await comm.send_json_to({"type": "join-content-room", "data": f"room{i}"})
        await comm.send_json_to({"type": "ping"})
        await comm.receive_json_from(timeout=1)

        await self._push(content_room("room9"), "hit")
        assert (await comm.receive_json_from(timeout=1))["event"] == "hit"
        await self._push(content_room("room10"), "miss")
        assert await comm.receive_nothing(timeout=0.2)
        await comm.disconnect()
