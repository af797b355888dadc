import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .groups import content_room, is_valid_room_id, user_room
from .ratelimit import EventRateLimiter

log = logging.getLogger(__name__)

# 이벤트별 분당 허용 횟수
EVENT_LIMITS = {
    "join-user-room": 5,
    "join-content-room": 10,
    "leave-content-room": 10,
}


class LiveConsumer(AsyncJsonWebsocketConsumer):
    """
    클라이언트 -> 서버: {"type": "join-user-room" | "join-content-room" | "leave-content-room", "data": "<room id>"}
                        {"type": "ping"} -> {"event": "pong"}
    서버 -> 클라이언트: {"event": "<name>", "data": {...}}
    그룹: user.<user_id>, content.<content_id>
    group_send 예:
        await channel_layer.group_send(
            user_room(user_id),
            {"type": "live.event", "event": "notification", "data": {...}}
        )
    규칙 위반(잘못된 room id, 한도 초과, 권한 없음)은 응답 없이 버리고 로그만 남긴다.
    """

    async def connect(self):
        self.user_id = self.scope.get("user_id")
        self.rooms = set()
        self.limiter = EventRateLimiter(EVENT_LIMITS)
        await self.accept()
        log.info("Live connection opened: channel=%s user=%s", self.channel_name, self.user_id or "-")

    async def disconnect(self, code):
        for room in getattr(self, "rooms", ()):
            await self.channel_layer.group_discard(room, self.channel_name)
        self.rooms = set()
        if hasattr(self, "limiter"):
            self.limiter.reset()
        log.info("Live connection closed: channel=%s code=%s", self.channel_name, code)

    async def receive(self, text_data=None, bytes_data=None, **kwargs):
        if not text_data:
            log.warning("Non-text live frame dropped: channel=%s", self.channel_name)
            return
        await super().receive(text_data=text_data, bytes_data=bytes_data, **kwargs)

    @classmethod
    async def decode_json(cls, text_data):
        try:
            return await super().decode_json(text_data)
        except ValueError:
            return None

    async def receive_json(self, content, **kwargs):
        if not isinstance(content, dict):
            log.warning("Malformed live frame dropped: channel=%s", self.channel_name)
            return

        event = content.get("type")
        if event == "ping":
            await self.send_json({"event": "pong"})
            return

        handler = self.handlers.get(event)
        if handler is None:
            log.warning("Unknown live event dropped: channel=%s event=%r", self.channel_name, event)
            return

        if not self.limiter.allow(event):
            log.warning("Live rate limit exceeded: channel=%s event=%s", self.channel_name, event)
            return

        room_id = content.get("data")
        if not is_valid_room_id(room_id):
            log.warning("Invalid room id for %s: channel=%s", event, self.channel_name)
            return

        try:
            await handler(self, room_id)
        except Exception:
            log.exception("Live event %s failed: channel=%s", event, self.channel_name)

    async def _join(self, room: str):
        await self.channel_layer.group_add(room, self.channel_name)
        self.rooms.add(room)

    async def join_user_room(self, room_id: str):
        # 자기 자신의 user room 만, 인증된 연결에서만
        if not self.user_id or room_id != str(self.user_id):
            log.warning("User room join denied: channel=%s user=%s room=%s", self.channel_name, self.user_id or "-", room_id)
            return
        await self._join(user_room(room_id))

    async def join_content_room(self, room_id: str):
        await self._join(content_room(room_id))

    async def leave_content_room(self, room_id: str):
        room = content_room(room_id)
        await self.channel_layer.group_discard(room, self.channel_name)
        self.rooms.discard(room)

    handlers = {
        "join-user-room": join_user_room,
        "join-content-room": join_content_room,
        "leave-content-room": leave_content_room,
    }

    async def live_event(self, message):
        await self.send_json({"event": message["event"], "data": message.get("data")})
