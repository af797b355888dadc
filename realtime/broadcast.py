import inspect
import json
import logging
from typing import Dict, Iterable

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.serializers.json import DjangoJSONEncoder

from .groups import content_room, user_room

log = logging.getLogger(__name__)


class LiveChannel:
    """
    채널 레이어 위의 서버 -> 클라이언트 브로드캐스트 핸들.
    RealtimeConfig.ready() 에서 한 번 만들어지고, 뷰가 서비스 함수에 명시적으로 넘겨준다.
    - 메시지 타입: "live.event" (LiveConsumer.live_event 와 매칭)
    - 클라이언트 프레임: {"event": <name>, "data": <payload>}
    전송 실패는 로그만 남기고 호출자에게 전파하지 않는다.
    """

    message_type = "live.event"

    def __init__(self, layer=None, alias: str = "default"):
        self._layer = layer
        self.alias = alias

    @property
    def layer(self):
        # 설정이 바뀌어도(테스트 등) 현재 레이어를 따라가도록 지연 조회
        return self._layer if self._layer is not None else get_channel_layer(self.alias)

    def to_user(self, user_id, event: str, payload) -> int:
        return self.to_rooms([user_room(user_id)], event, payload)

    def to_users(self, user_ids: Iterable, event: str, payload) -> int:
        return self.to_rooms([user_room(u) for u in user_ids], event, payload)

    def to_content(self, content_id, event: str, payload) -> int:
        return self.to_rooms([content_room(content_id)], event, payload)

    def to_rooms(self, rooms: Iterable[str], event: str, payload) -> int:
        layer = self.layer
        if layer is None:
            log.debug("No channel layer configured; dropped live event %s", event)
            return 0

        try:
            message: Dict = {"type": self.message_type, "event": event, "data": json.loads(json.dumps(payload, cls=DjangoJSONEncoder))}
        except (TypeError, ValueError):
            log.exception("Live event %s has a non-serializable payload", event)
            return 0

        send = layer.group_send
        is_async = inspect.iscoroutinefunction(send)
        sent = 0
        for room in dict.fromkeys(rooms):
            try:
                if is_async:
                    async_to_sync(send)(room, message)
                else:
                    send(room, message)
                sent += 1
            except Exception:
                log.exception("Live broadcast failed: room=%s event=%s", room, event)
        return sent
