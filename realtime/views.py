from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import serializers, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from common.schema import RealtimeCapabilitiesOut
from .consumers import EVENT_LIMITS

SERVER_EVENTS = [
    ("notification", "새 알림 (user room)"),
    ("new-follower", "나를 팔로우한 사용자 (user room)"),
    ("new-snippet", "팔로잉 사용자의 새 공개 스니펫 (user room)"),
    ("new-doc", "팔로잉 사용자의 새 공개 문서 (user room)"),
    ("new-bug", "팔로잉 사용자의 새 버그 리포트 (user room)"),
    ("new_comment", "콘텐츠에 달린 새 댓글 (content room)"),
]


class RealtimeDocViewSet(viewsets.ViewSet):
    """
    WebSocket(ws/live/) 계약을 Swagger/Redoc에서 '발견'할 수 있게 해주는 문서 전용 뷰.
    런타임 비즈니스 로직은 없고, 정적 가이드를 반환한다.
    """

    permission_classes = [AllowAny]
    serializer_class = serializers.Serializer

    @extend_schema(
        tags=["Realtime"],
        summary="Live WebSocket 연결 가이드",
        description=(
            "실시간 이벤트 WebSocket(`/ws/live/`) 규약입니다.\n\n"
            "- 클라이언트→서버 프레임: `{\"type\": <event>, \"data\": <room id>}`\n"
            "- 서버→클라이언트 프레임: `{\"event\": <name>, \"data\": {...}}`\n"
            "- room id 는 1~50자, 영문/숫자/`._-` 만 허용. 위반 시 조용히 무시됩니다.\n"
            "- user room 은 JWT 로 인증된 본인만 참여할 수 있습니다.\n"
        ),
        operation_id="realtime_live_capabilities",
        responses={200: OpenApiResponse(response=RealtimeCapabilitiesOut)},
    )
    @action(detail=False, methods=["get"], url_path="capabilities")
    def capabilities(self, request):
        events = [{"type": name, "direction": "client->server", "rate_limit_per_minute": limit} for name, limit in EVENT_LIMITS.items()]
        events.append({"type": "ping", "direction": "client->server", "desc": "응답으로 {\"event\": \"pong\"}"})
        events.extend({"type": name, "direction": "server->client", "desc": desc} for name, desc in SERVER_EVENTS)
        data = {
            "websocket_url": "/ws/live/",
            "auth": {"query_param": "?token=<JWT_ACCESS_TOKEN>", "subprotocol": "<JWT_ACCESS_TOKEN>", "required_for": ["join-user-room"]},
            "events": events,
            "notes": ["한도 초과/잘못된 room id 는 응답 없이 버려집니다.", "한도는 연결마다 1분 단위로 초기화됩니다."],
        }
        return Response(data)
