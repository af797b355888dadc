from drf_spectacular.utils import inline_serializer
from rest_framework import serializers

# Common
ErrorOut = inline_serializer(
    name="ErrorOut",
    fields={"detail": serializers.CharField(help_text="Human readable error message.")},
)

# Auth
TokenPairOut = inline_serializer(
    name="TokenPairOut",
    fields={
        "access": serializers.CharField(),
        "refresh": serializers.CharField(),
    },
)

RefreshIn = inline_serializer(
    name="RefreshIn",
    fields={"refresh": serializers.CharField()},
)

HealthOut = inline_serializer(
    name="HealthOut",
    fields={
        "status": serializers.ChoiceField(choices=["OK", "UNHEALTHY"]),
        "timestamp": serializers.DateTimeField(),
        "database": serializers.ChoiceField(choices=["connected", "disconnected"]),
    },
)

# Toggles
LikeToggleOut = inline_serializer(
    name="LikeToggleOut",
    fields={"liked": serializers.BooleanField(), "likes_count": serializers.IntegerField()},
)

BookmarkToggleOut = inline_serializer(
    name="BookmarkToggleOut",
    fields={"bookmarked": serializers.BooleanField(), "bookmarks_count": serializers.IntegerField()},
)

FollowStateOut = inline_serializer(
    name="FollowStateOut",
    fields={"following": serializers.BooleanField()},
)

BlockStateOut = inline_serializer(
    name="BlockStateOut",
    fields={"is_blocked": serializers.BooleanField()},
)

UnreadCountOut = inline_serializer(
    name="UnreadCountOut",
    fields={"count": serializers.IntegerField()},
)

MarkedOut = inline_serializer(
    name="MarkedOut",
    fields={"updated": serializers.IntegerField(help_text="읽음 처리된 알림 수")},
)

# Search
TrendingTagOut = inline_serializer(
    name="TrendingTagOut",
    fields={"tag": serializers.CharField(), "count": serializers.IntegerField()},
)

SearchAllOut = inline_serializer(
    name="SearchAllOut",
    fields={
        "snippets": serializers.ListField(child=serializers.DictField()),
        "docs": serializers.ListField(child=serializers.DictField()),
        "bugs": serializers.ListField(child=serializers.DictField()),
        "users": serializers.ListField(child=serializers.DictField()),
    },
)

# Realtime (WebSocket)
RealtimeCapabilitiesOut = inline_serializer(
    name="RealtimeCapabilitiesOut",
    fields={
        "websocket_url": serializers.CharField(help_text="WS endpoint (relative)"),
        "auth": inline_serializer(
            name="RealtimeAuthHints",
            fields={
                "query_param": serializers.CharField(required=False, help_text="예: ?token=<access JWT>"),
                "subprotocol": serializers.CharField(required=False, help_text="예: JWT 를 Sec-WebSocket-Protocol 로 전달"),
                "required_for": serializers.ListField(child=serializers.CharField(), required=False),
            },
        ),
        "events": serializers.ListField(
            child=inline_serializer(
                name="RealtimeEventMeta",
                fields={
                    "type": serializers.CharField(),
                    "direction": serializers.ChoiceField(choices=["server->client", "client->server"]),
                    "desc": serializers.CharField(required=False),
                    "rate_limit_per_minute": serializers.IntegerField(required=False),
                },
            ),
            help_text="지원 이벤트/메시지 요약",
        ),
        "notes": serializers.ListField(child=serializers.CharField(), required=False),
    },
)
