from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiParameter, OpenApiResponse, OpenApiTypes, OpenApiExample
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.pagination import PagePagination
from common.schema import ErrorOut, MarkedOut, UnreadCountOut
from . import services
from .models import Notification
from .serializers import NotificationOut, MarkReadIn


@extend_schema_view(
    list=extend_schema(
        tags=["Notifications"],
        summary="내 알림 목록",
        description=("현재 사용자에게 온 알림을 최신순으로 반환합니다.\n" "- `read` 쿼리: `true` → 읽은 것만, `false` → 읽지 않은 것만, 생략 시 전체"),
        operation_id="notifications_list",
        parameters=[
            OpenApiParameter(name="read", location=OpenApiParameter.QUERY, required=False, type=OpenApiTypes.STR, description="읽음 필터: `true` | `false`", enum=["true", "false"])
        ],
        responses={200: OpenApiResponse(response=NotificationOut(many=True)), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
    ),
    destroy=extend_schema(
        tags=["Notifications"],
        summary="알림 삭제",
        operation_id="notifications_destroy",
        responses={204: OpenApiResponse(description="삭제 완료"), 401: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    ),
)
class NotificationViewSet(mixins.ListModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = NotificationOut
    pagination_class = PagePagination
    lookup_value_regex = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

    def get_queryset(self):
        qs = Notification.objects.filter(recipient=self.request.user).select_related("sender").order_by("-created_at")
        if self.action != "list":
            return qs
        read = self.request.query_params.get("read")
        if read == "true":
            qs = qs.filter(is_read=True)
        elif read == "false":
            qs = qs.filter(is_read=False)
        elif read not in (None, ""):
            raise ValidationError({"read": "Must be 'true' or 'false'."})
        return qs

    @extend_schema(
        tags=["Notifications"],
        summary="읽지 않은 알림 수",
        operation_id="notifications_unread_count",
        responses={200: OpenApiResponse(response=UnreadCountOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=False, methods=["GET"], url_path="unread-count")
    def unread_count(self, request):
        return Response({"count": services.unread_count(request.user)})

    @extend_schema(
        tags=["Notifications"],
        summary="알림 읽음 처리",
        description="요청한 알림 ID 목록을 읽음 처리합니다. 사용자 본인 소유의 알림만 처리됩니다.",
        operation_id="notifications_mark_read",
        request=MarkReadIn,
        responses={200: OpenApiResponse(response=MarkedOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
        examples=[
            OpenApiExample("요청 예시", value={"ids": ["11111111-1111-1111-1111-111111111111"]}, request_only=True),
            OpenApiExample("응답 예시", value={"updated": 1}, response_only=True),
        ],
    )
    @action(detail=False, methods=["POST"])
    def mark_read(self, request):
        ser = MarkReadIn(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response({"updated": services.mark_read(request.user, ser.validated_data["ids"])})

    @extend_schema(
        tags=["Notifications"],
        summary="모든 알림 읽음 처리",
        operation_id="notifications_mark_all_read",
        request=None,
        responses={200: OpenApiResponse(response=MarkedOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=False, methods=["POST"])
    def mark_all_read(self, request):
        return Response({"updated": services.mark_all_read(request.user)}, status=status.HTTP_200_OK)
