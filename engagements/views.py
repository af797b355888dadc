from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.pagination import PagePagination
from common.schema import BookmarkToggleOut, ErrorOut, LikeToggleOut
from common.serializers import ContentTargetIn
from realtime.mixins import LiveChannelMixin
from . import services
from .serializers import BookmarkOut

TARGET_EXAMPLE = OpenApiExample("스니펫 대상", value={"snippet_id": "11111111-1111-1111-1111-111111111111"}, request_only=True)
TOGGLE_ERRORS = {
    400: OpenApiResponse(response=ErrorOut, description="대상 필드가 없거나 둘 이상"),
    401: OpenApiResponse(response=ErrorOut),
    403: OpenApiResponse(response=ErrorOut, description="비공개 콘텐츠"),
    404: OpenApiResponse(response=ErrorOut),
    410: OpenApiResponse(response=ErrorOut, description="만료된 버그 리포트"),
}


class LikeViewSet(LiveChannelMixin, viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Engagements"],
        summary="좋아요 토글",
        description="이미 좋아요한 상태면 취소, 아니면 좋아요. 다른 사람 콘텐츠에 새로 좋아요하면 작성자에게 LIKE 알림.",
        operation_id="likes_toggle",
        request=ContentTargetIn,
        responses={200: OpenApiResponse(response=LikeToggleOut), **TOGGLE_ERRORS},
        examples=[TARGET_EXAMPLE],
    )
    def create(self, request):
        s = ContentTargetIn(data=request.data)
        s.is_valid(raise_exception=True)
        result = services.toggle_like(actor=request.user, ref=s.validated_data["ref"], live=self.get_live_channel())
        return Response({"liked": result.active, "likes_count": result.count})


class BookmarkViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    pagination_class = PagePagination
    serializer_class = BookmarkOut

    @extend_schema(
        tags=["Engagements"],
        summary="북마크 토글",
        operation_id="bookmarks_toggle",
        request=ContentTargetIn,
        responses={200: OpenApiResponse(response=BookmarkToggleOut), **TOGGLE_ERRORS},
        examples=[TARGET_EXAMPLE],
    )
    def create(self, request):
        s = ContentTargetIn(data=request.data)
        s.is_valid(raise_exception=True)
        result = services.toggle_bookmark(actor=request.user, ref=s.validated_data["ref"])
        return Response({"bookmarked": result.active, "bookmarks_count": result.count})

    @extend_schema(
        tags=["Engagements"],
        summary="내 북마크 목록",
        description="최신순. 더 이상 볼 수 없는 콘텐츠는 `content: null`.",
        operation_id="bookmarks_list",
        responses={200: BookmarkOut(many=True), 401: OpenApiResponse(response=ErrorOut)},
    )
    def list(self, request):
        page = self.paginate_queryset(services.bookmarks_of(request.user))
        resolved = services.resolve_bookmarked(page, request.user)
        return self.get_paginated_response(BookmarkOut(page, many=True, context={"resolved": resolved}).data)
