from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import serializers, viewsets
from rest_framework.permissions import IsAuthenticated

from common.pagination import PagePagination
from common.schema import ErrorOut
from contents.serializers import serialize_content
from .services import following_feed


class FeedViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    pagination_class = PagePagination
    serializer_class = serializers.Serializer

    @extend_schema(
        tags=["Feed"],
        summary="팔로잉 피드 조회",
        description=(
            "내가 팔로우한 사용자와 나의 공개 스니펫/문서, 만료 전 버그를 최신순으로 섞어 반환합니다.\n"
            "- 각 항목은 `kind` (`snippet` | `doc` | `bug`) 를 포함합니다.\n"
            "- 페이지네이션: `page`(기본=1), `limit`(기본=20, 최대=50)"
        ),
        operation_id="feed_list",
        responses={200: OpenApiResponse(description="피드 항목 페이지"), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
        examples=[OpenApiExample("기본 조회", value=None, request_only=True, description="GET /api/v1/feed?page=1&limit=20")],
    )
    def list(self, request):
        page = self.paginate_queryset(following_feed(request.user))
        return self.get_paginated_response([serialize_content(item) for item in page])
