from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema
from rest_framework import serializers, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from common.pagination import PagePagination
from common.schema import ErrorOut, SearchAllOut, TrendingTagOut
from contents.serializers import serialize_content
from . import services
from .serializers import SearchIn, TagsIn, TrendingIn, UserHit

ALL_PER_TYPE = 10


class SearchViewSet(viewsets.GenericViewSet):
    """
    GET /api/v1/search?q=&type=        통합/종류별 검색
    GET /api/v1/search/trending        최근 좋아요 기준 인기 콘텐츠
    GET /api/v1/search/tags            많이 쓰인 태그
    """

    permission_classes = [AllowAny]
    pagination_class = PagePagination
    serializer_class = serializers.Serializer

    @extend_schema(
        tags=["Search"],
        summary="검색",
        description=(
            "제목/본문/태그(콘텐츠) 또는 사용자명/이름/소개(사용자)를 대소문자 구분 없이 부분 일치로 찾습니다.\n\n"
            "- `type=all`(기본): 종류별 최대 10건씩 `{snippets, docs, bugs, users}`\n"
            "- 그 외 `snippets` | `docs` | `bugs` | `users`: 페이지네이션 응답\n"
            "- 비공개 항목과 만료된 버그는 제외됩니다."
        ),
        operation_id="search_list",
        parameters=[
            OpenApiParameter(name="q", location=OpenApiParameter.QUERY, required=True, type=OpenApiTypes.STR, description="검색어(최대 200자)"),
            OpenApiParameter(name="type", location=OpenApiParameter.QUERY, required=False, type=OpenApiTypes.STR, enum=list(services.SEARCH_TYPES)),
            OpenApiParameter(name="page", location=OpenApiParameter.QUERY, required=False, type=OpenApiTypes.INT),
            OpenApiParameter(name="limit", location=OpenApiParameter.QUERY, required=False, type=OpenApiTypes.INT),
        ],
        responses={200: OpenApiResponse(response=SearchAllOut, description="type=all 응답"), 400: OpenApiResponse(response=ErrorOut)},
        examples=[
            OpenApiExample("통합 검색", value=None, request_only=True, description="GET /api/v1/search?q=django"),
            OpenApiExample("사용자 검색", value=None, request_only=True, description="GET /api/v1/search?q=alice&type=users&page=1&limit=20"),
        ],
    )
    def list(self, request):
        params = SearchIn(data=request.query_params)
        params.is_valid(raise_exception=True)
        q, kind = params.validated_data["q"], params.validated_data["type"]

        if kind == "all":
            out = {name: [serialize_content(i) for i in services.search_content(k, q, request.user)[:ALL_PER_TYPE]] for name, k in services.TYPE_KINDS.items()}
            out["users"] = UserHit(services.search_users(q)[:ALL_PER_TYPE], many=True).data
            return Response(out)

        if kind == "users":
            page = self.paginate_queryset(services.search_users(q))
            return self.get_paginated_response(UserHit(page, many=True).data)

        page = self.paginate_queryset(services.search_content(services.TYPE_KINDS[kind], q, request.user))
        return self.get_paginated_response([serialize_content(i) for i in page])

    @extend_schema(
        tags=["Search"],
        summary="인기 콘텐츠",
        description="최근 `days`일 동안 받은 좋아요 수 순. 각 항목에 `recent_likes` 가 붙습니다.",
        operation_id="search_trending",
        parameters=[
            OpenApiParameter(name="days", type=OpenApiTypes.INT, required=False, description="기본 7"),
            OpenApiParameter(name="limit", type=OpenApiTypes.INT, required=False, description="기본 10, 최대 50"),
        ],
        responses={200: OpenApiResponse(description="콘텐츠 목록"), 400: OpenApiResponse(response=ErrorOut)},
    )
    def trending(self, request):
        params = TrendingIn(data=request.query_params)
        params.is_valid(raise_exception=True)
        items = services.trending(user=request.user, **params.validated_data)
        return Response([{**serialize_content(i), "recent_likes": i.recent_likes} for i in items])

    @extend_schema(
        tags=["Search"],
        summary="인기 태그",
        operation_id="search_tags",
        parameters=[OpenApiParameter(name="limit", type=OpenApiTypes.INT, required=False, description="기본 20, 최대 100")],
        responses={200: OpenApiResponse(response=TrendingTagOut), 400: OpenApiResponse(response=ErrorOut)},
    )
    def tags(self, request):
        params = TagsIn(data=request.query_params)
        params.is_valid(raise_exception=True)
        return Response(services.popular_tags(params.validated_data["limit"]))
