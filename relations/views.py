from drf_spectacular.utils import extend_schema, inline_serializer, OpenApiParameter, OpenApiResponse, OpenApiTypes
from rest_framework import viewsets, serializers
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.pagination import PagePagination
from common.schema import ErrorOut, FollowStateOut
from realtime.mixins import LiveChannelMixin
from .serializers import FollowerOut, FollowingOut, SuggestionOut
from .services import SUGGESTIONS_DEFAULT, RelationshipService, get_user_or_404

USER_ID = OpenApiParameter(name="user_id", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="대상 사용자 ID (UUID)")


class FollowViewSet(LiveChannelMixin, viewsets.GenericViewSet):
    """
    POST /api/v1/follows/{user_id}             팔로우 토글
    GET  /api/v1/follows/check/{user_id}       팔로우 여부
    GET  /api/v1/follows/{user_id}/followers   팔로워 목록
    GET  /api/v1/follows/{user_id}/following   팔로잉 목록
    GET  /api/v1/follows/suggestions?limit=    추천 사용자
    """

    permission_classes = [IsAuthenticated]
    pagination_class = PagePagination
    serializer_class = serializers.Serializer

    @extend_schema(
        tags=["Relations"],
        summary="팔로우 토글",
        description="팔로우 중이면 언팔로우, 아니면 팔로우합니다. 새 팔로우는 FOLLOW 알림과 `new-follower` 이벤트를 보냅니다.",
        operation_id="follows_toggle",
        parameters=[USER_ID],
        request=None,
        responses={
            200: OpenApiResponse(response=FollowStateOut),
            400: OpenApiResponse(response=ErrorOut, description="자기 자신 팔로우"),
            401: OpenApiResponse(response=ErrorOut),
            404: OpenApiResponse(response=ErrorOut, description="대상 사용자 없음"),
        },
    )
    def toggle(self, request, user_id=None):
        result = RelationshipService.toggle_follow(request.user, user_id, live=self.get_live_channel())
        return Response({"following": result.following})

    @extend_schema(
        tags=["Relations"],
        summary="팔로우 여부 확인",
        operation_id="follows_check",
        parameters=[USER_ID],
        responses={200: OpenApiResponse(response=FollowStateOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    def check(self, request, user_id=None):
        return Response({"following": RelationshipService.is_following(request.user, user_id)})

    @extend_schema(
        tags=["Relations"],
        summary="팔로워 목록",
        operation_id="follows_followers",
        parameters=[USER_ID],
        responses={200: FollowerOut(many=True), 401: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    )
    def followers(self, request, user_id=None):
        user = get_user_or_404(user_id)
        page = self.paginate_queryset(RelationshipService.followers_of(user))
        return self.get_paginated_response(FollowerOut(page, many=True).data)

    @extend_schema(
        tags=["Relations"],
        summary="팔로잉 목록",
        operation_id="follows_following",
        parameters=[USER_ID],
        responses={200: FollowingOut(many=True), 401: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    )
    def following(self, request, user_id=None):
        user = get_user_or_404(user_id)
        page = self.paginate_queryset(RelationshipService.following_of(user))
        return self.get_paginated_response(FollowingOut(page, many=True).data)

    @extend_schema(
        tags=["Relations"],
        summary="팔로우 추천",
        description="본인/이미 팔로우한 사용자/서로 차단 관계/정지 계정을 제외하고 팔로워 많은 순(동률이면 최근 가입 순).",
        operation_id="follows_suggestions",
        parameters=[OpenApiParameter(name="limit", type=OpenApiTypes.INT, required=False, description="기본 10, 최대 50")],
        responses={
            200: inline_serializer(name="SuggestionsOut", fields={"suggestions": SuggestionOut(many=True)}),
            400: OpenApiResponse(response=ErrorOut),
            401: OpenApiResponse(response=ErrorOut),
        },
    )
    def suggestions(self, request):
        raw = request.query_params.get("limit")
        try:
            limit = int(raw) if raw not in (None, "") else SUGGESTIONS_DEFAULT
        except ValueError:
            raise ValidationError({"limit": "Must be a positive integer."})
        if limit < 1:
            raise ValidationError({"limit": "Must be a positive integer."})
        users = RelationshipService.suggestions(request.user, limit)
        return Response({"suggestions": SuggestionOut(users, many=True).data})
