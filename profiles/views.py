from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema
from rest_framework import viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from common.schema import ErrorOut
from core.models import UserPreferences
from core.serializers import PreferencesSerializer
from . import services
from .serializers import MyProfileOut, ProfileOut, ProfileUpdateIn


class ProfileViewSet(viewsets.GenericViewSet):
    """
    GET   /api/v1/users/me          내 프로필
    PATCH /api/v1/users/me          내 프로필 수정
    GET   /api/v1/users/{username}  공개 프로필
    """

    serializer_class = ProfileOut

    def get_permissions(self):
        if self.action == "retrieve":
            return [AllowAny()]
        return [IsAuthenticated()]

    @extend_schema(
        tags=["Profiles"],
        summary="공개 프로필 조회",
        description="콘텐츠 수(공개 항목 기준), 팔로워/팔로잉 수, 호출자의 팔로우 여부를 함께 반환합니다.",
        operation_id="users_retrieve",
        parameters=[OpenApiParameter(name="username", location=OpenApiParameter.PATH, type=OpenApiTypes.STR, description="사용자명 (대소문자 무시)")],
        responses={200: OpenApiResponse(response=ProfileOut), 404: OpenApiResponse(response=ErrorOut)},
    )
    def retrieve(self, request, username=None):
        user = services.get_profile_user(username, request.user)
        stats = services.profile_stats(user, request.user)
        return Response(ProfileOut(user, context={"stats": stats}).data)

    @extend_schema(
        tags=["Profiles"],
        summary="내 프로필 조회",
        operation_id="users_me_get",
        responses={200: OpenApiResponse(response=MyProfileOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    def me(self, request):
        return Response(MyProfileOut(request.user).data)

    @extend_schema(
        tags=["Profiles"],
        summary="내 프로필 수정(부분)",
        operation_id="users_me_patch",
        request=ProfileUpdateIn,
        responses={200: OpenApiResponse(response=MyProfileOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
        examples=[OpenApiExample("요청 예시", value={"bio": "backend dev", "tech_stack": ["python", "django"]}, request_only=True)],
    )
    def partial_update_me(self, request):
        s = ProfileUpdateIn(request.user, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        user = services.update_profile(request.user, s.validated_data)
        return Response(MyProfileOut(user).data)


class PreferencesViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = PreferencesSerializer

    @extend_schema(
        tags=["Profiles"],
        summary="내 설정 조회",
        description="설정 레코드가 없으면 기본값으로 생성해 반환합니다.",
        operation_id="settings_get",
        responses={200: OpenApiResponse(response=PreferencesSerializer), 401: OpenApiResponse(response=ErrorOut)},
    )
    def retrieve(self, request):
        return Response(PreferencesSerializer(UserPreferences.for_user(request.user)).data)

    @extend_schema(
        tags=["Profiles"],
        summary="내 설정 변경",
        operation_id="settings_put",
        request=PreferencesSerializer,
        responses={200: OpenApiResponse(response=PreferencesSerializer), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    def update(self, request):
        s = PreferencesSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        prefs = services.update_preferences(request.user, s.validated_data)
        return Response(PreferencesSerializer(prefs).data)
