import logging

from django.db import connection, DatabaseError
from django.http import HttpResponseRedirect
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.token_blacklist.models import OutstandingToken, BlacklistedToken

from common.schema import ErrorOut, HealthOut, RefreshIn, TokenPairOut
from .models import User
from .providers import ProviderError, get_provider
from .serializers import LogoutSerializer, MeOut
from .services import oauth

log = logging.getLogger(__name__)


@extend_schema_view(
    github=extend_schema(
        tags=["Auth"],
        summary="GitHub 로그인 시작",
        description="서명된 state 와 함께 GitHub 인가 페이지로 리다이렉트합니다.",
        responses={302: OpenApiResponse(description="Redirect to GitHub")},
    ),
    github_callback=extend_schema(
        tags=["Auth"],
        summary="GitHub OAuth 콜백",
        description="신규 가입자는 {FRONTEND_URL}/profile/setup, 기존 사용자는 /home 으로 리다이렉트. 토큰은 URL fragment 로 전달. 실패 시 /login?error=...",
        parameters=[
            OpenApiParameter("code", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("state", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        responses={302: OpenApiResponse(description="Redirect to frontend")},
    ),
    me=extend_schema(tags=["Auth"], summary="내 계정 정보", responses={200: MeOut, 401: ErrorOut}),
    refresh=extend_schema(tags=["Auth"], summary="토큰 갱신", request=RefreshIn, responses={200: TokenPairOut, 401: ErrorOut}),
    logout=extend_schema(tags=["Auth"], summary="로그아웃 (refresh 블랙리스트)", request=LogoutSerializer, responses={204: OpenApiResponse(description="Logged out")}),
)
class AuthViewSet(viewsets.GenericViewSet):
    queryset = User.objects.all()
    permission_classes = [AllowAny]

    @action(detail=False, methods=["get"])
    def github(self, request):
        provider = get_provider()
        return HttpResponseRedirect(provider.authorize_url(oauth.make_state()))

    @action(detail=False, methods=["get"], url_path="github/callback")
    def github_callback(self, request):
        if request.query_params.get("error"):
            return HttpResponseRedirect(oauth.frontend_redirect("/login", query={"error": "access_denied"}))

        code = request.query_params.get("code")
        if not code or not oauth.verify_state(request.query_params.get("state", "")):
            return HttpResponseRedirect(oauth.frontend_redirect("/login", query={"error": "invalid_state"}))

        try:
            profile = get_provider().fetch_profile(code)
            user, created = oauth.upsert_user_from_profile(profile)
        except ProviderError as e:
            log.warning("OAuth callback failed: %s", e)
            return HttpResponseRedirect(oauth.frontend_redirect("/login", query={"error": str(e)}))
        except ValidationError:
            return HttpResponseRedirect(oauth.frontend_redirect("/login", query={"error": "invalid_profile"}))

        if not user.is_active:
            return HttpResponseRedirect(oauth.frontend_redirect("/login", query={"error": "account_blocked"}))

        tokens = oauth.issue_tokens(user)
        path = "/profile/setup" if created else "/home"
        return HttpResponseRedirect(oauth.frontend_redirect(path, fragment=tokens))

    @action(detail=False, methods=["get"], permission_classes=[IsAuthenticated])
    def me(self, request):
        return Response(MeOut(request.user).data)

    @action(detail=False, methods=["post"])
    def refresh(self, request):
        s = TokenRefreshSerializer(data=request.data)
        try:
            s.is_valid(raise_exception=True)
        except TokenError as e:
            return Response({"detail": str(e)}, status=status.HTTP_401_UNAUTHORIZED)
        return Response(s.validated_data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"])
    def logout(self, request):
        s = LogoutSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        if s.validated_data.get("all_logout"):
            if not request.user or not request.user.is_authenticated:
                return Response(status=status.HTTP_401_UNAUTHORIZED)
            for t in OutstandingToken.objects.filter(user=request.user):
                BlacklistedToken.objects.get_or_create(token=t)
            return Response(status=status.HTTP_204_NO_CONTENT)

        refresh_token = s.validated_data.get("refresh", "")
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError:
                # 이미 만료/블랙리스트된 토큰이면 로그아웃은 성공으로 본다
                log.info("Logout with invalid refresh token ignored")
        return Response(status=status.HTTP_204_NO_CONTENT)


class HealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = []

    @extend_schema(tags=["Health"], summary="헬스체크", responses={200: HealthOut, 503: HealthOut})
    def get(self, request):
        now = timezone.now()
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError:
            log.exception("Health check failed: database unreachable")
            return Response({"status": "UNHEALTHY", "timestamp": now, "database": "disconnected"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({"status": "OK", "timestamp": now, "database": "connected"})
