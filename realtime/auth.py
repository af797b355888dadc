import logging
import urllib.parse
from typing import Optional

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

log = logging.getLogger(__name__)


@database_sync_to_async
def _active_user_id(user_id) -> Optional[str]:
    User = get_user_model()
    user = User.objects.filter(pk=user_id).only("id", "role").first()
    if user is None or not user.is_active:
        return None
    return str(user.pk)


class JWTAuthMiddleware(BaseMiddleware):
    """
    ?token=... 또는 Sec-WebSocket-Protocol 로 받은 access JWT 를 검증해 scope["user_id"] 를 세팅한다.
    토큰이 없거나 잘못돼도 연결은 허용한다(익명: content room 만 참여 가능).
    """

    def _extract_token(self, scope) -> Optional[str]:
        qs = scope.get("query_string", b"").decode()
        if qs:
            params = urllib.parse.parse_qs(qs)
            if params.get("token"):
                return params["token"][0]

        for proto in scope.get("subprotocols") or []:
            p = (proto or "").strip()
            if not p:
                continue
            if p.lower().startswith("bearer "):
                return p[7:].strip()
            return p

        return None

    async def _resolve_user_id(self, token: str) -> Optional[str]:
        try:
            access = AccessToken(token)
        except TokenError:
            log.info("Live connection with invalid token treated as anonymous")
            return None
        user_id = access.get(api_settings.USER_ID_CLAIM)
        if not user_id:
            return None
        return await _active_user_id(user_id)

    async def __call__(self, scope, receive, send):
        token = self._extract_token(scope)
        scope["user_id"] = await self._resolve_user_id(token) if token else None
        return await super().__call__(scope, receive, send)
