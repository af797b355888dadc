import logging
from typing import Dict, Protocol
from urllib.parse import urlencode

import requests
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

log = logging.getLogger(__name__)


class ProviderError(Exception):
    """OAuth 교환/프로필 조회 실패. 콜백에서 /login?error=... 로 변환된다."""


class OAuthProvider(Protocol):
    name: str

    def authorize_url(self, state: str) -> str: ...

    def fetch_profile(self, code: str) -> Dict:
        """code 를 교환해 정규화된 프로필 dict 를 반환"""


def get_provider() -> OAuthProvider:
    # settings 로 선택 (default: github)
    name = getattr(settings, "OAUTH_PROVIDER", "github")

    if name == "github":
        return GitHubProvider()
    raise ImproperlyConfigured(f"Unknown OAUTH_PROVIDER: {name}")


class GitHubProvider:
    name = "github"
    AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
    TOKEN_URL = "https://github.com/login/oauth/access_token"
    API_URL = "https://api.github.com"
    SCOPE = "read:user user:email"
    timeout = 10

    def __init__(self, client_id=None, client_secret=None, callback_url=None, session=None):
        self.client_id = client_id or settings.GITHUB_CLIENT_ID
        self.client_secret = client_secret or settings.GITHUB_CLIENT_SECRET
        self.callback_url = callback_url or getattr(settings, "GITHUB_CALLBACK_URL", "")
        self.session = session or requests.Session()

    def authorize_url(self, state: str) -> str:
        params = {"client_id": self.client_id, "scope": self.SCOPE, "state": state}
        if self.callback_url:
            params["redirect_uri"] = self.callback_url
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    def _exchange_code(self, code: str) -> str:
        try:
            res = self.session.post(
                self.TOKEN_URL,
                data={"client_id": self.client_id, "client_secret": self.client_secret, "code": code},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            res.raise_for_status()
            body = res.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError("token_exchange_failed") from e

        token = body.get("access_token")
        if not token:
            log.warning("GitHub token exchange rejected: %s", body.get("error"))
            raise ProviderError("token_exchange_failed")
        return token

    def _get(self, path: str, token: str):
        try:
            res = self.session.get(
                f"{self.API_URL}{path}",
                headers={"Authorization": f"Bearer {token}", "Accept": "application/vnd.github+json"},
                timeout=self.timeout,
            )
            res.raise_for_status()
            return res.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError("profile_fetch_failed") from e

    def _primary_email(self, token: str):
        emails = self._get("/user/emails", token) or []
        for item in emails:
            if item.get("primary") and item.get("verified"):
                return item.get("email")
        for item in emails:
            if item.get("verified"):
                return item.get("email")
        return None

    def fetch_profile(self, code: str) -> Dict:
        token = self._exchange_code(code)
        user = self._get("/user", token)
        email = user.get("email") or self._primary_email(token)

        return {
            "id": str(user.get("id") or ""),
            "username": user.get("login"),
            "name": user.get("name"),
            "email": email,
            "avatar_url": user.get("avatar_url"),
            "html_url": user.get("html_url"),
            "bio": user.get("bio"),
            "blog": user.get("blog"),
            "location": user.get("location"),
            "company": user.get("company"),
            "twitter_username": user.get("twitter_username"),
            "public_repos": user.get("public_repos") or 0,
            "followers": user.get("followers") or 0,
            "following": user.get("following") or 0,
            "created_at": user.get("created_at"),
        }
