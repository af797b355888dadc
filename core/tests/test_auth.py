from urllib.parse import parse_qs, urlparse

import pytest
import requests
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core.models import Role, User
from core.providers import GitHubProvider, ProviderError
from core.services import oauth

GITHUB_PROFILE = {
    "id": "424242",
    "username": "octocat",
    "name": "The Octocat",
    "email": "octo@example.com",
    "avatar_url": "https://avatars.example.com/u/424242",
    "html_url": "https://github.com/octocat",
    "bio": "I fork things",
    "blog": "https://octo.blog",
    "location": "Seoul",
    "company": "@github",
    "twitter_username": "octo",
    "public_repos": 8,
    "followers": 100,
    "following": 3,
    "created_at": "2011-01-25T18:44:36Z",
}


class FakeProvider:
    name = "fake"

    def __init__(self, profile=None, error=None):
        self.profile = profile
        self.error = error

    def authorize_url(self, state):
        return f"https://provider.example.com/authorize?state={state}"

    def fetch_profile(self, code):
        if self.error:
            raise ProviderError(self.error)
        return dict(self.profile)


@pytest.mark.django_db
class TestOAuthCallback:
    def setup_method(self):
        self.client = APIClient()
        self.url = reverse("auth-github-callback")

    @pytest.fixture(autouse=True)
    def _frontend(self, settings):
        settings.FRONTEND_URL = "http://front.test"

    def _use(self, monkeypatch, provider):
        monkeypatch.setattr("core.views.get_provider", lambda: provider)

    def _callback(self, **params):
        return self.client.get(self.url, params)

    def _fragment(self, res):
        return parse_qs(urlparse(res["Location"]).fragment)

    def test_start_redirects_with_signed_state(self, monkeypatch):
        self._use(monkeypatch, FakeProvider())
        res = self.client.get(reverse("auth-github"))
        assert res.status_code == status.HTTP_302_FOUND
        state = parse_qs(urlparse(res["Location"]).query)["state"][0]
        assert oauth.verify_state(state)

    def test_new_user_goes_to_profile_setup_with_tokens(self, monkeypatch):
        self._use(monkeypatch, FakeProvider(GITHUB_PROFILE))
        res = self._callback(code="abc", state=oauth.make_state())

        assert res.status_code == status.HTTP_302_FOUND
        assert res["Location"].startswith("http://front.test/profile/setup#")
        frag = self._fragment(res)
        assert "access" in frag and "refresh" in frag

        user = User.objects.get(github_id="424242")
        assert user.username == "octocat"
        assert user.bio == "I fork things"
        assert user.github_followers == 100
        assert user.website == "https://octo.blog"

    def test_returning_user_goes_home_and_keeps_own_bio(self, monkeypatch):
        self._use(monkeypatch, FakeProvider(GITHUB_PROFILE))
        self._callback(code="abc", state=oauth.make_state())
        User.objects.filter(github_id="424242").update(bio="edited by me")

        changed = {**GITHUB_PROFILE, "followers": 150, "bio": "new provider bio"}
        self._use(monkeypatch, FakeProvider(changed))
        res = self._callback(code="abc", state=oauth.make_state())

        assert res["Location"].startswith("http://front.test/home#")
        user = User.objects.get(github_id="424242")
        assert user.github_followers == 150
        assert user.bio == "edited by me"
        assert User.objects.count() == 1

    def test_username_collision_gets_suffix(self, make_user, monkeypatch):
        make_user("octocat")
        self._use(monkeypatch, FakeProvider(GITHUB_PROFILE))
        self._callback(code="abc", state=oauth.make_state())
        assert User.objects.get(github_id="424242").username == "octocat-424242"

    def test_bad_state_rejected(self, monkeypatch):
        self._use(monkeypatch, FakeProvider(GITHUB_PROFILE))
        res = self._callback(code="abc", state="forged")
        assert res["Location"] == "http://front.test/login?error=invalid_state"
        assert not User.objects.exists()

    def test_denied_by_user(self):
        res = self._callback(error="access_denied")
        assert res["Location"] == "http://front.test/login?error=access_denied"

    def test_provider_failure(self, monkeypatch):
        self._use(monkeypatch, FakeProvider(error="token_exchange_failed"))
        res = self._callback(code="abc", state=oauth.make_state())
        assert res["Location"] == "http://front.test/login?error=token_exchange_failed"

    def test_profile_without_email_rejected(self, monkeypatch):
        self._use(monkeypatch, FakeProvider({**GITHUB_PROFILE, "email": None}))
        res = self._callback(code="abc", state=oauth.make_state())
        assert res["Location"] == "http://front.test/login?error=invalid_profile"
        assert not User.objects.exists()

    def test_blocked_account_not_issued_tokens(self, make_user, monkeypatch):
        make_user("octocat", github_id="424242", role=Role.BLOCKED)
        self._use(monkeypatch, FakeProvider(GITHUB_PROFILE))
        res = self._callback(code="abc", state=oauth.make_state())
        assert res["Location"] == "http://front.test/login?error=account_blocked"


@pytest.mark.django_db
class TestTokenEndpoints:
    def setup_method(self):
        self.client = APIClient()

    def test_me_requires_auth(self):
        assert self.client.get(reverse("auth-me")).status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_returns_account(self, make_user):
        user = make_user("alice", email="alice@example.com")
        self.client.force_authenticate(user)
        body = self.client.get(reverse("auth-me")).json()
        assert body["username"] == "alice"
        assert body["role"] == Role.USER

    def test_refresh_rotates_and_old_token_is_rejected(self, make_user):
        user = make_user()
        refresh = str(RefreshToken.for_user(user))

        res = self.client.post(reverse("auth-refresh"), {"refresh": refresh}, format="json")
        assert res.status_code == status.HTTP_200_OK
        assert "access" in res.json() and "refresh" in res.json()

        again = self.client.post(reverse("auth-refresh"), {"refresh": refresh}, format="json")
        assert again.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_invalid_token(self):
        res = self.client.post(reverse("auth-refresh"), {"refresh": "garbage"}, format="json")
        assert res.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_blacklists_refresh(self, make_user):
        user = make_user()
        refresh = str(RefreshToken.for_user(user))
        assert self.client.post(reverse("auth-logout"), {"refresh": refresh}, format="json").status_code == status.HTTP_204_NO_CONTENT

        res = self.client.post(reverse("auth-refresh"), {"refresh": refresh}, format="json")
        assert res.status_code == status.HTTP_401_UNAUTHORIZED

    def test_blocked_user_cannot_refresh(self, make_user):
        user = make_user()
        refresh = str(RefreshToken.for_user(user))
        User.objects.filter(pk=user.pk).update(role=Role.BLOCKED)

        res = self.client.post(reverse("auth-refresh"), {"refresh": refresh}, format="json")
        assert res.status_code == status.HTTP_401_UNAUTHORIZED


class TestGitHubProvider:
    def test_authorize_url_carries_state_and_scope(self, settings):
        settings.GITHUB_CLIENT_ID = "cid"
        url = GitHubProvider(callback_url="http://api.test/cb").authorize_url("s1")
        params = parse_qs(urlparse(url).query)
        assert params["client_id"] == ["cid"]
        assert params["state"] == ["s1"]
        assert params["redirect_uri"] == ["http://api.test/cb"]


@pytest.mark.django_db
class TestHealth:
    def test_ok(self):
        res = APIClient().get("/health")
        assert res.status_code == status.HTTP_200_OK
        assert res.json()["status"] == "OK"
        assert res.json()["database"] == "connected"

    def test_database_down(self, monkeypatch):
        class BrokenConnection:
            def cursor(self):
                raise DatabaseError("down")

        monkeypatch.setattr("core.views.connection", BrokenConnection())
        res = APIClient().get("/health")
        assert res.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert res.json()["status"] == "UNHEALTHY"


class _Res:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        return self.body


class FakeSession:
    def __init__(self, token_body, user_body, emails=()):
        self.token_body = token_body
        self.user_body = user_body
        self.emails = list(emails)

    def post(self, url, **kwargs):
        return _Res(self.token_body)

    def get(self, url, **kwargs):
        if url.endswith("/user/emails"):
            return _Res(self.emails)
        return _Res(self.user_body)


class TestGitHubProfileFetch:
    def _provider(self, session):
        return GitHubProvider(client_id="cid", client_secret="secret", session=session)

    def test_normalizes_profile_and_falls_back_to_primary_email(self):
        session = FakeSession(
            {"access_token": "tok"},
            {"id": 7, "login": "octo", "name": None, "email": None, "followers": 5},
            emails=[{"email": "other@example.com", "verified": True}, {"email": "main@example.com", "primary": True, "verified": True}],
        )
        profile = self._provider(session).fetch_profile("code")
        assert profile["id"] == "7"
        assert profile["username"] == "octo"
        assert profile["email"] == "main@example.com"
        assert profile["followers"] == 5
        assert profile["following"] == 0

    def test_rejected_code_raises_provider_error(self):
        session = FakeSession({"error": "bad_verification_code"}, {})
        with pytest.raises(ProviderError):
            self._provider(session).fetch_profile("code")
