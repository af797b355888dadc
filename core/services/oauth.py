import logging
import secrets
from typing import Dict, Tuple
from urllib.parse import urlencode

from django.conf import settings
from django.core import signing
from django.db import transaction
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.tokens import RefreshToken

from core.models import User
from core.serializers import ProviderProfileIn

log = logging.getLogger(__name__)

STATE_SALT = "core.oauth.state"


def make_state() -> str:
    return signing.dumps({"nonce": secrets.token_urlsafe(12)}, salt=STATE_SALT)


def verify_state(state: str) -> bool:
    if not state:
        return False
    try:
        signing.loads(state, salt=STATE_SALT, max_age=getattr(settings, "OAUTH_STATE_MAX_AGE", 600))
    except signing.BadSignature:
        return False
    return True


def _free_username(login: str, provider_id: str) -> str:
    # 다른 계정이 이미 같은 username 을 쓰고 있으면 provider id 를 붙인다
    taken = User.objects.filter(username=login).exclude(github_id=provider_id).exists()
    return f"{login}-{provider_id}"[:39] if taken else login


@transaction.atomic
def upsert_user_from_profile(profile: Dict) -> Tuple[User, bool]:
    s = ProviderProfileIn(data=profile)
    if not s.is_valid():
        log.warning("Rejected OAuth profile: %s", s.errors)
        raise ValidationError({"detail": "invalid_profile"})
    p = s.validated_data

    defaults = {
        "username": _free_username(p["username"], p["id"]),
        "email": p["email"],
        "name": p.get("name") or p["username"],
        "avatar": p.get("avatar_url") or "",
        "github_url": p.get("html_url") or "",
        "website": p.get("blog") or "",
        "location": p.get("location") or "",
        "company": p.get("company") or "",
        "twitter_username": p.get("twitter_username") or "",
        "public_repos": p.get("public_repos") or 0,
        "github_followers": p.get("followers") or 0,
        "github_following": p.get("following") or 0,
        "github_created_at": p.get("created_at"),
    }

    user = User.objects.select_for_update().filter(github_id=p["id"]).first()
    if user is None:
        bio = p.get("bio") or ""
        user = User.objects.create_user(github_id=p["id"], bio=bio, **defaults)
        log.info("Created user %s from GitHub profile %s", user.id, p["id"])
        return user, True

    # bio 는 가입 이후 사용자가 직접 관리
    for k, v in defaults.items():
        setattr(user, k, v)
    user.save()
    log.info("Updated user %s from GitHub profile %s", user.id, p["id"])
    return user, False


def issue_tokens(user: User) -> Dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}


def frontend_redirect(path: str, fragment: Dict = None, query: Dict = None) -> str:
    url = f"{settings.FRONTEND_URL}{path}"
    if query:
        url = f"{url}?{urlencode(query)}"
    if fragment:
        url = f"{url}#{urlencode(fragment)}"
    return url
