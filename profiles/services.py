import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import NotFound

from contents.models import CONTENT_MODELS
from contents.services import visible_queryset
from core.models import Role, UserPreferences
from relations.models import Follow

log = logging.getLogger(__name__)
User = get_user_model()


def _profile_public(user) -> bool:
    # 설정 레코드가 없으면 기본값(공개)
    public = UserPreferences.objects.filter(user=user).values_list("profile_public", flat=True).first()
    return True if public is None else public


def get_profile_user(username: str, viewer=None):
    """
    username 으로 공개 프로필 대상 조회.
    정지 계정과 profile_public=False 인 계정은 본인 외에는 404.
    """
    user = User.objects.filter(username__iexact=username).first()
    own = user is not None and viewer is not None and viewer.is_authenticated and viewer.pk == user.pk
    if user is None or (not own and (user.role == Role.BLOCKED or not _profile_public(user))):
        raise NotFound("User not found.")
    return user


def profile_stats(user, viewer=None) -> dict:
    stats = {f"{kind.value}s_count": visible_queryset(model, viewer, author=user).count() for kind, model in CONTENT_MODELS.items()}
    stats["followers_count"] = Follow.objects.filter(following=user).count()
    stats["following_count"] = Follow.objects.filter(follower=user).count()
    if viewer is not None and viewer.is_authenticated and viewer.pk != user.pk:
        stats["is_following"] = Follow.objects.filter(follower=viewer, following=user).exists()
    else:
        stats["is_following"] = False
    return stats


@transaction.atomic
def update_profile(user, data: dict):
    for k, v in data.items():
        setattr(user, k, v)
    user.save(update_fields=[*data.keys(), "updated_at"])
    log.info("Profile %s updated fields=%s", user.id, sorted(data))
    return user


@transaction.atomic
def update_preferences(user, data: dict) -> UserPreferences:
    prefs = UserPreferences.for_user(user)
    for k, v in data.items():
        setattr(prefs, k, v)
    prefs.save()
    return prefs
