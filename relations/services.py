import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count
from rest_framework.exceptions import NotFound, ValidationError

from core.models import Role
from core.serializers import UserSummaryOut
from notifications.models import Notification
from notifications.services import create_notification
from .models import Follow

log = logging.getLogger(__name__)
User = get_user_model()

SUGGESTIONS_DEFAULT = 10
SUGGESTIONS_MAX = 50


@dataclass(frozen=True)
class FollowResult:
    following: bool


def get_user_or_404(user_id):
    try:
        user = User.objects.filter(pk=user_id).first()
    except (ValueError, DjangoValidationError):
        user = None
    if user is None:
        raise NotFound("User not found.")
    return user


class RelationshipService:
    """
    팔로우 토글/조회/추천. 규칙:
    - 자기 자신 대상 금지 (400)
    - 새 팔로우에만 FOLLOW 알림 + new-follower 이벤트, 언팔로우는 조용히
    """

    @staticmethod
    def _validate_not_self(actor, target_id):
        if str(actor.id) == str(target_id):
            raise ValidationError({"detail": "Cannot follow yourself."})

    @staticmethod
    @transaction.atomic
    def toggle_follow(actor, target_id, live=None) -> FollowResult:
        RelationshipService._validate_not_self(actor, target_id)
        target = get_user_or_404(target_id)

        deleted, _ = Follow.objects.filter(follower=actor, following=target).delete()
        if deleted:
            log.info("User %s unfollowed %s", actor.id, target.id)
            return FollowResult(following=False)

        try:
            with transaction.atomic():
                Follow.objects.create(follower=actor, following=target)
        except IntegrityError:
            # 동시 요청으로 이미 생성됨
            return FollowResult(following=True)

        create_notification(recipient_id=target.id, sender_id=actor.id, type=Notification.Type.FOLLOW, live=live)
        if live is not None:
            data = UserSummaryOut(actor).data
            transaction.on_commit(lambda: live.to_user(target.id, "new-follower", data))
        log.info("User %s followed %s", actor.id, target.id)
        return FollowResult(following=True)

    @staticmethod
    def is_following(actor, target_id) -> bool:
        return Follow.objects.filter(follower=actor, following_id=target_id).exists()

    @staticmethod
    def followers_of(user):
        return Follow.objects.filter(following=user).select_related("follower").order_by("-created_at")

    @staticmethod
    def following_of(user):
        return Follow.objects.filter(follower=user).select_related("following").order_by("-created_at")

    @staticmethod
    def suggestions(actor, limit: int = SUGGESTIONS_DEFAULT):
        from moderation.models import BlockedUser

        limit = max(1, min(limit, SUGGESTIONS_MAX))
        return list(
            User.objects.exclude(pk=actor.pk)
            .exclude(role=Role.BLOCKED)
            .exclude(followers__follower=actor)
            .exclude(pk__in=BlockedUser.objects.filter(blocker=actor).values("blocked_id"))
            .exclude(pk__in=BlockedUser.objects.filter(blocked=actor).values("blocker_id"))
            .annotate(follower_total=Count("followers", distinct=True))
            .order_by("-follower_total", "-created_at")[:limit]
        )
