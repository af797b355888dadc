import logging
from typing import Optional

from django.db import DatabaseError, transaction

from common.content import ContentRef
from .models import Notification
from .serializers import NotificationOut

log = logging.getLogger(__name__)


def create_notification(*, recipient_id, sender_id, type: str, content: Optional[ContentRef] = None, comment_id=None, live=None) -> Optional[Notification]:
    """
    알림 저장 후, 커밋이 끝나면 수신자의 user room 으로 "notification" 이벤트를 보낸다.
    live 가 None 이면 저장만 한다. 저장 실패는 로그만 남기고 None 을 반환한다.
    """
    try:
        with transaction.atomic():
            notification = Notification.objects.create(
                recipient_id=recipient_id,
                sender_id=sender_id,
                type=type,
                content_kind=content.kind.value if content else None,
                content_id=content.id if content else None,
                comment_id=comment_id,
            )
            data = NotificationOut(Notification.objects.select_related("sender").get(pk=notification.pk)).data if live is not None else None
    except DatabaseError:
        log.exception("Notification dropped: type=%s recipient=%s sender=%s", type, recipient_id, sender_id)
        return None
    log.info("Notification %s created: type=%s recipient=%s", notification.id, type, recipient_id)

    if live is not None:
        transaction.on_commit(lambda: live.to_user(recipient_id, "notification", data))
    return notification


def emit_to_followers(live, author_id, event: str, payload) -> int:
    """
    작성자의 팔로워 전원(+작성자 본인)의 user room 으로 이벤트 전송. best-effort.
    반환값: 대상 팔로워 수 (실패 시 0)
    """
    if live is None or not author_id or not event or payload is None:
        log.warning("Skipped follower fan-out: author=%s event=%s", author_id, event)
        return 0

    from relations.models import Follow

    try:
        follower_ids = list(Follow.objects.filter(following_id=author_id).values_list("follower_id", flat=True))
        live.to_users([*follower_ids, author_id], event, payload)
    except Exception:
        log.exception("Follower fan-out failed: author=%s event=%s", author_id, event)
        return 0

    log.debug("Emitted %s to %d followers of %s", event, len(follower_ids), author_id)
    return len(follower_ids)


def unread_count(user) -> int:
    return Notification.objects.filter(recipient=user, is_read=False).count()


def mark_read(user, ids) -> int:
    return Notification.objects.filter(recipient=user, id__in=ids, is_read=False).update(is_read=True)


def mark_all_read(user) -> int:
    return Notification.objects.filter(recipient=user, is_read=False).update(is_read=True)
