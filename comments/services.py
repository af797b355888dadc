import logging
from typing import Optional

from django.db import transaction
from django.db.models import Prefetch
from rest_framework.exceptions import NotFound, ValidationError

from common.content import ContentRef
from contents.services import get_readable
from notifications.models import Notification
from notifications.services import create_notification
from .models import Comment
from .serializers import CommentOut

log = logging.getLogger(__name__)


@transaction.atomic
def create_comment(*, actor, ref: ContentRef, content: str, parent_id=None, live=None) -> Comment:
    """
    대상 검증(404/403/410) -> parent 검증 -> 저장 -> 작성자 알림(본인 제외) -> content room 브로드캐스트(커밋 후)
    """
    target = get_readable(ref, actor)

    parent: Optional[Comment] = None
    if parent_id:
        parent = Comment.objects.filter(id=parent_id).first()
        if parent is None:
            raise NotFound("Parent comment not found.")
        if parent.content_ref != ref:
            raise ValidationError({"parent_id": "Parent comment must be on the same content."})
        if parent.parent_id:
            raise ValidationError({"parent_id": "Replies can only be one level deep."})

    comment = Comment.objects.create(author=actor, parent=parent, content=content, **ref.as_fields())
    log.info("Comment %s created on %s %s by %s", comment.id, ref.kind.value, ref.id, actor.id)

    if target.author_id != actor.id:
        create_notification(
            recipient_id=target.author_id,
            sender_id=actor.id,
            type=Notification.Type.REPLY if parent else Notification.Type.COMMENT,
            content=ref,
            comment_id=comment.id,
            live=live,
        )

    if live is not None:
        data = CommentOut(comment).data
        transaction.on_commit(lambda: live.to_content(ref.id, "new_comment", data))
    return comment


def update_comment(comment: Comment, content: str) -> Comment:
    comment.content = content
    comment.save(update_fields=["content", "updated_at"])
    return comment


@transaction.atomic
def delete_comment(comment: Comment) -> None:
    from moderation.models import Report

    ids = [comment.id, *comment.replies.values_list("id", flat=True)]
    Report.objects.filter(target_kind=Report.TargetKind.COMMENT, target_id__in=ids).delete()
    comment.delete()
    log.info("Comment %s deleted with %d replies", ids[0], len(ids) - 1)


def threads_for(ref: ContentRef):
    replies = Comment.objects.select_related("author").order_by("created_at")
    return (
        Comment.objects.filter(parent__isnull=True, **ref.as_fields())
        .select_related("author")
        .prefetch_related(Prefetch("replies", queryset=replies))
        .order_by("-created_at")
    )
