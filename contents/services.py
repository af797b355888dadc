import logging
from typing import Iterable

from django.db import transaction
from django.db.models import BooleanField, Count, Exists, IntegerField, OuterRef, Q, Subquery, Value
from django.db.models.functions import Coalesce
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied

from common.content import ContentKind, ContentRef
from common.exceptions import Gone
from .models import Bug

log = logging.getLogger(__name__)


def _edge_count(model, kind: ContentKind):
    counts = model.objects.filter(content_kind=kind.value, content_id=OuterRef("pk")).order_by().values("content_id").annotate(c=Count("pk")).values("c")
    return Coalesce(Subquery(counts, output_field=IntegerField()), Value(0))


def annotate_for(queryset, user):
    """
    목록/상세 응답용 집계(likes/comments/bookmarks 수)와 호출자 기준 is_liked / is_bookmarked 를 붙인다.
    익명 호출자는 항상 False.
    """
    from comments.models import Comment
    from engagements.models import Bookmark, Like

    kind = queryset.model.kind
    qs = queryset.select_related("author").annotate(
        likes_count=_edge_count(Like, kind),
        comments_count=_edge_count(Comment, kind),
        bookmarks_count=_edge_count(Bookmark, kind),
    )
    if user is not None and user.is_authenticated:
        edge = {"user_id": user.id, "content_kind": kind.value, "content_id": OuterRef("pk")}
        return qs.annotate(is_liked=Exists(Like.objects.filter(**edge)), is_bookmarked=Exists(Bookmark.objects.filter(**edge)))
    return qs.annotate(is_liked=Value(False, output_field=BooleanField()), is_bookmarked=Value(False, output_field=BooleanField()))


def visible_queryset(model, user=None, author=None):
    # 공개 항목만. author 본인이 자기 목록을 볼 때는 비공개도 포함. 버그는 만료 전 것만
    qs = model.objects.all()
    if author is not None:
        qs = qs.filter(author=author)
    if model is not Bug:
        own = author is not None and user is not None and user.is_authenticated and author.pk == user.pk
        if not own:
            qs = qs.filter(is_public=True)
    else:
        qs = qs.filter(expires_at__gt=timezone.now())
    return qs


def ensure_readable(item, user):
    if not item.is_public and not item.is_owned_by(user):
        raise PermissionDenied("Access denied to this content.")
    if item.is_expired:
        raise Gone("Bug report has expired.")


def get_readable(ref: ContentRef, user, annotate: bool = False):
    """ContentRef 대상 조회 + 가시성 검사. 404 / 403 (비공개) / 410 (만료 버그)"""
    qs = ref.model.objects.filter(pk=ref.id)
    qs = annotate_for(qs, user) if annotate else qs.select_related("author")
    item = qs.first()
    if item is None:
        raise NotFound(f"{ref.model._meta.verbose_name.capitalize()} not found.")
    ensure_readable(item, user)
    return item


def get_owned(model, pk, actor, allow_expired: bool = False):
    item = model.objects.select_related("author").filter(pk=pk).first()
    if item is None:
        raise NotFound(f"{model._meta.verbose_name.capitalize()} not found.")
    if item.author_id != actor.id:
        raise PermissionDenied("Not authorized to modify this content.")
    if item.is_expired and not allow_expired:
        raise Gone("Bug report has expired.")
    return item


def create_content(*, model, actor, data):
    item = model.objects.create(author=actor, **data)
    log.info("%s %s created by %s", model.__name__, item.id, actor.id)
    return item


def update_content(item, data):
    for k, v in data.items():
        setattr(item, k, v)
    item.save()
    return item


def _delete_dependents(kind: ContentKind, ids: Iterable) -> None:
    from comments.models import Comment
    from engagements.models import Bookmark, Like
    from moderation.models import Report
    from notifications.models import Notification

    ids = list(ids)
    target = {"content_kind": kind.value, "content_id__in": ids}
    comment_ids = list(Comment.objects.filter(**target).values_list("id", flat=True))

    Like.objects.filter(**target).delete()
    Bookmark.objects.filter(**target).delete()
    Notification.objects.filter(**target).delete()
    Report.objects.filter(Q(target_kind=kind.value, target_id__in=ids) | Q(target_kind=Report.TargetKind.COMMENT, target_id__in=comment_ids)).delete()
    # 답글은 같은 대상을 가리키므로 함께 삭제된다
    Comment.objects.filter(id__in=comment_ids).delete()


@transaction.atomic
def delete_content(item) -> None:
    _delete_dependents(item.kind, [item.pk])
    item.delete()
    log.info("%s %s deleted with dependents", item.__class__.__name__, item.pk)


@transaction.atomic
def purge_expired_bugs(now=None) -> int:
    now = now or timezone.now()
    ids = list(Bug.objects.filter(expires_at__lte=now).values_list("id", flat=True))
    if not ids:
        return 0
    _delete_dependents(ContentKind.BUG, ids)
    _, per_model = Bug.objects.filter(id__in=ids).delete()
    deleted = per_model.get(Bug._meta.label, 0)
    log.info("Purged %d expired bug reports", deleted)
    return deleted
