import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from common.content import ContentKind, ContentRef
from contents.models import Bug, CONTENT_MODELS
from contents.services import annotate_for, get_readable
from notifications.models import Notification
from notifications.services import create_notification
from .models import Bookmark, Like

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleResult:
    active: bool
    count: int


def _toggle(model, *, actor, ref: ContentRef) -> bool:
    # 있으면 삭제, 없으면 생성. 동시 생성은 유니크 제약으로 흡수
    deleted, _ = model.objects.filter(user=actor, **ref.as_fields()).delete()
    if deleted:
        return False
    try:
        with transaction.atomic():
            model.objects.create(user=actor, **ref.as_fields())
    except IntegrityError:
        log.info("Concurrent %s create absorbed: user=%s ref=%s", model.__name__, actor.id, ref)
    return True


@transaction.atomic
def toggle_like(*, actor, ref: ContentRef, live=None) -> ToggleResult:
    item = get_readable(ref, actor)
    liked = _toggle(Like, actor=actor, ref=ref)
    if liked and item.author_id != actor.id:
        create_notification(recipient_id=item.author_id, sender_id=actor.id, type=Notification.Type.LIKE, content=ref, live=live)
    return ToggleResult(liked, Like.objects.filter(**ref.as_fields()).count())


@transaction.atomic
def toggle_bookmark(*, actor, ref: ContentRef) -> ToggleResult:
    get_readable(ref, actor)
    bookmarked = _toggle(Bookmark, actor=actor, ref=ref)
    return ToggleResult(bookmarked, Bookmark.objects.filter(**ref.as_fields()).count())


def bookmarks_of(actor):
    return Bookmark.objects.filter(user=actor).order_by("-created_at")


def resolve_bookmarked(bookmarks: List[Bookmark], actor) -> Dict:
    """
    북마크 페이지의 콘텐츠를 종류별로 한 번씩 조회한다.
    반환: {(kind, id): item}. 지금 볼 수 없는 항목(비공개 전환, 만료 버그)은 빠진다.
    """
    ids_by_kind = defaultdict(list)
    for b in bookmarks:
        ids_by_kind[ContentKind(b.content_kind)].append(b.content_id)

    found = {}
    for kind, ids in ids_by_kind.items():
        model = CONTENT_MODELS[kind]
        qs = model.objects.filter(pk__in=ids)
        if model is Bug:
            qs = qs.filter(expires_at__gt=timezone.now())
        else:
            qs = qs.filter(Q(is_public=True) | Q(author=actor))
        for item in annotate_for(qs, actor):
            found[(kind.value, item.pk)] = item
    return found
