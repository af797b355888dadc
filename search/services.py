import logging
from collections import Counter
from datetime import timedelta
from typing import List

from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from django.utils import timezone

from common.content import ContentKind
from contents.models import CONTENT_MODELS
from contents.services import annotate_for, visible_queryset
from core.models import Role
from engagements.models import Like

log = logging.getLogger(__name__)
User = get_user_model()

# 종류별 본문 검색 대상 필드
TEXT_FIELDS = {
    ContentKind.SNIPPET: ("title", "description", "code"),
    ContentKind.DOC: ("title", "content"),
    ContentKind.BUG: ("title", "description", "code"),
}

SEARCH_TYPES = ("all", "snippets", "docs", "bugs", "users")
TYPE_KINDS = {"snippets": ContentKind.SNIPPET, "docs": ContentKind.DOC, "bugs": ContentKind.BUG}


def _text_query(fields, q: str) -> Q:
    cond = Q()
    for f in fields:
        cond |= Q(**{f"{f}__icontains": q})
    return cond


def search_content(kind: ContentKind, q: str, user=None):
    """제목/본문/태그 부분 일치 (대소문자 무시). 볼 수 있는 항목만."""
    model = CONTENT_MODELS[kind]
    cond = _text_query(TEXT_FIELDS[kind], q) | Q(tags__icontains=q.lower())
    qs = visible_queryset(model, user).filter(cond)
    return annotate_for(qs, user).order_by("-created_at")


def search_users(q: str):
    return (
        User.objects.filter(_text_query(("username", "name", "bio"), q))
        .exclude(role=Role.BLOCKED)
        .exclude(preferences__profile_public=False)
        .order_by("username")
    )


def trending(*, days: int = 7, limit: int = 10, user=None) -> List:
    """
    최근 days 일 동안 받은 좋아요 수 상위 콘텐츠.
    반환 항목에는 recent_likes 속성이 붙는다. 비공개/만료 항목은 건너뛴다.
    """
    since = timezone.now() - timedelta(days=days)
    ranked = (
        Like.objects.filter(created_at__gte=since)
        .values("content_kind", "content_id")
        .annotate(recent=Count("pk"))
        .order_by("-recent", "content_id")
    )

    picked = []
    for row in ranked.iterator():
        kind = ContentKind(row["content_kind"])
        item = annotate_for(visible_queryset(CONTENT_MODELS[kind], user).filter(pk=row["content_id"]), user).first()
        if item is None:
            continue
        item.recent_likes = row["recent"]
        picked.append(item)
        if len(picked) >= limit:
            break
    return picked


def popular_tags(limit: int = 20) -> List[dict]:
    counter = Counter()
    for model in CONTENT_MODELS.values():
        for tags in visible_queryset(model).values_list("tags", flat=True).iterator():
            counter.update(t for t in (tags or []) if isinstance(t, str))
    return [{"tag": tag, "count": count} for tag, count in counter.most_common(limit)]
