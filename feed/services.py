import heapq
import logging
from operator import attrgetter
from typing import Iterable, List

from contents.models import CONTENT_MODELS
from contents.services import annotate_for, visible_queryset
from relations.models import Follow

log = logging.getLogger(__name__)


class MergedContentFeed:
    """
    종류가 다른 콘텐츠 쿼리셋 여러 개를 created_at 내림차순 하나의 목록처럼 다룬다.
    PagePagination 이 쓰는 count() 와 슬라이싱만 지원한다.
    각 쿼리셋에서 stop 개까지만 읽어 병합하므로 깊은 페이지일수록 비싸다.
    """

    def __init__(self, querysets: Iterable):
        self.querysets = [qs.order_by("-created_at", "-pk") for qs in querysets]

    def count(self) -> int:
        return sum(qs.count() for qs in self.querysets)

    def __getitem__(self, key) -> List:
        if not isinstance(key, slice):
            raise TypeError("MergedContentFeed supports slicing only.")
        start = key.start or 0
        stop = key.stop if key.stop is not None else self.count()
        if stop <= start:
            return []
        heads = [list(qs[:stop]) for qs in self.querysets]
        merged = heapq.merge(*heads, key=attrgetter("created_at"), reverse=True)
        return [item for i, item in enumerate(merged) if start <= i < stop]


def following_feed(user) -> MergedContentFeed:
    """팔로잉 + 본인 콘텐츠. 비공개 항목과 만료된 버그는 제외."""
    author_ids = list(Follow.objects.filter(follower=user).values_list("following_id", flat=True))
    author_ids.append(user.id)
    querysets = [annotate_for(visible_queryset(model, user).filter(author_id__in=author_ids), user) for model in CONTENT_MODELS.values()]
    log.debug("Feed for %s over %d authors", user.id, len(author_ids))
    return MergedContentFeed(querysets)
