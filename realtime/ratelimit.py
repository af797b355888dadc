import time
from typing import Callable, Dict

WINDOW_SECONDS = 60.0


class EventRateLimiter:
    """
    연결 하나의 이벤트별 카운터. 창(기본 60초)이 지나면 모든 카운터를 0 으로 되돌린다.
    limits 에 없는 이벤트는 제한하지 않는다.
    """

    def __init__(self, limits: Dict[str, int], window: float = WINDOW_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.limits = dict(limits)
        self.window = window
        self._clock = clock
        self._counts: Dict[str, int] = {}
        self._window_start = clock()

    def allow(self, event: str) -> bool:
        now = self._clock()
        if now - self._window_start >= self.window:
            self._counts.clear()
            self._window_start = now

        limit = self.limits.get(event)
        if limit is None:
            return True

        used = self._counts.get(event, 0)
        if used >= limit:
            return False
        self._counts[event] = used + 1
        return True

    def used(self, event: str) -> int:
        return self._counts.get(event, 0)

    def reset(self):
        self._counts.clear()
        self._window_start = self._clock()
