from __future__ import annotations

import copy
import logging
import threading
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from assignment_ai.history_core.domain.comparison_result import ComparisonResult

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, str]


class ComparisonCache:
    """
    (snapshot1_id, snapshot2_id, 비교 차원) 키로 비교 결과를 보관하는 LRU 캐시.

    스냅샷은 생성 후 변경되지 않으므로 명시적으로 비우기 전까지 무효화하지 않습니다.
    저장과 조회 모두 사본을 주고받으므로 호출 측이 결과를 수정해도 캐시는 바뀌지 않습니다.
    여러 스레드에서 공유할 수 있도록 내부 락으로 보호합니다.
    """

    def __init__(self, max_entries: int = 256) -> None:
        """
        @param max_entries 최대 엔트리 수 (초과 시 가장 오래 사용되지 않은 항목 제거).
        @returns None
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: "OrderedDict[CacheKey, ComparisonResult]" = OrderedDict()
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> Optional[ComparisonResult]:
        """
        @param key 캐시 키.
        @returns 캐시된 비교 결과 또는 None.
        """
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return copy.deepcopy(result)

    def put(self, key: CacheKey, result: ComparisonResult) -> ComparisonResult:
        """
        @param key 캐시 키.
        @param result 저장할 비교 결과.
        @returns 저장된 비교 결과.
        """
        with self._lock:
            self._entries[key] = copy.deepcopy(result)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"비교 캐시 용량 초과로 제거: {evicted}")
        return result

    def get_or_create(self, key: CacheKey, builder: Callable[[], ComparisonResult]) -> ComparisonResult:
        """
        @param key 캐시 키.
        @param builder 캐시 미스 시 호출되는 생성 함수.
        @returns 캐시된 또는 새로 생성된 비교 결과.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"비교 캐시 적중: {key}")
            return cached
        return self.put(key, builder())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """
        @returns 저장된 비교 결과 개수.
        """
        with self._lock:
            return len(self._entries)


class NullComparisonCache(ComparisonCache):
    """아무것도 저장하지 않는 캐시 (매 호출마다 다시 계산)."""

    def __init__(self) -> None:
        super().__init__(max_entries=1)

    def put(self, key: CacheKey, result: ComparisonResult) -> ComparisonResult:
        return result
