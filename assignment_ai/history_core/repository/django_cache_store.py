"""
Django 캐시 프레임워크 기반 히스토리 저장소.

`settings.CACHES` 에 정의된 백엔드(기본 LocMemCache, REDIS_URL 설정 시 RedisCache)를
그대로 사용합니다. 히스토리는 만료되면 안 되므로 항상 timeout=None 으로 저장합니다.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from assignment_ai.history_core.common.errors import PersistenceError
from assignment_ai.history_core.repository.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class DjangoCacheStore(KeyValueStore):
    """Django 캐시 별칭(alias)에 히스토리 문서를 저장합니다."""

    def __init__(self, alias: str = "default", cache: Optional[Any] = None) -> None:
        """
        @param alias settings.CACHES 의 캐시 별칭.
        @param cache 직접 주입할 캐시 객체 (없으면 alias 로 조회).
        @returns None
        """
        self._alias = alias
        self._cache = cache

    @property
    def cache(self) -> Any:
        if self._cache is None:
            from django.core.cache import caches

            self._cache = caches[self._alias]
        return self._cache

    def get(self, key: str) -> Optional[str]:
        try:
            return self.cache.get(key)
        except Exception as exc:
            logger.error(f"캐시 읽기 실패 (alias={self._alias}, key={key}): {exc}")
            raise PersistenceError(f"Failed to read {key}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            self.cache.set(key, value, timeout=None)
        except Exception as exc:
            logger.error(f"캐시 쓰기 실패 (alias={self._alias}, key={key}): {exc}")
            raise PersistenceError(f"Failed to write {key}") from exc

    def delete(self, key: str) -> None:
        try:
            self.cache.delete(key)
        except Exception as exc:
            logger.error(f"캐시 삭제 실패 (alias={self._alias}, key={key}): {exc}")
            raise PersistenceError(f"Failed to delete {key}") from exc
