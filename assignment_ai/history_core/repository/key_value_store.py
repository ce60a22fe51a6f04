from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """히스토리 영속화용 키-값 저장소 인터페이스."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        @param key 네임스페이스 키.
        @returns 저장된 문자열 또는 None.
        @raises PersistenceError 읽기 실패 시.
        """
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        @param key 네임스페이스 키.
        @param value 저장할 문자열 (JSON 문서).
        @returns None
        @raises PersistenceError 쓰기 실패 시.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        @param key 삭제할 키 (없어도 오류가 아님).
        @returns None
        @raises PersistenceError 삭제 실패 시.
        """
        raise NotImplementedError
