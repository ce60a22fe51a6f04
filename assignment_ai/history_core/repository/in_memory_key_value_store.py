from __future__ import annotations

from typing import Dict, Optional

from assignment_ai.history_core.repository.key_value_store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """딕셔너리 기반 키-값 저장소."""

    def __init__(self) -> None:
        """
        @returns None
        """
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
