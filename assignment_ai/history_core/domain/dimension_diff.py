from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from assignment_ai.history_core.domain.comparison_type import ChangeStatus, ComparisonType


@dataclass
class DiffEntry:
    """
    차원 키 하나의 비교 결과.

    added/removed 는 존재하는 쪽의 값을, changed/unchanged 는 {"before", "after"} 를 data 로 가집니다.
    """

    status: ChangeStatus
    data: Any
    change: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DiffSummary:
    added: int = 0
    removed: int = 0
    changed: int = 0
    unchanged: int = 0

    def record(self, status: ChangeStatus) -> None:
        """
        @param status 집계할 분류.
        @returns None
        """
        name = status.value
        setattr(self, name, getattr(self, name) + 1)

    @property
    def total(self) -> int:
        return self.added + self.removed + self.changed + self.unchanged


@dataclass
class DimensionDiff:
    """한 차원(영업사원/사무실/소속/모델)의 전체 비교 결과."""

    dimension: ComparisonType
    entries: Dict[str, DiffEntry] = field(default_factory=dict)
    summary: DiffSummary = field(default_factory=DiffSummary)

    def add(self, key: str, entry: DiffEntry) -> None:
        """
        @param key 차원 키 (agentId, 사무실명, 소속명, 모델명).
        @param entry 비교 결과.
        @returns None
        """
        self.entries[key] = entry
        self.summary.record(entry.status)

    def status_of(self, key: str) -> ChangeStatus:
        return self.entries[key].status
