from __future__ import annotations

from enum import Enum
from typing import Union


class ComparisonType(str, Enum):
    """비교 차원."""

    AGENT = "agent"
    OFFICE = "office"
    DEPARTMENT = "department"
    MODEL = "model"
    OVERALL = "overall"

    @classmethod
    def parse(cls, value: Union[str, "ComparisonType", None]) -> "ComparisonType":
        """
        @param value 차원 이름 또는 ComparisonType (None 이면 OVERALL).
        @returns ComparisonType.
        @raises ValueError 알 수 없는 차원 이름.
        """
        if value is None:
            return cls.OVERALL
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown comparison type: {value}") from None


DIMENSIONS = (
    ComparisonType.AGENT,
    ComparisonType.OFFICE,
    ComparisonType.DEPARTMENT,
    ComparisonType.MODEL,
)


class ChangeStatus(str, Enum):
    """차원 키별 변경 분류."""

    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
