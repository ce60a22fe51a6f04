from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InsightImpact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class Insight:
    """규칙 기반으로 생성된 관찰 결과와 권장 조치."""

    type: str
    message: str
    impact: InsightImpact
    recommendation: str
