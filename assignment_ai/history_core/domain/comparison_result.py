from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Union

from assignment_ai.history_core.common.plain import to_plain
from assignment_ai.history_core.domain.comparison_type import ComparisonType
from assignment_ai.history_core.domain.dimension_diff import DimensionDiff
from assignment_ai.history_core.domain.insight import Insight

ComparisonDetails = Union[DimensionDiff, Dict[str, DimensionDiff]]


@dataclass
class ComparisonResult:
    """두 스냅샷 비교 결과 (요약, 차원별 상세, 메트릭, 인사이트)."""

    snapshot1_id: str
    snapshot2_id: str
    comparison_type: ComparisonType
    timestamp: datetime
    summary: Dict[str, Any]
    details: ComparisonDetails
    metrics: Dict[str, Any]
    insights: List[Insight] = field(default_factory=list)

    def dimension(self, name: Union[str, ComparisonType]) -> DimensionDiff:
        """
        @param name 조회할 차원.
        @returns 해당 차원의 DimensionDiff (OVERALL 결과에서도 조회 가능).
        """
        dimension = ComparisonType.parse(name)
        if isinstance(self.details, DimensionDiff):
            if self.details.dimension != dimension:
                raise KeyError(dimension.value)
            return self.details
        return self.details[dimension.value]

    def to_dict(self) -> Dict[str, Any]:
        """
        @returns JSON 직렬화 가능한 비교 결과.
        """
        return to_plain(self)
