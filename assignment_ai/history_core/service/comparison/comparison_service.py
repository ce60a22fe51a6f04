"""
=============================================================================
배정 이력 비교 서비스 (Assignment Comparison Service)
=============================================================================

두 스냅샷을 받아 요약 → 차원별 상세 → 메트릭 → 인사이트 순으로 비교 결과를 만들고,
(snapshot1_id, snapshot2_id, 차원) 키로 결과를 캐시합니다.

스냅샷은 생성 후 변경되지 않으므로 같은 키는 항상 같은 결과를 냅니다.
캐시는 생성자에서 주입하며, 테스트에서는 NullComparisonCache 로 대체할 수 있습니다.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Union

from assignment_ai.history_core.config.history_config import get_history_config
from assignment_ai.history_core.domain.comparison_result import ComparisonResult
from assignment_ai.history_core.domain.comparison_type import ComparisonType
from assignment_ai.history_core.domain.snapshot import Snapshot, coerce_snapshot
from assignment_ai.history_core.repository.comparison_cache import ComparisonCache
from assignment_ai.history_core.service.comparison.diff_engine import compare_dimension
from assignment_ai.history_core.service.insights.insight_generator import generate_insights, recommendations
from assignment_ai.history_core.service.metrics.metrics_calculator import calculate_metrics, comparison_summary

logger = logging.getLogger(__name__)

REPORT_TITLE = "배정 이력 비교 리포트"

SnapshotLike = Union[Snapshot, Mapping[str, Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssignmentComparisonService:
    """두 배정 스냅샷의 비교 결과와 리포트를 생성하는 서비스."""

    def __init__(
        self,
        cache: Optional[ComparisonCache] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        @param cache 비교 결과 캐시 (없으면 설정값 크기의 LRU 캐시).
        @param clock 현재 시각 함수 (테스트 주입용).
        @returns None
        """
        if cache is None:
            cache = ComparisonCache(max_entries=get_history_config().COMPARISON_CACHE_MAX_ENTRIES)
        self.cache = cache
        self._clock = clock or _utcnow

    def compare(
        self,
        snapshot1: SnapshotLike,
        snapshot2: SnapshotLike,
        comparison_type: Union[str, ComparisonType, None] = ComparisonType.OVERALL,
    ) -> ComparisonResult:
        """
        @param snapshot1 기준 스냅샷.
        @param snapshot2 비교 스냅샷.
        @param comparison_type 비교 차원 (agent/office/department/model/overall).
        @returns 캐시된 또는 새로 계산한 ComparisonResult.
        @raises MalformedSnapshotError 스냅샷 페이로드 검증 실패.
        @raises ValueError 알 수 없는 비교 차원.
        """
        first = coerce_snapshot(snapshot1)
        second = coerce_snapshot(snapshot2)
        dimension = ComparisonType.parse(comparison_type)
        cache_key = (first.id, second.id, dimension.value)
        return self.cache.get_or_create(cache_key, lambda: self._build(first, second, dimension))

    def build_report(
        self,
        snapshot1: SnapshotLike,
        snapshot2: SnapshotLike,
        comparison_type: Union[str, ComparisonType, None] = ComparisonType.OVERALL,
    ) -> Dict[str, Any]:
        """
        PDF/JSON 내보내기에 넘길 리포트 페이로드를 만듭니다.

        @param snapshot1 기준 스냅샷.
        @param snapshot2 비교 스냅샷.
        @param comparison_type 비교 차원.
        @returns title, subtitle, timestamp, comparison, recommendations.
        """
        first = coerce_snapshot(snapshot1)
        second = coerce_snapshot(snapshot2)
        comparison = self.compare(first, second, comparison_type)
        return {
            "title": REPORT_TITLE,
            "subtitle": f"{first.display_name} vs {second.display_name}",
            "timestamp": self._clock().isoformat(),
            "comparison": comparison.to_dict(),
            "recommendations": recommendations(comparison.insights),
        }

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_size(self) -> int:
        return self.cache.size()

    def _build(self, first: Snapshot, second: Snapshot, dimension: ComparisonType) -> ComparisonResult:
        logger.debug(f"비교 결과 계산: {first.id} → {second.id} ({dimension.value})")
        summary = comparison_summary(first, second)
        metrics = calculate_metrics(first, second)
        return ComparisonResult(
            snapshot1_id=first.id,
            snapshot2_id=second.id,
            comparison_type=dimension,
            timestamp=self._clock(),
            summary=summary,
            details=compare_dimension(first, second, dimension),
            metrics=metrics,
            insights=generate_insights(summary, metrics),
        )
