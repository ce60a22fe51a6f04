"""
배정 히스토리 기능을 UI 계층에 노출하는 서비스.

호스트 애플리케이션이 한 번 생성해 공유하며, 저장소와 비교 서비스는 생성자에서 주입합니다.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from assignment_ai.history_core.common.errors import NotFoundError
from assignment_ai.history_core.config.history_config import get_history_config
from assignment_ai.history_core.domain.comparison_result import ComparisonResult
from assignment_ai.history_core.domain.comparison_type import ComparisonType
from assignment_ai.history_core.domain.snapshot import AgentAssignment, AssignmentData, AssignmentSettings, Snapshot
from assignment_ai.history_core.repository.django_cache_store import DjangoCacheStore
from assignment_ai.history_core.repository.snapshot_store import SnapshotStore
from assignment_ai.history_core.service.comparison.comparison_service import AssignmentComparisonService, SnapshotLike

logger = logging.getLogger(__name__)

# 설정 비교 시 항상 포함하는 가중치 키
RATIO_KEYS = ("turnoverRate", "storeCount", "remainingInventory", "salesVolume")


class AssignmentHistoryService:
    """배정 히스토리 저장/조회/비교 서비스."""

    def __init__(
        self,
        store: Optional[SnapshotStore] = None,
        comparison_service: Optional[AssignmentComparisonService] = None,
    ) -> None:
        """
        @param store 스냅샷 저장소 (없으면 메모리 저장소).
        @param comparison_service 비교 서비스 (없으면 기본 캐시 사용).
        @returns None
        """
        self.store = store or SnapshotStore()
        self.comparison_service = comparison_service or AssignmentComparisonService()

    # -------------------------------------------------------------------------
    # 스냅샷 저장소
    # -------------------------------------------------------------------------
    def create_snapshot(
        self,
        assignment_data: Union[AssignmentData, Mapping[str, Any], None],
        settings: Union[AssignmentSettings, Mapping[str, Any], None],
        agents: Optional[Iterable[Union[AgentAssignment, Mapping[str, Any]]]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Snapshot:
        return self.store.create(assignment_data, settings, agents, metadata)

    def save_snapshot(self, snapshot: SnapshotLike) -> bool:
        return self.store.save(snapshot)

    def list_snapshots(self) -> List[Snapshot]:
        return self.store.list()

    def get_snapshot(self, snapshot_id: str) -> Optional[Snapshot]:
        return self.store.get(snapshot_id)

    def delete_snapshot(self, snapshot_id: str) -> bool:
        return self.store.delete(snapshot_id)

    def clear_snapshots(self) -> bool:
        return self.store.clear()

    def store_stats(self) -> Dict[str, Any]:
        return self.store.stats()

    def export_history(self, snapshot_ids: Optional[Sequence[str]] = None) -> str:
        return self.store.export_history(snapshot_ids)

    def import_history(self, json_text: str) -> bool:
        return self.store.import_history(json_text)

    # -------------------------------------------------------------------------
    # 비교
    # -------------------------------------------------------------------------
    def compare(
        self,
        snapshot1: SnapshotLike,
        snapshot2: SnapshotLike,
        comparison_type: Union[str, ComparisonType, None] = ComparisonType.OVERALL,
    ) -> ComparisonResult:
        return self.comparison_service.compare(snapshot1, snapshot2, comparison_type)

    def compare_ids(
        self,
        snapshot_id1: str,
        snapshot_id2: str,
        comparison_type: Union[str, ComparisonType, None] = ComparisonType.OVERALL,
    ) -> Optional[ComparisonResult]:
        """
        @param snapshot_id1 기준 스냅샷 ID.
        @param snapshot_id2 비교 스냅샷 ID.
        @param comparison_type 비교 차원.
        @returns 비교 결과 (어느 한쪽 ID 라도 없으면 None).
        """
        try:
            first = self.store.require(snapshot_id1)
            second = self.store.require(snapshot_id2)
        except NotFoundError as exc:
            logger.warning(f"비교 대상 스냅샷을 찾을 수 없습니다: {exc.snapshot_id}")
            return None
        return self.comparison_service.compare(first, second, comparison_type)

    def build_report(
        self,
        snapshot1: SnapshotLike,
        snapshot2: SnapshotLike,
        comparison_type: Union[str, ComparisonType, None] = ComparisonType.OVERALL,
    ) -> Dict[str, Any]:
        return self.comparison_service.build_report(snapshot1, snapshot2, comparison_type)

    def compare_settings(self, snapshot_id1: str, snapshot_id2: str) -> Optional[Dict[str, Any]]:
        """
        두 배정의 가중치 설정과 결과 합계를 비교합니다.

        @param snapshot_id1 기준 스냅샷 ID.
        @param snapshot_id2 비교 스냅샷 ID.
        @returns timestamp1/2, settings(가중치별 before/after/change), results (없는 ID 면 None).
        """
        first = self.store.get(snapshot_id1)
        second = self.store.get(snapshot_id2)
        if first is None or second is None:
            return None

        ratios1 = first.settings.ratios
        ratios2 = second.settings.ratios
        extra_keys = sorted((set(ratios1) | set(ratios2)) - set(RATIO_KEYS))
        settings = {
            key: _before_after(ratios1.get(key, 0.0), ratios2.get(key, 0.0))
            for key in list(RATIO_KEYS) + extra_keys
        }

        return {
            "timestamp1": first.timestamp.isoformat(),
            "timestamp2": second.timestamp.isoformat(),
            "settings": settings,
            "results": {
                "total_assigned": _before_after(first.metadata.total_assigned, second.metadata.total_assigned),
                "total_agents": _before_after(first.metadata.total_agents, second.metadata.total_agents),
            },
        }

    def clear_cache(self) -> None:
        self.comparison_service.clear_cache()

    def cache_size(self) -> int:
        return self.comparison_service.cache_size()


def build_django_history_service(alias: Optional[str] = None) -> AssignmentHistoryService:
    """
    Django 캐시 프레임워크에 히스토리를 저장하는 서비스를 만듭니다.

    @param alias settings.CACHES 별칭 (없으면 HISTORY_CACHE_ALIAS).
    @returns AssignmentHistoryService.
    """
    config = get_history_config()
    backend = DjangoCacheStore(alias=alias or config.HISTORY_CACHE_ALIAS)
    return AssignmentHistoryService(store=SnapshotStore(backend=backend))


def _before_after(before: float, after: float) -> Dict[str, float]:
    return {"before": before, "after": after, "change": after - before}
