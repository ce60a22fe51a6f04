"""
차원별(영업사원/사무실/소속/모델) 스냅샷 비교.

모든 키를 added/removed/changed/unchanged 중 정확히 하나로 분류합니다.
changed 여부는 최상위 수치 필드(수량, 영업사원 수 또는 모델 수)만으로 판단합니다.
따라서 합계가 같고 색상 구성만 바뀐 경우는 unchanged 로 분류되며,
색상/모델별 세부 변화는 change 안의 상세 맵에서만 드러납니다.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Union

from assignment_ai.history_core.domain.comparison_type import DIMENSIONS, ChangeStatus, ComparisonType
from assignment_ai.history_core.domain.dimension_diff import DiffEntry, DimensionDiff
from assignment_ai.history_core.domain.group_entry import GroupEntry, ModelGroupEntry
from assignment_ai.history_core.domain.snapshot import AgentAssignment, AgentModelAssignment, Snapshot
from assignment_ai.history_core.service.aggregation.aggregation_indexer import (
    group_by_department,
    group_by_model,
    group_by_office,
)

Measure = Callable[[Any], Dict[str, int]]
Detail = Callable[[Any, Any], Dict[str, Any]]


def compare_by_agent(snapshot1: Snapshot, snapshot2: Snapshot) -> DimensionDiff:
    """
    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @returns agentId 별 비교 결과 (change: quantity, models, models_detail).
    """
    return _diff_views(
        ComparisonType.AGENT,
        snapshot1.agent_map(),
        snapshot2.agent_map(),
        measure=_agent_measure,
        detail=lambda before, after: {"models_detail": compare_model_assignments(before.models, after.models)},
    )


def compare_by_office(snapshot1: Snapshot, snapshot2: Snapshot) -> DimensionDiff:
    return _diff_views(
        ComparisonType.OFFICE,
        group_by_office(snapshot1),
        group_by_office(snapshot2),
        measure=_group_measure,
    )


def compare_by_department(snapshot1: Snapshot, snapshot2: Snapshot) -> DimensionDiff:
    return _diff_views(
        ComparisonType.DEPARTMENT,
        group_by_department(snapshot1),
        group_by_department(snapshot2),
        measure=_group_measure,
    )


def compare_by_model(snapshot1: Snapshot, snapshot2: Snapshot) -> DimensionDiff:
    """
    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @returns 모델별 비교 결과 (change: quantity, agents, colors).
    """
    return _diff_views(
        ComparisonType.MODEL,
        group_by_model(snapshot1),
        group_by_model(snapshot2),
        measure=_group_measure,
        detail=lambda before, after: {"colors": compare_color_assignments(before.colors, after.colors)},
    )


_COMPARATORS: Dict[ComparisonType, Callable[[Snapshot, Snapshot], DimensionDiff]] = {
    ComparisonType.AGENT: compare_by_agent,
    ComparisonType.OFFICE: compare_by_office,
    ComparisonType.DEPARTMENT: compare_by_department,
    ComparisonType.MODEL: compare_by_model,
}


def compare_overall(snapshot1: Snapshot, snapshot2: Snapshot) -> Dict[str, DimensionDiff]:
    """
    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @returns 차원 이름(agent/office/department/model) → DimensionDiff.
    """
    return {dimension.value: _COMPARATORS[dimension](snapshot1, snapshot2) for dimension in DIMENSIONS}


def compare_dimension(
    snapshot1: Snapshot,
    snapshot2: Snapshot,
    dimension: ComparisonType,
) -> Union[DimensionDiff, Dict[str, DimensionDiff]]:
    """
    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @param dimension 비교 차원 (OVERALL 이면 네 차원 모두).
    @returns 단일 DimensionDiff 또는 차원별 DimensionDiff 매핑.
    """
    if dimension == ComparisonType.OVERALL:
        return compare_overall(snapshot1, snapshot2)
    return _COMPARATORS[dimension](snapshot1, snapshot2)


def compare_model_assignments(
    models1: Mapping[str, AgentModelAssignment],
    models2: Mapping[str, AgentModelAssignment],
) -> Dict[str, Dict[str, Any]]:
    """
    영업사원 한 명의 모델별 수량/색상 변화를 계산합니다.

    @param models1 기준 모델 배정.
    @param models2 비교 모델 배정.
    @returns 모델명 → {"quantity_change", "colors"}.
    """
    comparison: Dict[str, Dict[str, Any]] = {}
    for model in sorted(set(models1) | set(models2)):
        before = models1.get(model)
        after = models2.get(model)
        comparison[model] = {
            "quantity_change": (after.quantity if after else 0) - (before.quantity if before else 0),
            "colors": compare_color_assignments(
                before.colors if before else {},
                after.colors if after else {},
            ),
        }
    return comparison


def compare_color_assignments(colors1: Mapping[str, int], colors2: Mapping[str, int]) -> Dict[str, int]:
    """
    @param colors1 기준 색상별 수량.
    @param colors2 비교 색상별 수량.
    @returns 색상 → 수량 변화 (없는 색상은 0 으로 간주).
    """
    return {color: colors2.get(color, 0) - colors1.get(color, 0) for color in sorted(set(colors1) | set(colors2))}


def _agent_measure(agent: AgentAssignment) -> Dict[str, int]:
    return {"quantity": agent.quantity, "models": len(agent.models)}


def _group_measure(entry: Union[GroupEntry, ModelGroupEntry]) -> Dict[str, int]:
    return {"quantity": entry.total_quantity, "agents": entry.agent_count}


def _diff_views(
    dimension: ComparisonType,
    view1: Mapping[str, Any],
    view2: Mapping[str, Any],
    measure: Measure,
    detail: Optional[Detail] = None,
) -> DimensionDiff:
    result = DimensionDiff(dimension=dimension)
    for key in sorted(set(view1) | set(view2)):
        before = view1.get(key)
        after = view2.get(key)

        if before is None:
            result.add(key, DiffEntry(status=ChangeStatus.ADDED, data=after, change=measure(after)))
            continue
        if after is None:
            removed = {field: -value for field, value in measure(before).items()}
            result.add(key, DiffEntry(status=ChangeStatus.REMOVED, data=before, change=removed))
            continue

        measured_before = measure(before)
        measured_after = measure(after)
        change: Dict[str, Any] = {field: measured_after[field] - measured_before[field] for field in measured_before}
        status = ChangeStatus.CHANGED if any(change.values()) else ChangeStatus.UNCHANGED
        if detail is not None:
            change.update(detail(before, after))
        result.add(key, DiffEntry(status=status, data={"before": before, "after": after}, change=change))
    return result
