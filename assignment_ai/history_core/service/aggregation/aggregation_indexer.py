from __future__ import annotations

from typing import Callable, Dict, Mapping

from assignment_ai.history_core.domain.comparison_type import ComparisonType
from assignment_ai.history_core.domain.group_entry import GroupEntry, ModelGroupEntry
from assignment_ai.history_core.domain.snapshot import AgentAssignment, Snapshot


def group_by_office(snapshot: Snapshot) -> Dict[str, GroupEntry]:
    """
    사무실별로 영업사원 배정 수량을 집계합니다. 사무실이 없으면 "미분류"로 묶습니다.

    @param snapshot 집계 대상 스냅샷.
    @returns 사무실명 → GroupEntry.
    """
    return _group_agents(snapshot, lambda agent: agent.office_key)


def group_by_department(snapshot: Snapshot) -> Dict[str, GroupEntry]:
    """
    소속별로 영업사원 배정 수량을 집계합니다. 소속이 없으면 "미분류"로 묶습니다.

    @param snapshot 집계 대상 스냅샷.
    @returns 소속명 → GroupEntry.
    """
    return _group_agents(snapshot, lambda agent: agent.department_key)


def group_by_model(snapshot: Snapshot) -> Dict[str, ModelGroupEntry]:
    """
    모든 영업사원의 모델 배정을 모델 단위로 합산합니다.

    agent_count 는 해당 모델 키를 가진 영업사원 수(수량 0 포함)이고,
    colors 는 영업사원별 색상 수량을 합산한 값입니다.

    @param snapshot 집계 대상 스냅샷.
    @returns 모델명 → ModelGroupEntry.
    """
    models: Dict[str, ModelGroupEntry] = {}
    for agent in snapshot.agents:
        for model_name, assignment in agent.models.items():
            entry = models.setdefault(model_name, ModelGroupEntry())
            entry.total_quantity += assignment.quantity
            entry.agent_count += 1
            entry.agents[agent.agent_id] = assignment.quantity
            for color, quantity in assignment.colors.items():
                entry.colors[color] = entry.colors.get(color, 0) + quantity
    return models


def build_view(snapshot: Snapshot, dimension: ComparisonType) -> Mapping[str, object]:
    """
    @param snapshot 대상 스냅샷.
    @param dimension 비교 차원 (OVERALL 제외).
    @returns 차원 키 → 영업사원/GroupEntry/ModelGroupEntry 매핑.
    """
    if dimension == ComparisonType.AGENT:
        return snapshot.agent_map()
    if dimension == ComparisonType.OFFICE:
        return group_by_office(snapshot)
    if dimension == ComparisonType.DEPARTMENT:
        return group_by_department(snapshot)
    if dimension == ComparisonType.MODEL:
        return group_by_model(snapshot)
    raise ValueError(f"No single view for comparison type: {dimension.value}")


def _group_agents(snapshot: Snapshot, key_of: Callable[[AgentAssignment], str]) -> Dict[str, GroupEntry]:
    groups: Dict[str, GroupEntry] = {}
    for agent in snapshot.agents:
        entry = groups.setdefault(key_of(agent), GroupEntry())
        entry.total_quantity += agent.quantity
        entry.agent_count += 1
        entry.agents[agent.agent_id] = agent
    return groups
