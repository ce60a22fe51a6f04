"""
=============================================================================
비교 메트릭 계산 (Comparison Metrics)
=============================================================================

두 스냅샷에 대해 요약 합계, 효율성(영업사원당 평균 수량), 분포 편차(표준편차),
일 단위 정규화 트렌드, 영향도를 계산합니다.

수량 합계는 `assignmentData.models` 가 아니라 영업사원별 `quantity` 합을 기준으로 합니다.
모든 나눗셈은 분모가 0 이면 0 을 반환합니다.
"""

from __future__ import annotations

from math import sqrt
from typing import Dict, List, Sequence

from assignment_ai.history_core.domain.comparison_type import TrendDirection
from assignment_ai.history_core.domain.snapshot import Snapshot
from assignment_ai.history_core.service.aggregation.aggregation_indexer import group_by_model, group_by_office

SECONDS_PER_DAY = 60 * 60 * 24


def total_quantity(snapshot: Snapshot) -> int:
    return sum(agent.quantity for agent in snapshot.agents)


def total_agents(snapshot: Snapshot) -> int:
    return len(snapshot.agents)


def total_models(snapshot: Snapshot) -> int:
    """
    @param snapshot 대상 스냅샷.
    @returns 모든 영업사원의 모델 키 중 서로 다른 모델 수.
    """
    models = set()
    for agent in snapshot.agents:
        models.update(agent.models.keys())
    return len(models)


def standard_deviation(values: Sequence[float]) -> float:
    """
    @param values 수치 목록.
    @returns 모표준편차 (빈 목록이면 0).
    """
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    return sqrt(variance)


def comparison_summary(snapshot1: Snapshot, snapshot2: Snapshot) -> Dict[str, object]:
    """
    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @returns total_quantity / total_agents / total_models / date_range 요약.
    """
    quantity1 = total_quantity(snapshot1)
    quantity2 = total_quantity(snapshot2)
    agents1 = total_agents(snapshot1)
    agents2 = total_agents(snapshot2)
    models1 = total_models(snapshot1)
    models2 = total_models(snapshot2)

    return {
        "total_quantity": {
            "before": quantity1,
            "after": quantity2,
            "change": quantity2 - quantity1,
            "change_percent": _percent(quantity2 - quantity1, quantity1),
        },
        "total_agents": {"before": agents1, "after": agents2, "change": agents2 - agents1},
        "total_models": {"before": models1, "after": models2, "change": models2 - models1},
        "date_range": {
            "before": _date_range(snapshot1),
            "after": _date_range(snapshot2),
        },
    }


def efficiency_metrics(snapshot1: Snapshot, snapshot2: Snapshot) -> Dict[str, object]:
    """
    영업사원당 평균 배정 수량과 분포 효율성(표준편차 감소율)을 계산합니다.

    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @returns average_quantity_per_agent, distribution_efficiency.
    """
    efficiency1 = _ratio(total_quantity(snapshot1), total_agents(snapshot1))
    efficiency2 = _ratio(total_quantity(snapshot2), total_agents(snapshot2))
    change = efficiency2 - efficiency1

    return {
        "average_quantity_per_agent": {
            "before": efficiency1,
            "after": efficiency2,
            "change": change,
            "change_percent": _percent(change, efficiency1),
        },
        "distribution_efficiency": distribution_efficiency(snapshot1, snapshot2),
    }


def distribution_efficiency(snapshot1: Snapshot, snapshot2: Snapshot) -> Dict[str, float]:
    """
    improvement 는 (std1 - std2) / std1 * 100 이며, 편차가 줄면 양수, 늘면 음수입니다.

    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @returns before/after 표준편차와 improvement(%).
    """
    std1 = standard_deviation([agent.quantity for agent in snapshot1.agents])
    std2 = standard_deviation([agent.quantity for agent in snapshot2.agents])
    return {
        "before": std1,
        "after": std2,
        "improvement": _percent(std1 - std2, std1),
    }


def distribution_metrics(snapshot1: Snapshot, snapshot2: Snapshot) -> Dict[str, object]:
    """
    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @returns model_distribution, agent_distribution, office_distribution.
    """
    models1 = group_by_model(snapshot1)
    models2 = group_by_model(snapshot2)
    model_distribution = {}
    for model in sorted(set(models1) | set(models2)):
        before = models1[model].total_quantity if model in models1 else 0
        after = models2[model].total_quantity if model in models2 else 0
        model_distribution[model] = {"before": before, "after": after, "change": after - before}

    offices1 = group_by_office(snapshot1)
    offices2 = group_by_office(snapshot2)

    return {
        "model_distribution": model_distribution,
        "agent_distribution": {
            "before": _spread([agent.quantity for agent in snapshot1.agents]),
            "after": _spread([agent.quantity for agent in snapshot2.agents]),
        },
        "office_distribution": {
            "before": _spread([entry.total_quantity for entry in offices1.values()]),
            "after": _spread([entry.total_quantity for entry in offices2.values()]),
        },
    }


def trend_metrics(snapshot1: Snapshot, snapshot2: Snapshot) -> Dict[str, object]:
    """
    두 스냅샷 사이 경과 일수로 정규화한 수량 변화입니다.
    snapshot2 가 더 이르거나 같은 시각이면 daily_change 는 0 입니다.

    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @returns days_diff, daily/weekly/monthly_change, trend_direction.
    """
    days_diff = (snapshot2.timestamp - snapshot1.timestamp).total_seconds() / SECONDS_PER_DAY
    quantity_change = total_quantity(snapshot2) - total_quantity(snapshot1)
    daily_change = quantity_change / days_diff if days_diff > 0 else 0.0

    if daily_change > 0:
        direction = TrendDirection.INCREASING
    elif daily_change < 0:
        direction = TrendDirection.DECREASING
    else:
        direction = TrendDirection.STABLE

    return {
        "days_diff": days_diff,
        "daily_change": daily_change,
        "weekly_change": daily_change * 7,
        "monthly_change": daily_change * 30,
        "trend_direction": direction,
    }


def impact_metrics(snapshot1: Snapshot, snapshot2: Snapshot) -> Dict[str, float]:
    quantity1 = total_quantity(snapshot1)
    agents1 = total_agents(snapshot1)
    quantity_impact = abs(_percent(total_quantity(snapshot2) - quantity1, quantity1))
    agent_impact = abs(_percent(total_agents(snapshot2) - agents1, agents1))
    return {
        "quantity_impact": quantity_impact,
        "agent_impact": agent_impact,
        "overall_impact": (quantity_impact + agent_impact) / 2,
    }


def calculate_metrics(snapshot1: Snapshot, snapshot2: Snapshot) -> Dict[str, object]:
    """
    @param snapshot1 기준 스냅샷.
    @param snapshot2 비교 스냅샷.
    @returns efficiency, distribution, trends, impact 메트릭 묶음.
    """
    return {
        "efficiency": efficiency_metrics(snapshot1, snapshot2),
        "distribution": distribution_metrics(snapshot1, snapshot2),
        "trends": trend_metrics(snapshot1, snapshot2),
        "impact": impact_metrics(snapshot1, snapshot2),
    }


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def _percent(change: float, base: float) -> float:
    return change / base * 100 if base > 0 else 0.0


def _spread(values: List[int]) -> Dict[str, float]:
    if not values:
        return {"min": 0, "max": 0, "average": 0.0}
    return {"min": min(values), "max": max(values), "average": sum(values) / len(values)}


def _date_range(snapshot: Snapshot) -> Dict[str, str]:
    created_at = snapshot.timestamp.isoformat()
    updated_at = (snapshot.metadata.model_extra or {}).get("updatedAt")
    return {"start": created_at, "end": str(updated_at) if updated_at else created_at}
