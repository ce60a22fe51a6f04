from __future__ import annotations

from typing import Any, List, Mapping

from assignment_ai.history_core.domain.comparison_type import TrendDirection
from assignment_ai.history_core.domain.insight import Insight, InsightImpact

QUANTITY_CHANGE_THRESHOLD = 10.0
EFFICIENCY_CHANGE_THRESHOLD = 5.0


def generate_insights(summary: Mapping[str, Any], metrics: Mapping[str, Any]) -> List[Insight]:
    """
    요약/메트릭에 임계값 규칙을 적용해 인사이트를 생성합니다.
    규칙은 서로 독립적이며 수량 → 영업사원 → 효율성 → 트렌드 순서로 추가됩니다.

    @param summary comparison_summary 결과.
    @param metrics calculate_metrics 결과.
    @returns 인사이트 목록.
    """
    insights: List[Insight] = []
    insights.extend(_quantity_insights(summary["total_quantity"]["change_percent"]))
    insights.extend(_agent_insights(summary["total_agents"]["change"]))
    insights.extend(_efficiency_insights(metrics["efficiency"]["average_quantity_per_agent"]["change_percent"]))
    insights.extend(_trend_insights(TrendDirection(metrics["trends"]["trend_direction"])))
    return insights


def _quantity_insights(change_percent: float) -> List[Insight]:
    if change_percent > QUANTITY_CHANGE_THRESHOLD:
        return [
            Insight(
                type="quantity_increase",
                message=f"배정 수량이 {change_percent:.1f}% 증가했습니다.",
                impact=InsightImpact.HIGH,
                recommendation="증가된 수량에 대한 재고 확보가 필요할 수 있습니다.",
            )
        ]
    if change_percent < -QUANTITY_CHANGE_THRESHOLD:
        return [
            Insight(
                type="quantity_decrease",
                message=f"배정 수량이 {abs(change_percent):.1f}% 감소했습니다.",
                impact=InsightImpact.MEDIUM,
                recommendation="감소 원인을 분석하여 배정 전략을 조정하세요.",
            )
        ]
    return []


def _agent_insights(agent_change: int) -> List[Insight]:
    if agent_change > 0:
        return [
            Insight(
                type="agent_increase",
                message=f"{agent_change}명의 영업사원이 추가되었습니다.",
                impact=InsightImpact.MEDIUM,
                recommendation="새로운 영업사원에 대한 교육 및 지원이 필요합니다.",
            )
        ]
    if agent_change < 0:
        return [
            Insight(
                type="agent_decrease",
                message=f"{abs(agent_change)}명의 영업사원이 감소했습니다.",
                impact=InsightImpact.HIGH,
                recommendation="영업사원 감소에 따른 업무 재배정을 고려하세요.",
            )
        ]
    return []


def _efficiency_insights(change_percent: float) -> List[Insight]:
    if change_percent > EFFICIENCY_CHANGE_THRESHOLD:
        return [
            Insight(
                type="efficiency_improvement",
                message=f"영업사원당 평균 배정 수량이 {change_percent:.1f}% 개선되었습니다.",
                impact=InsightImpact.POSITIVE,
                recommendation="효율성 개선이 지속되도록 모니터링하세요.",
            )
        ]
    if change_percent < -EFFICIENCY_CHANGE_THRESHOLD:
        return [
            Insight(
                type="efficiency_decline",
                message=f"영업사원당 평균 배정 수량이 {abs(change_percent):.1f}% 감소했습니다.",
                impact=InsightImpact.NEGATIVE,
                recommendation="효율성 저하 원인을 분석하고 개선 방안을 마련하세요.",
            )
        ]
    return []


def _trend_insights(direction: TrendDirection) -> List[Insight]:
    if direction == TrendDirection.INCREASING:
        return [
            Insight(
                type="positive_trend",
                message="배정 수량이 증가하는 추세를 보이고 있습니다.",
                impact=InsightImpact.POSITIVE,
                recommendation="증가 추세를 유지하기 위한 전략을 수립하세요.",
            )
        ]
    if direction == TrendDirection.DECREASING:
        return [
            Insight(
                type="negative_trend",
                message="배정 수량이 감소하는 추세를 보이고 있습니다.",
                impact=InsightImpact.NEGATIVE,
                recommendation="감소 추세를 반전시키기 위한 대책을 마련하세요.",
            )
        ]
    return []


def recommendations(insights: List[Insight]) -> List[str]:
    """
    @param insights 인사이트 목록.
    @returns 비어 있지 않은 권장 조치 문자열 목록.
    """
    return [insight.recommendation for insight in insights if insight.recommendation]
