import unittest

from assignment_ai.history_core.domain.comparison_type import TrendDirection
from assignment_ai.history_core.domain.snapshot import coerce_snapshot
from assignment_ai.history_core.repository.mock_data import base_snapshot, next_snapshot
from assignment_ai.history_core.service.metrics.metrics_calculator import (
    calculate_metrics,
    comparison_summary,
    standard_deviation,
    trend_metrics,
)


def _snapshot(snapshot_id: str, timestamp: str, quantities, metadata=None):
    return coerce_snapshot({
        "id": snapshot_id,
        "timestamp": timestamp,
        "agents": [{"agentId": f"A{index}", "quantity": quantity} for index, quantity in enumerate(quantities)],
        "metadata": metadata or {},
    })


class MetricsTests(unittest.TestCase):
    def test_summary_change_percent(self) -> None:
        """
        총 수량 100 → 120 변화율이 20.0 인지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        first = _snapshot("s1", "2025-03-01T09:00:00Z", [60, 40])
        second = _snapshot("s2", "2025-03-02T09:00:00Z", [70, 50])
        summary = comparison_summary(first, second)
        self.assertEqual(summary["total_quantity"]["before"], 100)
        self.assertEqual(summary["total_quantity"]["after"], 120)
        self.assertEqual(summary["total_quantity"]["change"], 20)
        self.assertAlmostEqual(summary["total_quantity"]["change_percent"], 20.0)

    def test_summary_for_mock_history(self) -> None:
        summary = comparison_summary(base_snapshot(), next_snapshot())
        self.assertEqual(summary["total_quantity"]["change"], 8)
        self.assertAlmostEqual(summary["total_quantity"]["change_percent"], 33.333, places=2)
        self.assertEqual(summary["total_agents"], {"before": 4, "after": 4, "change": 0})
        self.assertEqual(summary["total_models"], {"before": 2, "after": 3, "change": 1})
        self.assertEqual(summary["date_range"]["before"]["start"], base_snapshot().timestamp.isoformat())

    def test_date_range_uses_updated_at(self) -> None:
        snapshot = _snapshot("s1", "2025-03-01T09:00:00Z", [1], {"updatedAt": "2025-03-02T10:00:00+00:00"})
        summary = comparison_summary(snapshot, snapshot)
        self.assertEqual(summary["date_range"]["after"]["end"], "2025-03-02T10:00:00+00:00")

    def test_efficiency_and_distribution(self) -> None:
        """
        영업사원당 평균 수량, 표준편차 기반 분포 효율성, 분포 메트릭을 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        metrics = calculate_metrics(base_snapshot(), next_snapshot())
        average = metrics["efficiency"]["average_quantity_per_agent"]
        self.assertAlmostEqual(average["before"], 6.0)
        self.assertAlmostEqual(average["after"], 8.0)
        self.assertAlmostEqual(average["change_percent"], 33.333, places=2)

        distribution = metrics["efficiency"]["distribution_efficiency"]
        self.assertAlmostEqual(distribution["before"], 3.7417, places=3)
        self.assertAlmostEqual(distribution["after"], 5.0990, places=3)
        self.assertLess(distribution["improvement"], 0)
        self.assertAlmostEqual(distribution["improvement"], -36.27, places=1)

        spread = metrics["distribution"]
        self.assertEqual(spread["model_distribution"]["Galaxy S25"], {"before": 14, "after": 16, "change": 2})
        self.assertEqual(spread["model_distribution"]["Galaxy Z Flip6"], {"before": 0, "after": 10, "change": 10})
        self.assertEqual(spread["agent_distribution"]["before"], {"min": 0, "max": 10, "average": 6.0})
        self.assertEqual(spread["office_distribution"]["before"]["max"], 18)

    def test_trend_and_impact(self) -> None:
        metrics = calculate_metrics(base_snapshot(), next_snapshot())
        trends = metrics["trends"]
        self.assertAlmostEqual(trends["days_diff"], 10.0)
        self.assertAlmostEqual(trends["daily_change"], 0.8)
        self.assertAlmostEqual(trends["weekly_change"], 5.6)
        self.assertAlmostEqual(trends["monthly_change"], 24.0)
        self.assertEqual(trends["trend_direction"], TrendDirection.INCREASING)

        impact = metrics["impact"]
        self.assertAlmostEqual(impact["quantity_impact"], 33.333, places=2)
        self.assertEqual(impact["agent_impact"], 0)
        self.assertAlmostEqual(impact["overall_impact"], 16.667, places=2)

    def test_non_positive_elapsed_time_is_stable(self) -> None:
        """
        비교 스냅샷이 더 이르거나 같은 시각이면 일일 변화가 0 이고 stable 인지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        trends = trend_metrics(next_snapshot(), base_snapshot())
        self.assertLess(trends["days_diff"], 0)
        self.assertEqual(trends["daily_change"], 0)
        self.assertEqual(trends["trend_direction"], TrendDirection.STABLE)

        same_time = trend_metrics(base_snapshot(), base_snapshot())
        self.assertEqual(same_time["daily_change"], 0)

    def test_zero_agents_yield_zero_metrics(self) -> None:
        """
        영업사원이 없는 스냅샷에서 0 나누기 대신 0 이 반환되는지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        empty = _snapshot("s1", "2025-03-01T09:00:00Z", [])
        other = _snapshot("s2", "2025-03-03T09:00:00Z", [])
        metrics = calculate_metrics(empty, other)
        self.assertEqual(metrics["efficiency"]["average_quantity_per_agent"]["before"], 0)
        self.assertEqual(metrics["efficiency"]["average_quantity_per_agent"]["change_percent"], 0)
        self.assertEqual(metrics["efficiency"]["distribution_efficiency"]["improvement"], 0)
        self.assertEqual(metrics["distribution"]["agent_distribution"]["before"], {"min": 0, "max": 0, "average": 0.0})
        self.assertEqual(metrics["impact"]["overall_impact"], 0)
        self.assertEqual(comparison_summary(empty, other)["total_quantity"]["change_percent"], 0)

        grown = _snapshot("s3", "2025-03-03T09:00:00Z", [5])
        self.assertEqual(comparison_summary(empty, grown)["total_quantity"]["change_percent"], 0)

    def test_standard_deviation(self) -> None:
        self.assertEqual(standard_deviation([]), 0)
        self.assertEqual(standard_deviation([4, 4, 4]), 0)
        self.assertAlmostEqual(standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]), 2.0)


if __name__ == "__main__":
    unittest.main()
