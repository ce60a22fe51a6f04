import json
import unittest
from datetime import datetime, timezone

from assignment_ai.history_core.common.errors import MalformedSnapshotError
from assignment_ai.history_core.common.schema_validation import validate_comparison_output, validate_report_output
from assignment_ai.history_core.domain.comparison_type import ChangeStatus, ComparisonType
from assignment_ai.history_core.domain.dimension_diff import DimensionDiff
from assignment_ai.history_core.repository.comparison_cache import ComparisonCache, NullComparisonCache
from assignment_ai.history_core.repository.mock_data import BASE_SNAPSHOT, NEXT_SNAPSHOT, base_snapshot, next_snapshot
from assignment_ai.history_core.service.comparison.comparison_service import AssignmentComparisonService

FIXED_NOW = datetime(2025, 3, 12, 9, 0, tzinfo=timezone.utc)


class ComparisonServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cache = ComparisonCache(max_entries=8)
        self.service = AssignmentComparisonService(cache=self.cache, clock=lambda: FIXED_NOW)

    def test_compare_agent_dimension(self) -> None:
        """
        영업사원 차원 비교 결과의 구성(요약, 상세, 메트릭, 인사이트)을 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        result = self.service.compare(base_snapshot(), next_snapshot(), "agent")
        self.assertEqual(result.snapshot1_id, BASE_SNAPSHOT["id"])
        self.assertEqual(result.snapshot2_id, NEXT_SNAPSHOT["id"])
        self.assertEqual(result.comparison_type, ComparisonType.AGENT)
        self.assertEqual(result.timestamp, FIXED_NOW)
        self.assertIsInstance(result.details, DimensionDiff)
        self.assertEqual(result.details.status_of("A3"), ChangeStatus.REMOVED)
        self.assertEqual(result.summary["total_quantity"]["change"], 8)
        self.assertEqual(len(result.insights), 3)

    def test_compare_accepts_payloads_and_default_dimension(self) -> None:
        result = self.service.compare(BASE_SNAPSHOT, NEXT_SNAPSHOT)
        self.assertEqual(result.comparison_type, ComparisonType.OVERALL)
        self.assertEqual(set(result.details), {"agent", "office", "department", "model"})
        self.assertEqual(result.dimension("office").status_of("대구"), ChangeStatus.ADDED)
        self.assertEqual(result.dimension(ComparisonType.MODEL).summary.added, 1)

    def test_dimension_lookup_on_single_result(self) -> None:
        result = self.service.compare(base_snapshot(), next_snapshot(), "office")
        self.assertIs(result.dimension("office"), result.details)
        with self.assertRaises(KeyError):
            result.dimension("agent")

    def test_dimension_name_is_case_insensitive(self) -> None:
        result = self.service.compare(base_snapshot(), next_snapshot(), "MODEL")
        self.assertEqual(result.comparison_type, ComparisonType.MODEL)

    def test_unknown_dimension_raises(self) -> None:
        with self.assertRaises(ValueError):
            self.service.compare(base_snapshot(), next_snapshot(), "region")

    def test_malformed_snapshot_raises(self) -> None:
        with self.assertRaises(MalformedSnapshotError):
            self.service.compare({"id": "broken"}, next_snapshot())

    def test_results_are_cached(self) -> None:
        """
        같은 (ID, ID, 차원) 비교는 캐시에서 같은 내용의 결과를 반환하는지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        first = self.service.compare(base_snapshot(), next_snapshot(), "agent")
        second = self.service.compare(BASE_SNAPSHOT, NEXT_SNAPSHOT, "agent")
        self.assertIsNot(first, second)
        self.assertEqual(first.to_dict(), second.to_dict())
        self.assertEqual(self.cache.hits, 1)
        self.assertEqual(self.cache.misses, 1)
        self.assertEqual(self.service.cache_size(), 1)

        self.service.compare(base_snapshot(), next_snapshot(), "model")
        self.service.compare(next_snapshot(), base_snapshot(), "agent")
        self.assertEqual(self.service.cache_size(), 3)

        self.service.clear_cache()
        self.assertEqual(self.service.cache_size(), 0)
        self.assertIsNot(self.service.compare(base_snapshot(), next_snapshot(), "agent"), first)

    def test_cached_result_is_not_shared_with_callers(self) -> None:
        """
        반환된 결과를 수정해도 이후 같은 비교 결과가 바뀌지 않는지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        first = self.service.compare(base_snapshot(), next_snapshot(), "agent")
        first.summary["total_quantity"]["change"] = 999
        first.details.entries.clear()

        second = self.service.compare(base_snapshot(), next_snapshot(), "agent")
        self.assertEqual(self.cache.hits, 1)
        self.assertEqual(second.summary["total_quantity"]["change"], 8)
        self.assertEqual(second.details.status_of("A3"), ChangeStatus.REMOVED)

    def test_uncached_results_are_identical(self) -> None:
        """
        캐시 없이 두 번 계산한 결과가 동일한지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        service = AssignmentComparisonService(cache=NullComparisonCache(), clock=lambda: FIXED_NOW)
        first = service.compare(base_snapshot(), next_snapshot())
        second = service.compare(base_snapshot(), next_snapshot())
        self.assertIsNot(first, second)
        self.assertEqual(first.to_dict(), second.to_dict())
        self.assertEqual(service.cache_size(), 0)

    def test_result_is_json_serializable(self) -> None:
        payload = self.service.compare(base_snapshot(), next_snapshot()).to_dict()
        validate_comparison_output(payload)
        self.assertEqual(payload["comparison_type"], "overall")
        self.assertEqual(payload["details"]["agent"]["entries"]["A3"]["status"], "removed")
        self.assertEqual(payload["details"]["agent"]["entries"]["A3"]["data"]["agentId"], "A3")
        self.assertEqual(payload["metrics"]["trends"]["trend_direction"], "increasing")
        self.assertEqual(payload["insights"][0]["impact"], "high")
        json.dumps(payload, ensure_ascii=False)

    def test_build_report(self) -> None:
        """
        리포트 페이로드(제목, 부제, 비교 결과, 권장 조치)를 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        report = self.service.build_report(base_snapshot(), next_snapshot(), "department")
        validate_report_output(report)
        self.assertEqual(report["title"], "배정 이력 비교 리포트")
        self.assertEqual(report["subtitle"], "3월 1주차 배정 vs 3월 2주차 배정")
        self.assertEqual(report["timestamp"], FIXED_NOW.isoformat())
        self.assertEqual(report["comparison"]["comparison_type"], "department")
        self.assertEqual(len(report["recommendations"]), 3)
        json.dumps(report, ensure_ascii=False)

    def test_report_subtitle_falls_back_to_id(self) -> None:
        unnamed = base_snapshot().to_payload()
        unnamed["metadata"].pop("name")
        report = self.service.build_report(unnamed, next_snapshot())
        self.assertEqual(report["subtitle"], f"{BASE_SNAPSHOT['id']} vs 3월 2주차 배정")


if __name__ == "__main__":
    unittest.main()
