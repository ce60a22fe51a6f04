from typing import Any, Dict, List


class SchemaError(ValueError):
    """스키마 검증 실패."""

    pass


DIFF_SUMMARY_FIELDS = ["added", "removed", "changed", "unchanged"]


def validate_comparison_output(payload: Dict[str, Any]) -> None:
    """
    @param payload ComparisonResult.to_dict() 결과 JSON.
    @returns None
    """
    _require_fields(payload, [
        "snapshot1_id",
        "snapshot2_id",
        "comparison_type",
        "timestamp",
        "summary",
        "details",
        "metrics",
        "insights",
    ])
    _require_types(payload["summary"], dict, "summary")
    _require_types(payload["details"], dict, "details")
    _require_types(payload["metrics"], dict, "metrics")
    _require_types(payload["insights"], list, "insights")
    _require_fields(payload["summary"], ["total_quantity", "total_agents", "total_models"])
    _require_fields(payload["metrics"], ["efficiency", "distribution", "trends", "impact"])

    if payload["comparison_type"] == "overall":
        _require_fields(payload["details"], ["agent", "office", "department", "model"])
        for name, detail in payload["details"].items():
            _validate_dimension_diff(detail, f"details.{name}")
    else:
        _validate_dimension_diff(payload["details"], "details")

    for insight in payload["insights"]:
        _require_fields(insight, ["type", "message", "impact", "recommendation"])


def validate_report_output(payload: Dict[str, Any]) -> None:
    """
    @param payload 비교 리포트 JSON.
    @returns None
    """
    _require_fields(payload, ["title", "subtitle", "timestamp", "comparison", "recommendations"])
    _require_types(payload["recommendations"], list, "recommendations")
    _require_types(payload["comparison"], dict, "comparison")
    validate_comparison_output(payload["comparison"])


def _validate_dimension_diff(payload: Dict[str, Any], field_name: str) -> None:
    _require_types(payload, dict, field_name)
    _require_fields(payload, ["dimension", "entries", "summary"])
    _require_types(payload["entries"], dict, f"{field_name}.entries")
    _require_fields(payload["summary"], DIFF_SUMMARY_FIELDS)
    for key, entry in payload["entries"].items():
        _require_fields(entry, ["status", "data", "change"])
        if entry["status"] not in DIFF_SUMMARY_FIELDS:
            raise SchemaError(f"Field {field_name}.entries.{key}.status has unknown value {entry['status']}")


def _require_fields(payload: Dict[str, Any], fields: List[str]) -> None:
    """
    @param payload 점검 대상 JSON.
    @param fields 필수 필드 목록.
    @returns None
    """
    missing = [field for field in fields if field not in payload]
    if missing:
        raise SchemaError(f"Missing fields: {missing}")


def _require_types(value: Any, expected_type: type, field_name: str) -> None:
    """
    @param value 점검 대상 값.
    @param expected_type 기대 타입.
    @param field_name 필드 이름.
    @returns None
    """
    if not isinstance(value, expected_type):
        raise SchemaError(f"Field {field_name} should be {expected_type.__name__}")
