"""
=============================================================================
배정 히스토리 저장소 (Assignment Snapshot Store)
=============================================================================

배정 확정 시점의 스냅샷을 최신순으로 보관하는 저장소입니다.

    - 새 스냅샷은 항상 맨 앞에 추가되고, 최대 개수(기본 50개)를 넘으면 가장 오래된 항목부터 제거됩니다.
    - 전체 목록을 하나의 JSON 문서로 키-값 저장소의 네임스페이스 키에 저장합니다.
    - 저장소 읽기/쓰기 오류는 이 경계에서 잡아 로그로 남기고, 변경 연산은 bool 을,
      조회 연산은 빈 목록/None 을 반환합니다. 호출 측(UI)은 치명적이지 않은 경고만 표시하면 됩니다.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from assignment_ai.history_core.common.errors import MalformedSnapshotError, NotFoundError, PersistenceError
from assignment_ai.history_core.common.hashing import stable_hash_json
from assignment_ai.history_core.config.history_config import get_history_config
from assignment_ai.history_core.domain.comparison_type import TrendDirection
from assignment_ai.history_core.domain.snapshot import (
    SNAPSHOT_VERSION,
    AgentAssignment,
    AssignmentData,
    AssignmentSettings,
    Snapshot,
    coerce_snapshot,
)
from assignment_ai.history_core.repository.in_memory_key_value_store import InMemoryKeyValueStore
from assignment_ai.history_core.repository.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

TREND_WINDOW = 5
TREND_UPPER_RATIO = 1.1
TREND_LOWER_RATIO = 0.9

_COMPUTED_METADATA_KEYS = {
    "totalAgents",
    "totalModels",
    "totalAssigned",
    "totalQuantity",
    "total_agents",
    "total_models",
    "total_assigned",
    "total_quantity",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotStore:
    """배정 스냅샷 저장소 (최신순, 용량 제한)."""

    def __init__(
        self,
        backend: Optional[KeyValueStore] = None,
        storage_key: Optional[str] = None,
        max_count: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        @param backend 키-값 저장소 (없으면 메모리 저장소).
        @param storage_key 히스토리 문서를 저장할 키.
        @param max_count 최대 보관 개수.
        @param clock 현재 시각 함수 (테스트 주입용).
        @returns None
        """
        config = get_history_config()
        self._backend = backend or InMemoryKeyValueStore()
        self._storage_key = storage_key or config.HISTORY_STORAGE_KEY
        self._max_count = max_count if max_count is not None else config.HISTORY_MAX_COUNT
        if self._max_count < 1:
            raise ValueError("max_count must be at least 1")
        self._clock = clock or _utcnow
        self._decoded: Optional[Tuple[str, List[Snapshot]]] = None
        self.hits = 0
        self.misses = 0

    # -------------------------------------------------------------------------
    # 생성
    # -------------------------------------------------------------------------
    def create(
        self,
        assignment_data: Union[AssignmentData, Mapping[str, Any], None],
        settings: Union[AssignmentSettings, Mapping[str, Any], None],
        agents: Optional[Iterable[Union[AgentAssignment, Mapping[str, Any]]]],
        extra_metadata: Optional[Mapping[str, Any]] = None,
    ) -> Snapshot:
        """
        배정 결과로부터 새 스냅샷을 만듭니다. 저장은 하지 않습니다.

        @param assignment_data 모델별 전체/배정 수량 ({"models": {...}}).
        @param settings 배정 가중치 설정 ({"ratios": {...}}).
        @param agents 영업사원별 배정 결과 목록.
        @param extra_metadata 추가 메타데이터 (name 등). 파생 합계 키는 덮어쓰지 않습니다.
        @returns 검증된 불변 Snapshot.
        @raises MalformedSnapshotError 입력을 검증할 수 없을 때.
        """
        try:
            data = (
                assignment_data
                if isinstance(assignment_data, AssignmentData)
                else AssignmentData.model_validate(assignment_data or {})
            )
        except ValidationError as exc:
            raise MalformedSnapshotError(f"Invalid assignment data: {exc}") from exc

        agent_list = list(agents or [])
        metadata = {key: value for key, value in (extra_metadata or {}).items() if key not in _COMPUTED_METADATA_KEYS}
        metadata.update(
            {
                "totalAgents": len(agent_list),
                "totalModels": len(data.models),
                "totalAssigned": sum(model.assigned_quantity for model in data.models.values()),
                "totalQuantity": sum(model.total_quantity for model in data.models.values()),
            }
        )

        now = self._clock()
        return coerce_snapshot(
            {
                "id": _generate_snapshot_id(now),
                "timestamp": now,
                "assignmentData": data,
                "settings": settings or {},
                "agents": agent_list,
                "metadata": metadata,
                "version": SNAPSHOT_VERSION,
            }
        )

    # -------------------------------------------------------------------------
    # 변경 연산 (실패 시 False)
    # -------------------------------------------------------------------------
    def save(self, snapshot: Union[Snapshot, Mapping[str, Any]]) -> bool:
        """
        스냅샷을 맨 앞에 추가하고 용량을 넘는 오래된 항목을 제거합니다.
        같은 ID 가 이미 있으면 기존 항목을 대체해 맨 앞으로 옮깁니다.

        @param snapshot 저장할 스냅샷.
        @returns 저장 성공 여부 (검증할 수 없는 스냅샷도 False).
        """
        try:
            snapshot = coerce_snapshot(snapshot)
            history = self._load()
            updated = [snapshot] + [item for item in history if item.id != snapshot.id]
            evicted = updated[self._max_count:]
            del updated[self._max_count:]
            self._persist(updated)
        except (MalformedSnapshotError, PersistenceError) as exc:
            logger.error(f"히스토리 저장 실패: {exc}")
            return False
        if evicted:
            logger.debug(f"히스토리 용량 초과로 {len(evicted)}개 항목 제거: {[item.id for item in evicted]}")
        logger.info(f"히스토리 저장 완료: {snapshot.id} (총 {len(updated)}개)")
        return True

    def delete(self, snapshot_id: str) -> bool:
        """
        @param snapshot_id 삭제할 스냅샷 ID (없어도 성공으로 처리).
        @returns 삭제 성공 여부.
        """
        try:
            history = self._load()
            self._persist([item for item in history if item.id != snapshot_id])
        except PersistenceError as exc:
            logger.error(f"히스토리 삭제 실패: {exc}")
            return False
        return True

    def clear(self) -> bool:
        """
        @returns 전체 삭제 성공 여부.
        """
        try:
            self._backend.delete(self._storage_key)
        except PersistenceError as exc:
            logger.error(f"히스토리 전체 삭제 실패: {exc}")
            return False
        self._decoded = None
        return True

    # -------------------------------------------------------------------------
    # 조회 연산
    # -------------------------------------------------------------------------
    def list(self) -> List[Snapshot]:
        """
        @returns 최신순 스냅샷 목록 (읽기 실패 시 빈 목록).
        """
        try:
            return [item.model_copy(deep=True) for item in self._load()]
        except PersistenceError as exc:
            logger.error(f"히스토리 조회 실패: {exc}")
            return []

    def get(self, snapshot_id: str) -> Optional[Snapshot]:
        """
        @param snapshot_id 스냅샷 ID.
        @returns 스냅샷 또는 None.
        """
        for item in self.list():
            if item.id == snapshot_id:
                self.hits += 1
                return item
        self.misses += 1
        return None

    def require(self, snapshot_id: str) -> Snapshot:
        """
        @param snapshot_id 스냅샷 ID.
        @returns 스냅샷.
        @raises NotFoundError 해당 ID 가 없을 때.
        """
        snapshot = self.get(snapshot_id)
        if snapshot is None:
            raise NotFoundError(snapshot_id)
        return snapshot

    def size(self) -> int:
        """
        @returns 저장된 스냅샷 개수.
        """
        return len(self.list())

    def stats(self) -> Dict[str, Any]:
        """
        히스토리 전체 통계를 계산합니다.

        recent_trend 는 최근 5개 평균 배정 수량과 그 이전 5개 평균을 비교합니다.
        (이전 구간이 비어 있으면 stable)

        @returns total_assignments, average_assigned, most_used_settings, recent_trend.
        """
        history = self.list()
        if not history:
            return {
                "total_assignments": 0,
                "average_assigned": 0,
                "most_used_settings": None,
                "recent_trend": TrendDirection.STABLE.value,
            }

        total_assignments = len(history)
        average_assigned = sum(item.metadata.total_assigned for item in history) / total_assignments

        settings_count: Counter = Counter()
        settings_samples: Dict[str, Dict[str, float]] = {}
        for item in history:
            settings_key = stable_hash_json(item.settings.ratios)
            settings_count[settings_key] += 1
            settings_samples.setdefault(settings_key, dict(item.settings.ratios))
        most_used_key, _ = settings_count.most_common(1)[0]

        return {
            "total_assignments": total_assignments,
            "average_assigned": average_assigned,
            "most_used_settings": settings_samples[most_used_key],
            "recent_trend": _recent_trend(history).value,
        }

    # -------------------------------------------------------------------------
    # 내보내기 / 가져오기
    # -------------------------------------------------------------------------
    def export_history(self, snapshot_ids: Optional[Sequence[str]] = None) -> str:
        """
        @param snapshot_ids 내보낼 ID 목록 (None 이면 전체).
        @returns {exportDate, version, history} JSON 문자열.
        """
        history = self.list()
        if snapshot_ids is not None:
            selected = set(snapshot_ids)
            history = [item for item in history if item.id in selected]
        document = {
            "exportDate": self._clock().isoformat(),
            "version": SNAPSHOT_VERSION,
            "history": [item.to_payload() for item in history],
        }
        return json.dumps(document, ensure_ascii=False, indent=2)

    def import_history(self, json_text: str) -> bool:
        """
        내보낸 히스토리 문서를 가져옵니다.

        가져온 항목에는 새 ID 를 부여하고 기존 히스토리 앞에 추가한 뒤,
        timestamp 가 같은 항목은 먼저 나온 것만 남기고 용량 제한을 적용합니다.
        항목 하나라도 검증에 실패하면 아무것도 저장하지 않습니다.

        @param json_text export_history 형식의 JSON 문자열.
        @returns 가져오기 성공 여부.
        """
        try:
            document = json.loads(json_text)
        except (TypeError, ValueError) as exc:
            logger.error(f"히스토리 가져오기 실패: JSON 파싱 오류 {exc}")
            return False

        items = document.get("history") if isinstance(document, dict) else None
        if not isinstance(items, list):
            logger.error("히스토리 가져오기 실패: 유효하지 않은 히스토리 데이터입니다.")
            return False

        now = self._clock()
        imported: List[Snapshot] = []
        try:
            for item in items:
                if not isinstance(item, dict):
                    raise MalformedSnapshotError(f"History entry must be an object: {item!r}")
                payload = dict(item)
                payload["id"] = _generate_snapshot_id(now)
                if not payload.get("timestamp"):
                    payload["timestamp"] = now
                imported.append(coerce_snapshot(payload))
        except MalformedSnapshotError as exc:
            logger.error(f"히스토리 가져오기 실패: {exc}")
            return False

        try:
            merged = imported + self._load()
            unique: List[Snapshot] = []
            seen_timestamps = set()
            for item in merged:
                if item.timestamp in seen_timestamps:
                    continue
                seen_timestamps.add(item.timestamp)
                unique.append(item)
            del unique[self._max_count:]
            self._persist(unique)
        except PersistenceError as exc:
            logger.error(f"히스토리 가져오기 실패: {exc}")
            return False

        logger.info(f"히스토리 {len(imported)}개 가져오기 완료 (총 {len(unique)}개)")
        return True

    # -------------------------------------------------------------------------
    # 내부 헬퍼
    # -------------------------------------------------------------------------
    def _load(self) -> List[Snapshot]:
        raw = self._backend.get(self._storage_key)
        if not raw:
            return []
        if self._decoded is not None and self._decoded[0] == raw:
            return self._decoded[1]

        try:
            items = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Stored history is not valid JSON: {exc}") from exc
        if not isinstance(items, list):
            raise PersistenceError("Stored history must be a JSON array")

        snapshots: List[Snapshot] = []
        for item in items:
            try:
                snapshots.append(coerce_snapshot(item))
            except MalformedSnapshotError as exc:
                logger.warning(f"손상된 히스토리 항목을 건너뜁니다: {exc}")
        self._decoded = (raw, snapshots)
        return snapshots

    def _persist(self, snapshots: List[Snapshot]) -> None:
        raw = json.dumps([item.to_payload() for item in snapshots], ensure_ascii=False)
        self._backend.set(self._storage_key, raw)
        self._decoded = (raw, [item.model_copy(deep=True) for item in snapshots])


def _generate_snapshot_id(now: datetime) -> str:
    """
    @param now 생성 시각.
    @returns "assignment_<epoch ms>_<랜덤 접미사>" 형식의 고유 ID.
    """
    return f"assignment_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:12]}"


def _recent_trend(history: List[Snapshot]) -> TrendDirection:
    recent = [item.metadata.total_assigned for item in history[:TREND_WINDOW]]
    previous = [item.metadata.total_assigned for item in history[TREND_WINDOW:TREND_WINDOW * 2]]
    if not recent or not previous:
        return TrendDirection.STABLE

    recent_avg = sum(recent) / len(recent)
    previous_avg = sum(previous) / len(previous)
    if recent_avg > previous_avg * TREND_UPPER_RATIO:
        return TrendDirection.INCREASING
    if recent_avg < previous_avg * TREND_LOWER_RATIO:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE
