"""
=============================================================================
배정 스냅샷 스키마 (Assignment Snapshot Schema)
=============================================================================

배정 확정 시점의 결과(어떤 영업사원/사무실/소속이 어떤 모델을 몇 대 받았는지)를
불변 객체로 표현합니다. 생성/로드 시점에 한 번만 검증하고, 이후 집계/비교 단계는
잘 정의된 구조를 전제로 동작합니다.

저장 형태(JSON)는 camelCase 키(`assignmentData`, `agentId`, `totalQuantity` ...)를,
파이썬 코드는 snake_case 속성을 사용합니다.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from assignment_ai.history_core.common.errors import MalformedSnapshotError

SNAPSHOT_VERSION = "1.0"
UNCLASSIFIED = "미분류"


class SnapshotModel(BaseModel):
    """스냅샷 구성 요소 공통 설정."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


def _none_to_zero(value: Any) -> Any:
    return 0 if value is None else value


class ModelAllocation(SnapshotModel):
    """모델별 전체 수량과 배정 수량."""

    total_quantity: int = 0
    assigned_quantity: int = 0

    default_zero_quantities = field_validator("total_quantity", "assigned_quantity", mode="before")(_none_to_zero)


class AssignmentData(SnapshotModel):
    """배정 실행 입력 데이터."""

    models: Dict[str, ModelAllocation] = Field(default_factory=dict)


class AssignmentSettings(SnapshotModel):
    """배정에 사용된 가중치 설정 (turnoverRate, storeCount, remainingInventory, salesVolume)."""

    model_config = ConfigDict(extra="allow")

    ratios: Dict[str, float] = Field(default_factory=dict)


class AgentModelAssignment(SnapshotModel):
    """영업사원 한 명에게 배정된 특정 모델의 수량과 색상별 수량."""

    quantity: int = 0
    colors: Dict[str, int] = Field(default_factory=dict)

    default_zero_quantities = field_validator("quantity", mode="before")(_none_to_zero)


class AgentAssignment(SnapshotModel):
    """영업사원별 배정 결과."""

    agent_id: str = Field(
        validation_alias=AliasChoices("agentId", "contactId", "agent_id"),
        serialization_alias="agentId",
    )
    target: Optional[str] = None
    office: Optional[str] = None
    department: Optional[str] = None
    quantity: int = 0
    models: Dict[str, AgentModelAssignment] = Field(default_factory=dict)

    default_zero_quantities = field_validator("quantity", mode="before")(_none_to_zero)

    @field_validator("agent_id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def office_key(self) -> str:
        return self.office or UNCLASSIFIED

    @property
    def department_key(self) -> str:
        return self.department or UNCLASSIFIED


class SnapshotMetadata(SnapshotModel):
    """생성 시점에 계산해 둔 파생 합계. 추가 키(name 등)는 그대로 보존됩니다."""

    model_config = ConfigDict(extra="allow")

    total_agents: int = 0
    total_models: int = 0
    total_assigned: int = 0
    total_quantity: int = 0

    @property
    def name(self) -> Optional[str]:
        extra = self.model_extra or {}
        value = extra.get("name")
        return str(value) if value is not None else None


class Snapshot(SnapshotModel):
    """한 번의 배정 실행 결과를 기록한 불변 스냅샷."""

    id: str
    timestamp: datetime
    assignment_data: AssignmentData = Field(default_factory=AssignmentData)
    settings: AssignmentSettings = Field(default_factory=AssignmentSettings)
    agents: List[AgentAssignment] = Field(default_factory=list)
    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)
    version: str = SNAPSHOT_VERSION

    @field_validator("assignment_data", "settings", "metadata", "agents", mode="before")
    @classmethod
    def absent_collections(cls, value: Any, info: ValidationInfo) -> Any:
        if value is not None:
            return value
        return [] if info.field_name == "agents" else {}

    @field_validator("timestamp")
    @classmethod
    def ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def unique_agents(self) -> "Snapshot":
        seen = set()
        duplicates = []
        for agent in self.agents:
            if agent.agent_id in seen:
                duplicates.append(agent.agent_id)
            seen.add(agent.agent_id)
        if duplicates:
            raise ValueError(f"Duplicate agent ids: {sorted(set(duplicates))}")
        return self

    @property
    def display_name(self) -> str:
        return self.metadata.name or self.id

    def agent_map(self) -> Dict[str, AgentAssignment]:
        """
        @returns agentId → AgentAssignment 매핑 (영업사원 차원 비교용 뷰).
        """
        return {agent.agent_id: agent for agent in self.agents}

    def to_payload(self) -> Dict[str, Any]:
        """
        @returns 저장/내보내기용 camelCase JSON 딕셔너리.
        """
        return self.model_dump(mode="json", by_alias=True)


def coerce_snapshot(value: Union[Snapshot, Mapping[str, Any]]) -> Snapshot:
    """
    스냅샷 객체 또는 JSON 페이로드를 검증된 Snapshot 으로 변환합니다.

    @param value Snapshot 인스턴스 또는 저장 형태의 딕셔너리.
    @returns 검증된 Snapshot.
    @raises MalformedSnapshotError 스키마 검증 실패 시.
    """
    if isinstance(value, Snapshot):
        return value
    try:
        return Snapshot.model_validate(value)
    except ValidationError as exc:
        raise MalformedSnapshotError(f"Invalid snapshot payload: {exc}") from exc
