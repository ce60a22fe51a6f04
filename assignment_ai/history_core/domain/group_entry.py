from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from assignment_ai.history_core.domain.snapshot import AgentAssignment


@dataclass
class GroupEntry:
    """사무실/소속 단위로 재집계한 영업사원 묶음."""

    total_quantity: int = 0
    agent_count: int = 0
    agents: Dict[str, AgentAssignment] = field(default_factory=dict)


@dataclass
class ModelGroupEntry:
    """모델 단위로 재집계한 배정 수량과 색상 분포."""

    total_quantity: int = 0
    agent_count: int = 0
    colors: Dict[str, int] = field(default_factory=dict)
    agents: Dict[str, int] = field(default_factory=dict)
