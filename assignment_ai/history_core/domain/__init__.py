from assignment_ai.history_core.domain.comparison_result import ComparisonResult
from assignment_ai.history_core.domain.comparison_type import ChangeStatus, ComparisonType, TrendDirection
from assignment_ai.history_core.domain.dimension_diff import DiffEntry, DiffSummary, DimensionDiff
from assignment_ai.history_core.domain.group_entry import GroupEntry, ModelGroupEntry
from assignment_ai.history_core.domain.insight import Insight, InsightImpact
from assignment_ai.history_core.domain.snapshot import (
    AgentAssignment,
    AgentModelAssignment,
    AssignmentData,
    AssignmentSettings,
    ModelAllocation,
    Snapshot,
    SnapshotMetadata,
)

__all__ = [
    "AgentAssignment",
    "AgentModelAssignment",
    "AssignmentData",
    "AssignmentSettings",
    "ChangeStatus",
    "ComparisonResult",
    "ComparisonType",
    "DiffEntry",
    "DiffSummary",
    "DimensionDiff",
    "GroupEntry",
    "Insight",
    "InsightImpact",
    "ModelAllocation",
    "ModelGroupEntry",
    "Snapshot",
    "SnapshotMetadata",
    "TrendDirection",
]
