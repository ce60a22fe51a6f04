from assignment_ai.history_core.repository.comparison_cache import ComparisonCache, NullComparisonCache
from assignment_ai.history_core.repository.django_cache_store import DjangoCacheStore
from assignment_ai.history_core.repository.in_memory_key_value_store import InMemoryKeyValueStore
from assignment_ai.history_core.repository.key_value_store import KeyValueStore
from assignment_ai.history_core.repository.snapshot_store import SnapshotStore

__all__ = [
    "ComparisonCache",
    "DjangoCacheStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "NullComparisonCache",
    "SnapshotStore",
]
