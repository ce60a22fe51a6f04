class HistoryError(Exception):
    """배정 히스토리 처리 중 발생하는 오류의 기반 클래스."""

    pass


class PersistenceError(HistoryError):
    """저장소 읽기/쓰기 실패."""

    pass


class NotFoundError(HistoryError, LookupError):
    """요청한 스냅샷 ID가 저장소에 없음."""

    def __init__(self, snapshot_id: str) -> None:
        """
        @param snapshot_id 찾지 못한 스냅샷 ID.
        @returns None
        """
        super().__init__(f"Snapshot not found: {snapshot_id}")
        self.snapshot_id = snapshot_id


class MalformedSnapshotError(HistoryError, ValueError):
    """스냅샷 페이로드를 검증할 수 없음."""

    pass
