from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트 루트 디렉토리
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent


class HistoryConfig(BaseSettings):
    """
    배정 히스토리 저장소와 비교 엔진 설정.
    Django 설정 모듈도 이 스키마를 상속해 같은 환경변수를 공유합니다.
    """

    HISTORY_STORAGE_KEY: str = Field(default="assignmentHistory", description="히스토리 저장 키")
    HISTORY_MAX_COUNT: int = Field(default=50, ge=1, description="최대 보관 히스토리 수")
    HISTORY_CACHE_ALIAS: str = Field(default="default", description="히스토리 저장용 Django 캐시 별칭")
    COMPARISON_CACHE_MAX_ENTRIES: int = Field(default=256, ge=1, description="비교 결과 캐시 최대 엔트리 수")

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )


@lru_cache(maxsize=1)
def get_history_config() -> HistoryConfig:
    """
    @returns 프로세스 전역에서 공유하는 HistoryConfig 인스턴스.
    """
    return HistoryConfig()
