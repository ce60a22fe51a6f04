"""
=============================================================================
Assignment History - Django 설정 모듈 (Settings Module)
=============================================================================

배정 히스토리 라이브러리를 Django 호스트 애플리케이션에 올릴 때 사용하는 설정입니다.
`pydantic-settings`를 활용하여 환경변수를 타입 안전(Type-Safe)하게 로드하고 검증합니다.

히스토리 관련 설정(`HISTORY_*`, `COMPARISON_CACHE_MAX_ENTRIES`)은
`history_core.config.history_config.HistoryConfig` 에 정의되어 있으며,
이 모듈의 `EnvSettings` 가 이를 상속해 Django 설정과 같은 환경변수를 공유합니다.

주요 환경변수:
    - `DJANGO_SECRET_KEY`: 보안 서명용 비밀키
    - `DJANGO_DEBUG`: 디버그 모드 활성화 여부
    - `REDIS_URL`: 설정 시 히스토리를 Redis 캐시에 저장
    - `HISTORY_MAX_COUNT`: 최대 보관 히스토리 수 (기본 50)
=============================================================================
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from assignment_ai.history_core.config.history_config import HistoryConfig

# -----------------------------------------------------------------------------
# 1. 환경변수 스키마 정의 (Pydantic Settings)
# -----------------------------------------------------------------------------
# 프로젝트 루트 디렉토리
BASE_DIR = Path(__file__).resolve().parent.parent


class EnvSettings(HistoryConfig):
    """
    환경변수 로딩 및 검증을 위한 Pydantic 모델.
    히스토리 설정에 Django 구동에 필요한 항목을 더합니다.
    """

    # Django 핵심 설정
    DJANGO_SECRET_KEY: SecretStr = Field(
        default="django-insecure-dev-only-do-not-use-in-production",
        description="Django 시크릿 키"
    )
    DJANGO_DEBUG: bool = Field(default=False, description="디버그 모드")

    # 캐시 (Redis) 설정
    REDIS_URL: Optional[str] = None
    CACHE_MAX_ENTRIES: int = 1000

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",  # 정의되지 않은 환경변수는 무시
        case_sensitive=True
    )


# 설정 로드 (싱글톤)
try:
    env = EnvSettings()
except Exception as e:
    # 설정 로드 실패 시 치명적 오류로 간주하고 프로세스 종료
    print(f"=================================================================")
    print(f" [CRITICAL] 환경변수 설정 로드 실패")
    print(f" .env 파일 또는 환경변수를 확인해주세요.")
    print(f" Error: {e}")
    print(f"=================================================================")
    sys.exit(1)


# -----------------------------------------------------------------------------
# 2. Django 설정 매핑
# -----------------------------------------------------------------------------

SECRET_KEY = env.DJANGO_SECRET_KEY.get_secret_value()
DEBUG = env.DJANGO_DEBUG

INSTALLED_APPS = [
    "assignment_ai.history_core",
]

LANGUAGE_CODE = "ko-kr"
TIME_ZONE = "Asia/Seoul"
USE_I18N = True
USE_TZ = True

# -----------------------------------------------------------------------------
# 로깅 (Logging)
# -----------------------------------------------------------------------------
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{asctime}] {levelname} {name} {module}:{lineno} - {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose" if DEBUG else "json",
            "stream": sys.stdout,
        },
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "assignment_ai.history_core": {"handlers": ["console"], "level": env.LOG_LEVEL, "propagate": False},
        "": {"handlers": ["console"], "level": env.LOG_LEVEL},
    },
}

# -----------------------------------------------------------------------------
# 캐시 설정 (히스토리 저장소)
# -----------------------------------------------------------------------------
# 히스토리는 만료되면 안 되므로 TIMEOUT 은 None 입니다.
CACHES = {
    env.HISTORY_CACHE_ALIAS: {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "assignment-history",
        "TIMEOUT": None,
        "OPTIONS": {"MAX_ENTRIES": env.CACHE_MAX_ENTRIES},
    }
}

if env.REDIS_URL:
    CACHES[env.HISTORY_CACHE_ALIAS] = {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": env.REDIS_URL,
        "TIMEOUT": None,
    }

if env.HISTORY_CACHE_ALIAS != "default":
    CACHES["default"] = {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}

# -----------------------------------------------------------------------------
# 히스토리 설정 (전역 변수로 노출)
# -----------------------------------------------------------------------------
HISTORY_STORAGE_KEY = env.HISTORY_STORAGE_KEY
HISTORY_MAX_COUNT = env.HISTORY_MAX_COUNT
HISTORY_CACHE_ALIAS = env.HISTORY_CACHE_ALIAS
COMPARISON_CACHE_MAX_ENTRIES = env.COMPARISON_CACHE_MAX_ENTRIES
