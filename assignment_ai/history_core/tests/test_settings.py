import importlib
import os
import unittest
from unittest import mock

from pydantic import ValidationError

from assignment_ai.history_core.config.history_config import HistoryConfig, get_history_config


class HistoryConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        """
        히스토리 설정 기본값을 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        with mock.patch.dict(os.environ, {}, clear=True):
            config = HistoryConfig(_env_file=None)
        self.assertEqual(config.HISTORY_STORAGE_KEY, "assignmentHistory")
        self.assertEqual(config.HISTORY_MAX_COUNT, 50)
        self.assertEqual(config.HISTORY_CACHE_ALIAS, "default")
        self.assertEqual(config.COMPARISON_CACHE_MAX_ENTRIES, 256)
        self.assertEqual(config.LOG_LEVEL, "INFO")

    def test_environment_override(self) -> None:
        with mock.patch.dict(os.environ, {"HISTORY_MAX_COUNT": "7", "HISTORY_STORAGE_KEY": "history:v2"}):
            config = HistoryConfig(_env_file=None)
        self.assertEqual(config.HISTORY_MAX_COUNT, 7)
        self.assertEqual(config.HISTORY_STORAGE_KEY, "history:v2")

    def test_invalid_capacity_is_rejected(self) -> None:
        with mock.patch.dict(os.environ, {"HISTORY_MAX_COUNT": "0"}):
            with self.assertRaises(ValidationError):
                HistoryConfig(_env_file=None)

    def test_config_is_shared(self) -> None:
        self.assertIs(get_history_config(), get_history_config())


class DjangoSettingsTests(unittest.TestCase):
    def _load_settings(self, environ):
        with mock.patch.dict(os.environ, environ, clear=True):
            module = importlib.import_module("assignment_ai.settings")
            return importlib.reload(module)

    def test_local_memory_cache_by_default(self) -> None:
        """
        기본 설정에서 히스토리 캐시가 만료 없는 LocMemCache 이고 JSON 로깅이 구성되는지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        module = self._load_settings({})
        self.assertEqual(module.CACHES["default"]["BACKEND"], "django.core.cache.backends.locmem.LocMemCache")
        self.assertIsNone(module.CACHES["default"]["TIMEOUT"])
        self.assertEqual(module.LOGGING["formatters"]["json"]["()"], "pythonjsonlogger.jsonlogger.JsonFormatter")
        self.assertIn("assignment_ai.history_core", module.LOGGING["loggers"])
        self.assertEqual(module.HISTORY_MAX_COUNT, 50)

    def test_redis_cache_when_url_is_set(self) -> None:
        module = self._load_settings({"REDIS_URL": "redis://localhost:6379/1", "HISTORY_CACHE_ALIAS": "history"})
        self.assertEqual(module.CACHES["history"]["BACKEND"], "django.core.cache.backends.redis.RedisCache")
        self.assertEqual(module.CACHES["history"]["LOCATION"], "redis://localhost:6379/1")
        self.assertIn("default", module.CACHES)


if __name__ == "__main__":
    unittest.main()
