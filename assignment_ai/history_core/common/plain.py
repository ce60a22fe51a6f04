from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel


def to_plain(value: Any) -> Any:
    """
    도메인 객체를 JSON 직렬화 가능한 기본 타입으로 재귀 변환합니다.

    @param value 변환 대상 (pydantic 모델, dataclass, Enum, datetime, 컬렉션).
    @returns dict/list/str/int/float/None 로만 구성된 값.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: to_plain(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value
