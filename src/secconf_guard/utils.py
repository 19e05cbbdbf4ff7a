from __future__ import annotations

import os
from types import MappingProxyType
from typing import Any, Mapping, Optional

__all__ = [
    "_is_blank",
    "_env_flag",
    "_env_value",
    "_frozen_mapping",
]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "") == "1"


def _env_value(name: str, default: str) -> str:
    value = os.getenv(name, "")
    return value if value.strip() else default


def _frozen_mapping(values: Mapping[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(values))
