from __future__ import annotations

from .adaptors import JsonFileAdapter, PersistanceAdapterProtocol
from .manager import SecurityConfigStore

__all__ = ["SecurityConfigStore", "PersistanceAdapterProtocol", "JsonFileAdapter"]
