"""锁键名构建"""

from typing import Any, Optional

from . import registry
from .config import DeDupeSettings

SEPARATOR = ":"


class LockKey:
    """由命名空间片段构建有序集合的键名
    
    每个片段会转为字符串、去除首尾空白并转小写，再加上全局命名空间前缀，
    用 ":" 连接。
    
    使用示例:
        str(LockKey("Long-Running-Job", " tenant-1 "))
        # -> "de-dupe:long-running-job:tenant-1"
    """
    
    def __init__(self, *keys: Any, settings: Optional[DeDupeSettings] = None):
        self._keys = [str(k).strip().lower() for k in keys]
        self._settings = settings
    
    @property
    def keys(self) -> list:
        return list(self._keys)
    
    def __str__(self) -> str:
        settings = self._settings
        if settings is None:
            settings = registry.config()
        parts = [settings.namespace, *self._keys]
        return SEPARATOR.join(p for p in parts if p is not None)
    
    def __repr__(self) -> str:
        return f"LockKey({str(self)!r})"
    
    def __eq__(self, other) -> bool:
        if isinstance(other, LockKey):
            return str(self) == str(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented
    
    def __hash__(self) -> int:
        return hash(str(self))
