"""顶层便捷接口

使用示例:
    import ydedupe

    def sync_orders(tenant_id):
        ...

    # 最后一个参数是锁 ID，前面的参数组成命名空间
    ydedupe.acquire("sync-orders", "tenant-1", fn=lambda: sync_orders("tenant-1"), ttl=50)
"""

import re
from typing import Any, Callable, Iterator, Optional, Union

from . import registry
from .config import DeDupeSettings
from .exceptions import ConfigurationException, ErrorCode, UsageException
from .lock import Lock
from .lock_key import LockKey, SEPARATOR
from .log import get_logger
from .redis_pool import RedisPool

logger = get_logger()

_USAGE = """You must provide the namespace + the identifier for the lock.

Example:
ydedupe.acquire("long-running-job", "1234567890", fn=job, ttl=50)"""

# SCAN MATCH 的 glob 元字符
_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def acquire(
    *keys: Any,
    fn: Callable[[], Any],
    ttl: Optional[Union[int, float]] = None,
    pool: Optional[RedisPool] = None,
    settings: Optional[DeDupeSettings] = None,
) -> Any:
    """在锁保护下执行 fn

    Args:
        *keys: 命名空间片段 + 锁 ID（最后一个），至少两个
        fn: 需要执行的函数（无参数）
        ttl: 有效期（秒），为空则使用配置中的 expires_in

    Returns:
        fn 的返回值；锁已被占用时返回 None

    Raises:
        UsageException: 参数少于两个（缺少命名空间）
    """
    if len(keys) < 2:
        raise UsageException(_USAGE, code=ErrorCode.NAMESPACE_REQUIRED, keys=list(keys))

    *namespace, lock_id = keys
    lock_key = LockKey(*namespace, settings=settings)
    lock = Lock(lock_key, lock_id, ttl=ttl, pool=pool, settings=settings)
    return lock.with_lock(fn)


def _namespace_pattern(settings: Optional[DeDupeSettings]) -> str:
    """命名空间下所有键的 SCAN 匹配模式

    命名空间中的 glob 元字符会被转义；未配置命名空间时拒绝匹配整个数据库。

    Raises:
        ConfigurationException: 未配置命名空间
    """
    namespace = (settings or registry.config()).namespace
    if not namespace:
        raise ConfigurationException(
            "未配置命名空间，无法限定 keys / flush_all 的范围",
            code=ErrorCode.NAMESPACE_REQUIRED,
        )
    escaped = _GLOB_SPECIAL.sub(r"\\\1", namespace)
    return f"{escaped}{SEPARATOR}*"


def _scan(pool: RedisPool, pattern: str) -> Iterator[str]:
    with pool.connection() as conn:
        for key in conn.scan_iter(match=pattern, count=100):
            yield key.decode("utf-8") if isinstance(key, bytes) else key


def keys(
    pool: Optional[RedisPool] = None,
    settings: Optional[DeDupeSettings] = None,
) -> Iterator[str]:
    """遍历命名空间下的所有键（使用 SCAN，不阻塞 Redis）

    Raises:
        ConfigurationException: 未配置命名空间
    """
    pattern = _namespace_pattern(settings)
    return _scan(pool or registry.redis_pool(), pattern)


def flush_all(
    pool: Optional[RedisPool] = None,
    settings: Optional[DeDupeSettings] = None,
) -> int:
    """删除命名空间下的所有键

    Returns:
        删除的键数量

    Raises:
        ConfigurationException: 未配置命名空间
    """
    pattern = _namespace_pattern(settings)
    pool = pool or registry.redis_pool()
    total = 0
    # 先收集再删除，避免 SCAN 过程中修改键空间
    for key in list(_scan(pool, pattern)):
        with pool.connection() as conn:
            total += conn.delete(key)

    logger.info(f"flush_all: pattern={pattern}, deleted={total}")
    return total
