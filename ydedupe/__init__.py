"""
ydedupe - 基于 Redis 有序集合的分布式去重锁

多个进程通过同一个 Redis 约定：同一时刻某个命名的工作单元最多只有一个在执行。
锁按时间自动过期，不需要显式解锁也不会永久占用。

快速开始:
    import ydedupe

    ydedupe.configure(namespace="my-app", redis={"url": "redis://localhost:6379/0"})

    result = ydedupe.acquire("reports", "daily", fn=build_report, ttl=600)
"""

from .version import __version__, __author__, __description__

from .exceptions import (
    ErrorCode,
    DeDupeException,
    UsageException,
    ConfigurationException,
)

from .config import (
    DeDupeSettings,
    RedisSettings,
    LoggingSettings,
    ConfigLoader,
    load_yaml_config,
)

from .registry import (
    config,
    configure,
    reset_config,
    redis_pool,
    set_redis_pool,
    clear_redis_pool,
)

from .redis_pool import RedisPool
from .lock_key import LockKey
from .dataset import Dataset
from .lock import Lock
from .api import acquire, keys, flush_all
from .log import setup_logging, get_logger

__all__ = [
    "__version__",
    # 核心
    "Dataset",
    "Lock",
    "LockKey",
    "acquire",
    "keys",
    "flush_all",
    # 配置
    "DeDupeSettings",
    "RedisSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_yaml_config",
    "config",
    "configure",
    "reset_config",
    # 连接
    "RedisPool",
    "redis_pool",
    "set_redis_pool",
    "clear_redis_pool",
    # 异常
    "ErrorCode",
    "DeDupeException",
    "UsageException",
    "ConfigurationException",
    # 日志
    "setup_logging",
    "get_logger",
]
