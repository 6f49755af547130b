"""全局默认配置与连接池

Dataset / Lock 都可以显式传入 settings 和 pool；未传入时使用这里的进程级默认值。
configure() 会同时丢弃已缓存的连接池，下次使用时按新配置重建。

使用示例:
    import ydedupe
    
    ydedupe.configure(namespace="my-app", expires_in=600)
    ydedupe.configure(redis={"url": "redis://cache:6379/1"})
"""

import threading
from typing import Optional

from .config import DeDupeSettings
from .log import get_logger
from .redis_pool import RedisPool

logger = get_logger()

_state_lock = threading.RLock()
_settings: Optional[DeDupeSettings] = None
_redis_pool: Optional[RedisPool] = None


def config() -> DeDupeSettings:
    """获取当前全局配置（首次调用时按环境变量创建）"""
    global _settings
    with _state_lock:
        if _settings is None:
            _settings = DeDupeSettings()
        return _settings


def configure(settings: Optional[DeDupeSettings] = None, **overrides) -> DeDupeSettings:
    """替换或更新全局配置，并重建连接池
    
    Args:
        settings: 新的配置对象，为空则在当前配置基础上更新
        **overrides: 需要覆盖的配置项（嵌套配置可传字典）
        
    Returns:
        生效后的配置
    """
    global _settings
    with _state_lock:
        base = settings if settings is not None else config()
        if overrides:
            data = base.model_dump()
            for key, value in overrides.items():
                if isinstance(value, dict) and isinstance(data.get(key), dict):
                    data[key].update(value)
                else:
                    data[key] = value
            base = DeDupeSettings(**data)
        _settings = base
        clear_redis_pool()
        logger.debug(f"ydedupe configured: namespace={base.namespace}, expires_in={base.expires_in}")
        return _settings


def reset_config() -> None:
    """恢复默认配置（主要用于测试）"""
    global _settings
    with _state_lock:
        _settings = None
        clear_redis_pool()


def redis_pool() -> RedisPool:
    """获取全局连接池（延迟创建）"""
    global _redis_pool
    with _state_lock:
        if _redis_pool is None:
            _redis_pool = RedisPool.from_settings(config().redis)
        return _redis_pool


def set_redis_pool(pool: RedisPool) -> None:
    """直接指定全局连接池（例如复用应用已有的 Redis 客户端）"""
    global _redis_pool
    with _state_lock:
        _redis_pool = pool


def clear_redis_pool() -> None:
    """丢弃并关闭全局连接池"""
    global _redis_pool
    with _state_lock:
        if _redis_pool is not None:
            _redis_pool.close()
        _redis_pool = None
