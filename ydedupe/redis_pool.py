"""Redis 连接池

为 Dataset / Lock 提供作用域内的 Redis 连接。

使用示例:
    from ydedupe.redis_pool import RedisPool
    
    pool = RedisPool("redis://localhost:6379/0", max_connections=20)
    with pool.connection() as conn:
        conn.zcard("de-dupe:jobs")
"""

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

import redis

from .exceptions import ConfigurationException
from .log import get_logger

logger = get_logger()

DEFAULT_REDIS_URL = "redis://localhost:6379/0"

# 核心逻辑和 keys / flush_all 用到的命令
_REQUIRED_COMMANDS = (
    "zadd", "zrem", "zmscore", "zremrangebyscore", "zcount", "zcard",
    "zscan_iter", "delete", "scan_iter",
)


class RedisPool:
    """Redis 连接池包装
    
    source 支持以下几种形式：
    - None: 使用默认 URL
    - str: Redis 连接 URL
    - Mapping: redis.Redis 的关键字参数（可包含 url）
    - redis.ConnectionPool: 已有的连接池
    - 其他对象: 已构建好的客户端（需提供有序集合命令），原样使用
    
    由本对象创建的连接池在 close() 时断开；外部传入的连接池或客户端不受影响。
    """
    
    def __init__(
        self,
        source: Any = None,
        max_connections: int = 10,
        **connection_kwargs
    ):
        """
        Args:
            source: 连接来源，见类说明
            max_connections: 最大连接数（仅在本对象创建连接池时生效）
            **connection_kwargs: 额外的连接参数，如 socket_timeout
        """
        self._owned_pool: Optional[redis.ConnectionPool] = None
        connection_kwargs.setdefault("decode_responses", True)
        
        if source is None:
            source = DEFAULT_REDIS_URL
        
        if isinstance(source, str):
            self._owned_pool = redis.ConnectionPool.from_url(
                source, max_connections=max_connections, **connection_kwargs
            )
            self._client = redis.Redis(connection_pool=self._owned_pool)
        elif isinstance(source, Mapping):
            options = {**connection_kwargs, **source}
            url = options.pop("url", None)
            if url:
                self._owned_pool = redis.ConnectionPool.from_url(
                    url, max_connections=max_connections, **options
                )
            else:
                self._owned_pool = redis.ConnectionPool(
                    max_connections=max_connections, **options
                )
            self._client = redis.Redis(connection_pool=self._owned_pool)
        elif isinstance(source, redis.ConnectionPool):
            self._client = redis.Redis(connection_pool=source)
        elif all(callable(getattr(source, name, None)) for name in _REQUIRED_COMMANDS):
            self._client = source
        else:
            raise ConfigurationException(
                f"无法从 {type(source).__name__} 构建 Redis 连接",
                source_type=type(source).__name__,
            )
        
        logger.debug(f"RedisPool initialized: source={type(source).__name__}")
    
    @classmethod
    def from_settings(cls, settings) -> "RedisPool":
        """根据 RedisSettings 创建连接池"""
        kwargs = {"decode_responses": settings.decode_responses}
        if settings.socket_timeout is not None:
            kwargs["socket_timeout"] = settings.socket_timeout
        return cls(settings.url, max_connections=settings.max_connections, **kwargs)
    
    @property
    def client(self):
        """底层 Redis 客户端"""
        return self._client
    
    @contextmanager
    def connection(self) -> Iterator[Any]:
        """获取作用域内的连接
        
        redis-py 客户端在每条命令执行时自行从连接池借出和归还连接，
        这里只负责给出统一的作用域写法。
        """
        yield self._client
    
    
    def close(self) -> None:
        """断开由本对象创建的连接池"""
        if self._owned_pool is not None:
            self._owned_pool.disconnect()
            logger.debug("RedisPool closed")
    
    def __repr__(self) -> str:
        return f"RedisPool(client={self._client!r})"
