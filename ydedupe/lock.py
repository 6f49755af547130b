"""单 ID 锁

在 Dataset 之上封装单个 ID，并提供"加锁-执行-释放"的临界区语义。

使用示例:
    from ydedupe import Lock, LockKey

    lock = Lock(LockKey("reports", "daily"), "2025-12-23", ttl=600)

    # 已被锁定时不执行，返回 None
    result = lock.with_lock(build_report, day="2025-12-23")

    # 上下文管理器方式，得到是否加锁成功
    with lock.hold() as acquired:
        if acquired:
            build_report(day="2025-12-23")

注意: 锁没有续期和过期通知。执行时间超过 ttl 时，其他调用方可以重新加锁。
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Union

from . import clock
from . import registry
from .config import DeDupeSettings
from .dataset import Dataset, exclusive_upper_bound, to_member
from .exceptions import ErrorCode, UsageException
from .log import get_logger
from .redis_pool import RedisPool

logger = get_logger()


def _lookup(value: Mapping, *names: str) -> Any:
    """按候选键名顺序取第一个非空值"""
    for name in names:
        if value.get(name) is not None:
            return value[name]
    return None


class Lock:
    """分布式锁

    由 (lock_key, lock_id, ttl) 唯一确定，相同三元组的对象值相等。

    Attributes:
        lock_key: 有序集合的键名
        lock_id: 锁 ID（有序集合成员）
        ttl: 有效期（秒）
    """

    def __init__(
        self,
        lock_key: Any,
        lock_id: Any,
        ttl: Optional[Union[int, float]] = None,
        pool: Optional[RedisPool] = None,
        settings: Optional[DeDupeSettings] = None,
    ):
        lock_id = to_member(lock_id) if lock_id is not None else ""
        if not lock_id:
            raise UsageException("锁 ID 不能为空", code=ErrorCode.INVALID_LOCK_ID)

        self.lock_id = lock_id
        self._dataset = Dataset(lock_key, ttl=ttl, pool=pool, settings=settings)

    @property
    def lock_key(self) -> str:
        return self._dataset.lock_key

    @property
    def ttl(self) -> Union[int, float]:
        return self._dataset.ttl

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    def acquire(self) -> bool:
        """加锁

        Returns:
            新加锁成功返回 True，已被锁定返回 False
        """
        return self._dataset.acquire(self.lock_id)

    lock = acquire

    def release(self) -> bool:
        """释放锁

        Returns:
            锁存在并被删除时返回 True
        """
        return self._dataset.release(self.lock_id)

    unlock = release

    def is_locked(self) -> bool:
        """分数存在且 >= 当前时间时视为锁定"""
        return self._dataset.is_locked(self.lock_id)

    def with_lock(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """在锁保护下执行函数

        1. 已被锁定时直接返回 None，不执行函数
        2. 加锁失败（被其他调用方抢先）时返回 None，不执行函数
        3. 加锁成功后执行函数，返回其结果（包括 None 或其他假值）
        4. 无论函数正常返回还是抛出异常，都会先释放锁；异常会继续向上抛出

        第 1 步只是为了少一次写操作，正确性由第 2 步的 ZADD NX 保证。

        Args:
            func: 需要执行的函数
            *args: 传给函数的位置参数
            **kwargs: 传给函数的关键字参数

        Returns:
            函数返回值；未获得锁时返回 None
        """
        if self.is_locked():
            logger.debug(f"Skip {self.lock_key}/{self.lock_id}: already locked")
            return None

        if not self.acquire():
            logger.debug(f"Skip {self.lock_key}/{self.lock_id}: lost the race")
            return None

        try:
            return func(*args, **kwargs)
        finally:
            self.release()

    @contextmanager
    def hold(self) -> Iterator[bool]:
        """上下文管理器方式使用锁

        Yields:
            是否成功获取锁；只有获取成功时退出时才会释放
        """
        acquired = self.acquire()
        try:
            yield acquired
        finally:
            if acquired:
                self.release()

    def to_dict(self) -> Dict[str, Any]:
        """序列化为字典，可用 Lock.coerce() 还原"""
        return {
            "ttl": self.ttl,
            "lkey": str(self.lock_key),
            "lid": self.lock_id,
        }

    @classmethod
    def coerce(cls, value: Any, **kwargs) -> Optional["Lock"]:
        """从字典构建 Lock

        支持的键名: lkey / lock_key、lid / lock_id、ttl。

        Args:
            value: 字典
            **kwargs: 传给构造函数的其他参数（pool、settings）

        Returns:
            Lock 实例；value 不是字典或缺少任一字段时返回 None
        """
        if not isinstance(value, Mapping):
            return None

        lock_key = _lookup(value, "lkey", "lock_key")
        lock_id = _lookup(value, "lid", "lock_id")
        ttl = _lookup(value, "ttl")
        if lock_key is None or lock_id is None or ttl is None:
            return None

        return cls(lock_key=lock_key, lock_id=lock_id, ttl=ttl, **kwargs)

    @classmethod
    def count(
        cls,
        lock_key: Any,
        min_score: float = 0,
        max_score: Optional[float] = None,
        pool: Optional[RedisPool] = None,
        settings: Optional[DeDupeSettings] = None,
    ) -> int:
        """统计过期时间戳在 [min_score, max_score] 范围内的条目数量

        Args:
            lock_key: 有序集合的键名
            min_score: 起始时间戳（含），默认 0
            max_score: 结束时间戳（含），默认 "当前时间 + expires_in"
        """
        if max_score is None:
            settings = settings or registry.config()
            max_score = clock.expires_at(settings.expires_in)

        with (pool or registry.redis_pool()).connection() as conn:
            return int(conn.zcount(str(lock_key), min_score, max_score))

    @classmethod
    def flush(cls, lock_key: Any, pool: Optional[RedisPool] = None) -> bool:
        """删除 lock_key 下的所有锁；lock_key 为空时什么也不做"""
        if lock_key is None:
            return False

        with (pool or registry.redis_pool()).connection() as conn:
            return conn.delete(str(lock_key)) > 0

    @classmethod
    def flush_expired_members(cls, lock_key: Any, pool: Optional[RedisPool] = None) -> bool:
        """删除 lock_key 下已过期的锁；lock_key 为空时什么也不做"""
        if lock_key is None:
            return False

        with (pool or registry.redis_pool()).connection() as conn:
            removed = conn.zremrangebyscore(
                str(lock_key), "-inf", exclusive_upper_bound(clock.now())
            )
        return removed > 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, Lock):
            return NotImplemented
        return (self.lock_key, self.lock_id, self.ttl) == (other.lock_key, other.lock_id, other.ttl)

    def __hash__(self) -> int:
        return hash((self.lock_key, self.lock_id, self.ttl))

    def __repr__(self) -> str:
        return f"Lock(lock_key={self.lock_key!r}, lock_id={self.lock_id!r}, ttl={self.ttl!r})"
