"""去重数据集

基于 Redis 有序集合（Sorted Set）实现的分布式去重数据集。
同一个 lock_key 下可以存放任意多个 ID，每个 ID 的分数是它自己的过期时间戳。

存储结构:
    - 一个 lock_key 对应一个有序集合
    - 成员为 ID 字符串，分数为 "加锁时间 + ttl" 的 Unix 时间戳（浮点秒）
    - ttl 只在加锁时使用，不写入 Redis；同一 lock_key 下不同 ID 可以有不同的有效期

有效性判断:
    - 分数 >= 当前时间: 仍被锁定
    - 分数 <  当前时间: 已过期（可能尚未被清理，但任何读操作都不会把它当作锁定）

使用示例:
    from ydedupe import Dataset, LockKey

    dataset = Dataset(LockKey("sync", "orders"), ttl=3600)

    # 至少有一个 ID 新加锁成功即返回 True
    if dataset.acquire("1001", "1002"):
        ...

    # 需要"全部成功"语义时，先检查已锁定的成员
    if not dataset.locked_members("1001", "1002"):
        dataset.acquire("1001", "1002")

    dataset.release("1001")
"""

from typing import Any, Callable, Iterator, List, Optional, Union

from . import clock
from . import registry
from .config import DeDupeSettings
from .log import get_logger
from .redis_pool import RedisPool

logger = get_logger()


def to_member(value: Any) -> str:
    """将 ID 转为有序集合成员"""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def exclusive_upper_bound(timestamp: float) -> str:
    """ZREMRANGEBYSCORE 的开区间上界: 分数严格小于 timestamp"""
    return f"({timestamp!r}"


class Dataset:
    """分布式去重数据集

    对象本身不保存状态（只有 lock_key、ttl 和连接来源），
    可以在任意进程中反复创建并指向同一个 lock_key。

    所有多 ID 操作都把 ID 当作彼此独立的条目处理；
    唯一的原子性保证来自 acquire 中那一次 ZADD NX 请求。

    Attributes:
        lock_key: 有序集合的键名
        ttl: 新加锁条目的有效期（秒）
    """

    def __init__(
        self,
        lock_key: Any,
        ttl: Optional[Union[int, float]] = None,
        pool: Optional[RedisPool] = None,
        settings: Optional[DeDupeSettings] = None,
    ):
        """
        Args:
            lock_key: 有序集合的键名（字符串或 LockKey）
            ttl: 有效期（秒），为空则使用配置中的 expires_in
            pool: Redis 连接池，为空则使用全局连接池
            settings: 配置对象，为空则使用全局配置
        """
        self.lock_key = str(lock_key)
        settings = settings or registry.config()
        self.ttl = ttl if ttl is not None else settings.expires_in
        self._pool = pool

    @property
    def pool(self) -> RedisPool:
        return self._pool or registry.redis_pool()

    def acquire(self, *ids: Any) -> bool:
        """加锁

        1. 先清理该 lock_key 下已过期的条目，使过期的 ID 可以被重新加锁
        2. 以 "当前时间 + ttl" 为分数，用一次 ZADD NX 原子地写入所有 ID
        3. 已存在（仍有效）的 ID 保持不变，保留其原有的过期时间

        注意: 只要有一个 ID 是新加锁的就返回 True，这不是"全部成功"语义。
        需要全部成功时，调用方应先检查 locked_members()，或在部分失败时自行释放。

        Args:
            *ids: 需要加锁的 ID

        Returns:
            至少有一个 ID 新加锁成功时返回 True；ID 为空或全部已被锁定时返回 False
        """
        if not ids:
            return False

        self.flush_expired_members()
        score = clock.expires_at(self.ttl)
        mapping = {to_member(i): score for i in ids}

        with self.pool.connection() as conn:
            added = conn.zadd(self.lock_key, mapping, nx=True)

        logger.debug(f"Acquire {self.lock_key}: requested={len(mapping)}, added={added}")
        return added > 0

    lock = acquire

    def release(self, *ids: Any) -> bool:
        """释放锁（无条件删除）

        Returns:
            至少删除了一个已存在的 ID 时返回 True
        """
        if not ids:
            return False

        with self.pool.connection() as conn:
            removed = conn.zrem(self.lock_key, *[to_member(i) for i in ids])

        logger.debug(f"Release {self.lock_key}: requested={len(ids)}, removed={removed}")
        return removed > 0

    unlock = release

    def _scores(self, ids) -> List[Optional[float]]:
        """读取各 ID 的分数，不存在的 ID 对应 None"""
        with self.pool.connection() as conn:
            scores = conn.zmscore(self.lock_key, [to_member(i) for i in ids])
        return list(scores or [None] * len(ids))

    def is_locked(self, *ids: Any) -> bool:
        """是否有任意一个 ID 仍处于锁定状态

        Returns:
            ID 为空或全部不存在/已过期时返回 False
        """
        if not ids:
            return False

        scores = self._scores(ids)
        current_time = clock.now()
        return any(score is not None and float(score) >= current_time for score in scores)

    def locked_members(self, *ids: Any) -> list:
        """返回仍处于锁定状态的 ID，保持传入顺序"""
        if not ids:
            return []

        scores = self._scores(ids)
        current_time = clock.now()
        return [
            i for i, score in zip(ids, scores)
            if score is not None and float(score) >= current_time
        ]

    def unlocked_members(self, *ids: Any) -> list:
        """返回未锁定（不存在或已过期）的 ID，保持传入顺序"""
        if not ids:
            return []

        scores = self._scores(ids)
        current_time = clock.now()
        return [
            i for i, score in zip(ids, scores)
            if score is None or float(score) < current_time
        ]

    def flush(self) -> bool:
        """删除整个有序集合

        Returns:
            有内容被删除时返回 True
        """
        with self.pool.connection() as conn:
            deleted = conn.delete(self.lock_key)

        logger.debug(f"Flush {self.lock_key}: deleted={deleted}")
        return deleted > 0

    def flush_expired_members(self) -> bool:
        """删除分数严格小于当前时间的条目

        分数恰好等于当前时间的条目仍视为锁定，不会被删除。

        Returns:
            有条目被删除时返回 True
        """
        current_time = clock.now()
        with self.pool.connection() as conn:
            removed = conn.zremrangebyscore(
                self.lock_key, "-inf", exclusive_upper_bound(current_time)
            )

        if removed:
            logger.debug(f"Flush expired {self.lock_key}: removed={removed}")
        return removed > 0

    def size(self, flush_expired: bool = True) -> int:
        """条目数量

        Args:
            flush_expired: 是否先清理过期条目。为 False 时返回原始数量（可能包含过期条目）
        """
        if flush_expired:
            self.flush_expired_members()

        with self.pool.connection() as conn:
            return int(conn.zcard(self.lock_key))

    def members(self, callback: Optional[Callable[[str], Any]] = None):
        """遍历仍处于锁定状态的 ID

        每次调用都会重新清理过期条目并重新查询 Redis，不做缓存。

        Args:
            callback: 可选，对每个 ID 调用一次

        Returns:
            未传 callback 时返回生成器；传入 callback 时返回遍历的数量

        使用示例:
            for member in dataset.members():
                print(member)

            dataset.members(print)
        """
        if callback is None:
            return self._iter_members()

        count = 0
        for member in self._iter_members():
            callback(member)
            count += 1
        return count

    def _iter_members(self) -> Iterator[str]:
        self.flush_expired_members()
        current_time = clock.now()
        with self.pool.connection() as conn:
            for member, score in conn.zscan_iter(self.lock_key):
                if float(score) >= current_time:
                    yield to_member(member)

    def __iter__(self) -> Iterator[str]:
        return self._iter_members()

    def __repr__(self) -> str:
        return f"Dataset(lock_key={self.lock_key!r}, ttl={self.ttl!r})"
