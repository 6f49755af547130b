"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 内存版 Redis 及连接池
- 可控的时钟（冻结 / 时间旅行）
- 每个测试前后重置全局配置
"""

import pytest

import ydedupe
from ydedupe import RedisPool

from tests.helpers.constants import FREEZE_AT
from tests.helpers.fake_redis import FakeRedis


class FrozenClock:
    """可控时钟，替换 ydedupe.clock.now"""

    def __init__(self, start: float):
        self.current = start

    def now(self) -> float:
        return self.current

    def travel(self, seconds: float) -> float:
        """向前（或向后）移动时间"""
        self.current += seconds
        return self.current

    def travel_to(self, timestamp: float) -> float:
        self.current = timestamp
        return self.current


# ==================== 基础 Fixtures ====================

@pytest.fixture
def fake_redis():
    """内存版 Redis 客户端"""
    return FakeRedis()


@pytest.fixture
def pool(fake_redis):
    """包装内存版 Redis 的连接池"""
    return RedisPool(fake_redis)


@pytest.fixture(autouse=True)
def dedupe_config(pool):
    """每个测试使用默认配置和内存版 Redis"""
    ydedupe.reset_config()
    ydedupe.configure(namespace="de-dupe", expires_in=300)
    ydedupe.set_redis_pool(pool)
    yield ydedupe.config()
    ydedupe.reset_config()


@pytest.fixture
def frozen_clock(monkeypatch):
    """冻结时间，可通过 travel / travel_to 移动"""
    clock = FrozenClock(FREEZE_AT)
    monkeypatch.setattr("ydedupe.clock.now", clock.now)
    return clock
