"""时间来源

所有与过期相关的计算都通过 now() 读取当前时间，便于测试时冻结时间。
各调用方的本地时钟可能存在偏差，锁的实际有效期以加锁方的时钟为准。
"""

import time


def now() -> float:
    """当前 Unix 时间戳（秒，浮点）"""
    return time.time()


def expires_at(ttl: float) -> float:
    """从当前时间起 ttl 秒后的过期时间戳"""
    return now() + ttl
