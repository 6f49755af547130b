"""版本信息"""

__version__ = "0.1.0"
__author__ = "yafo-ai"
__description__ = "基于 Redis 有序集合的分布式去重锁"
