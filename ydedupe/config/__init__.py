"""配置模块

提供配置管理功能：
- DeDupeSettings: 去重锁配置（命名空间、默认有效期、Redis、日志）
- 子配置类: RedisSettings, LoggingSettings
- ConfigLoader: YAML 配置加载器

快速开始:
    from ydedupe.config import load_yaml_config
    import ydedupe
    
    ydedupe.configure(load_yaml_config("config/dedupe.yaml"))
"""

from .settings import (
    DeDupeSettings,
    RedisSettings,
    LoggingSettings,
)

from .loader import (
    ConfigLoader,
    load_yaml_config,
)

__all__ = [
    "DeDupeSettings",
    "RedisSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_yaml_config",
]
