"""
配置模块
提供去重锁的默认配置，业务项目可以继承并覆盖

配置优先级: 构造参数 > 环境变量 > 默认值
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional


class RedisSettings(BaseSettings):
    """Redis 配置
    
    使用示例:
        from ydedupe.config import RedisSettings
        
        redis_config = RedisSettings(
            url="redis://localhost:6379/0",
            max_connections=20,
        )
    """
    url: str = Field(default="redis://localhost:6379/0", description="Redis连接URL")
    max_connections: int = Field(default=10, description="最大连接数")
    socket_timeout: Optional[float] = Field(default=None, description="套接字超时（秒），为空则不限制")
    decode_responses: bool = Field(default=True, description="是否将响应解码为字符串")
    
    class Config:
        env_prefix = "YDEDUPE_REDIS_"


class LoggingSettings(BaseSettings):
    """日志配置
    
    使用示例:
        from ydedupe.config import LoggingSettings
        
        log_config = LoggingSettings(level="DEBUG", file_path="logs/dedupe.log")
    """
    level: str = Field(default="INFO", description="日志级别")
    file_path: Optional[str] = Field(default=None, description="日志文件路径，为空则不写文件")
    enable_console: bool = Field(default=True, description="是否启用控制台输出")
    use_microseconds: bool = Field(default=True, description="时间戳是否使用微秒精度")
    
    class Config:
        env_prefix = "YDEDUPE_LOG_"


class DeDupeSettings(BaseSettings):
    """去重锁配置
    
    内置子配置及环境变量前缀:
        - redis:   RedisSettings   (YDEDUPE_REDIS_)
        - logging: LoggingSettings (YDEDUPE_LOG_)
    
    使用示例:
        from ydedupe.config import DeDupeSettings
        
        settings = DeDupeSettings(
            namespace="my-app",
            expires_in=600,
            redis=RedisSettings(url="redis://cache:6379/1"),
        )
    
    环境变量:
        YDEDUPE_NAMESPACE=my-app
        YDEDUPE_EXPIRES_IN=600
        YDEDUPE_REDIS__URL=redis://cache:6379/1
    """
    namespace: Optional[str] = Field(default="de-dupe", description="键名命名空间（全局前缀）")
    expires_in: int = Field(default=5 * 60, gt=0, description="默认锁有效期（秒）")
    
    redis: RedisSettings = Field(default_factory=RedisSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    @field_validator("namespace")
    @classmethod
    def _strip_namespace(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None
    
    class Config:
        env_prefix = "YDEDUPE_"
        env_nested_delimiter = "__"
