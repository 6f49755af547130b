"""日志模块

使用示例:
    from ydedupe.log import setup_logging, get_logger
    
    # 按配置输出 ydedupe 的日志
    setup_logging()
    
    logger = get_logger()
"""

from .logger import (
    setup_logger,
    setup_logging,
    create_formatter,
    MicrosecondFormatter,
    DEFAULT_LOG_FORMAT,
    logger,
    get_logger,
)

__all__ = [
    "setup_logger",
    "setup_logging",
    "create_formatter",
    "MicrosecondFormatter",
    "DEFAULT_LOG_FORMAT",
    "logger",
    "get_logger",
]
