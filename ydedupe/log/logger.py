"""
日志工具模块
提供简化的日志配置功能

库本身只通过 get_logger() 获取日志器并输出 DEBUG 日志，
不会在导入时添加任何处理器。需要输出时由应用调用 setup_logging()。
"""

import inspect
import logging
import os
import time
from typing import Any


class MicrosecondFormatter(logging.Formatter):
    """支持微秒精度的日志格式化器"""
    
    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        if datefmt:
            s = time.strftime(datefmt, ct)
        else:
            s = time.strftime("%Y-%m-%d %H:%M:%S", ct)
        # 添加微秒部分（6位数）
        return "%s.%06d" % (s, (record.created - int(record.created)) * 1000000)


# 默认日志格式
DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"


def create_formatter(
    log_format: str = None,
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    use_microseconds: bool = True
) -> logging.Formatter:
    """创建日志格式化器
    
    Args:
        log_format: 日志格式字符串
        datefmt: 时间格式
        use_microseconds: 是否使用微秒精度
        
    Returns:
        日志格式化器
    """
    fmt = log_format or DEFAULT_LOG_FORMAT
    if use_microseconds:
        return MicrosecondFormatter(fmt=fmt, datefmt=datefmt)
    return logging.Formatter(fmt, datefmt=datefmt)


def setup_logger(
    name: str = None,
    level: str = "INFO",
    log_file: str = None,
    log_format: str = None,
    console: bool = True,
    use_microseconds: bool = True,
    propagate: bool = True
) -> logging.Logger:
    """设置并返回配置好的日志记录器
    
    Args:
        name: 日志记录器名称，默认为root logger
        level: 日志级别，可选：DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_file: 日志文件路径，如果不指定则不写入文件
        log_format: 日志格式，如果不指定则使用默认格式
        console: 是否输出到控制台
        use_microseconds: 是否使用微秒精度时间戳
        propagate: 是否传播到父日志器
        
    Returns:
        配置好的日志记录器
        
    使用示例:
        from ydedupe.log import setup_logger
        
        logger = setup_logger("ydedupe", level="DEBUG", log_file="logs/dedupe.log")
    """
    _logger = logging.getLogger(name) if name else logging.getLogger()
    _logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    _logger.propagate = propagate
    
    # 清除现有的处理器
    _logger.handlers.clear()
    
    formatter = create_formatter(log_format, use_microseconds=use_microseconds)
    
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        _logger.addHandler(console_handler)
    
    if log_file:
        # 确保日志目录存在
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        _logger.addHandler(file_handler)
    
    return _logger


def setup_logging(config: Any = None) -> logging.Logger:
    """按 LoggingSettings 配置 ydedupe 日志器
    
    Args:
        config: 日志配置对象（LoggingSettings），为空则使用全局配置中的 logging 节点
        
    Returns:
        ydedupe 日志记录器
    """
    if config is None:
        from ..registry import config as current_config
        config = current_config().logging
    
    return setup_logger(
        name="ydedupe",
        level=getattr(config, "level", "INFO"),
        log_file=getattr(config, "file_path", None),
        console=getattr(config, "enable_console", True),
        use_microseconds=getattr(config, "use_microseconds", True),
        propagate=False,
    )


def get_logger(name: str = None) -> logging.Logger:
    """获取日志记录器，支持自动推断模块名
    
    Args:
        name: 日志记录器名称。
              - None: 自动使用调用模块的 __name__
              - 字符串: 不含点号的简写自动添加 ydedupe 前缀（"lock" -> "ydedupe.lock"）
        
    Returns:
        日志记录器实例
    """
    if name is None:
        # 从调用栈自动推断模块名
        frame = inspect.currentframe()
        if frame is not None and frame.f_back is not None:
            name = frame.f_back.f_globals.get('__name__', 'ydedupe')
        else:
            name = 'ydedupe'
    elif name != 'ydedupe' and '.' not in name:
        name = f"ydedupe.{name}"
    
    return logging.getLogger(name)


# 通用日志记录器
logger = logging.getLogger("ydedupe")
