"""异常模块

使用示例:
    from ydedupe.exceptions import UsageException, ErrorCode
"""

from .exceptions import (
    ErrorCode,
    ErrorCodeType,
    DeDupeException,
    UsageException,
    ConfigurationException,
)

__all__ = [
    "ErrorCode",
    "ErrorCodeType",
    "DeDupeException",
    "UsageException",
    "ConfigurationException",
]
