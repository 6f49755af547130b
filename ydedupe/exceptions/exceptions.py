"""异常类定义

定义去重锁使用的异常类体系。

Redis 连接或命令失败（redis.exceptions.RedisError）不会被包装，
原样抛给调用方。
"""

import copy
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ErrorCode(str, Enum):
    """错误代码枚举

    继承自 str，可以直接作为字符串使用。

    使用示例:
        from ydedupe import ErrorCode, UsageException

        try:
            ydedupe.acquire("only-id", fn=job)
        except UsageException as e:
            if e.code == ErrorCode.NAMESPACE_REQUIRED:
                ...
    """

    DEDUPE_ERROR = "DEDUPE_ERROR"
    NAMESPACE_REQUIRED = "NAMESPACE_REQUIRED"
    INVALID_LOCK_ID = "INVALID_LOCK_ID"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"


# 类型别名，支持枚举和字符串
ErrorCodeType = Union[str, ErrorCode]


class DeDupeException(Exception):
    """去重锁异常基类

    属性:
        message: 错误消息
        code: 错误代码（支持 ErrorCode 枚举或字符串）
        details: 详细错误信息列表
        extra: 额外的上下文信息
    """

    def __init__(
        self,
        message: str,
        code: ErrorCodeType = ErrorCode.DEDUPE_ERROR,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        self.message = message
        self.code = code
        self.details = details or []
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式

        Returns:
            包含异常信息的字典
        """
        return {
            "message": self.message,
            "code": self.code,
            "details": copy.deepcopy(self.details),
            "extra": copy.deepcopy(self.extra),
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r})"
        )


class UsageException(DeDupeException):
    """调用方式错误

    例如 acquire() 只传了锁 ID 而没有命名空间，或锁 ID 为空。
    这类错误不应重试。

    使用示例:
        raise UsageException("必须提供命名空间和锁 ID", code=ErrorCode.NAMESPACE_REQUIRED)
    """

    def __init__(
        self,
        message: str = "调用方式错误",
        code: ErrorCodeType = ErrorCode.NAMESPACE_REQUIRED,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(message, code=code, details=details, **extra)


class ConfigurationException(DeDupeException):
    """配置错误

    无法根据给定的配置构建 Redis 连接时抛出。
    """

    def __init__(
        self,
        message: str = "配置错误",
        code: ErrorCodeType = ErrorCode.INVALID_CONFIGURATION,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(message, code=code, details=details, **extra)


__all__ = [
    "ErrorCode",
    "ErrorCodeType",
    "DeDupeException",
    "UsageException",
    "ConfigurationException",
]
