"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 SearchService 层统一捕获并转换为工具错误结果。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "STORE_WRITE_ERROR"）。
        message: 用户可读错误信息。
        extra: 其他补充字段（例如 url、path 等）。
    """

    def __init__(self, code: str, message: str, **extra):
        self.code = code
        self.message = message
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误：连接失败、握手被拒、流中途异常断开等。"""


class StorageError(BusinessError):
    """结果文件写入失败。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
