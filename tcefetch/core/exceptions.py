"""统一异常体系

所有业务异常继承 TceFetchError。
CLI 层可据此输出友好提示，报告中以 code 字段区分失败类型。
"""

from __future__ import annotations


class TceFetchError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(TceFetchError):
    """配置缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(TceFetchError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"


class TransportError(TceFetchError):
    """网络连接失败，或服务器返回非 2xx / 非 404 状态码"""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, *, url: str = "", status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class FilesystemError(TceFetchError):
    """缓存文件无法读取、创建或写入"""

    code = "FILESYSTEM_ERROR"

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class PackageNotFoundError(TceFetchError):
    """扩展包本体在仓库中不存在（已确认缺失）"""

    code = "PACKAGE_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"扩展不存在: {name}")
        self.name = name


class ChecksumMismatchError(TceFetchError):
    """计算出的摘要与发布的校验和不一致"""

    code = "CHECKSUM_MISMATCH"

    def __init__(self, name: str, actual: str, expected: str) -> None:
        super().__init__(f"{name} 校验和不匹配 ({actual} != {expected})")
        self.name = name
        self.actual = actual
        self.expected = expected
