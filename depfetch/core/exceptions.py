"""统一异常体系

所有业务异常继承 DepFetchError，CLI 层据此输出友好提示和错误码。
"""

from __future__ import annotations


class DepFetchError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(DepFetchError):
    """配置文件无效或位置选项不被支持"""

    code = "CONFIG_ERROR"


class ValidationError(DepFetchError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class InvalidGitUri(ValidationError):
    """Git 地址为空或格式不合法"""

    code = "INVALID_GIT_URI"

    def __init__(self, uri: str) -> None:
        super().__init__(f"不是合法的 Git 地址: '{uri}'")
        self.uri = uri


class TransportError(DepFetchError):
    """git clone / checkout / tag / rev-parse 失败"""

    code = "TRANSPORT_ERROR"

    def __init__(
        self, message: str, *,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


class PackageNotFound(DepFetchError):
    """检出目录中不存在包结构标记"""

    code = "PACKAGE_NOT_FOUND"


class ContentValidationError(DepFetchError):
    """包内容校验失败"""

    code = "CONTENT_INVALID"


class ConstraintNotSatisfied(ContentValidationError):
    """包元数据中的版本不满足版本约束"""

    code = "CONSTRAINT_NOT_SATISFIED"


class MismatchedPackageName(ContentValidationError):
    """包元数据中的名称与请求的名称不一致"""

    code = "MISMATCHED_NAME"


class InvalidPackageFiles(ContentValidationError):
    """包内存在非法文件名"""

    code = "INVALID_FILES"

    def __init__(self, message: str, files: list[str] | None = None) -> None:
        super().__init__(message)
        self.files = files or []
