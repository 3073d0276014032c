"""统一异常体系

所有业务异常继承 MigrateError，CLI 层据此输出带错误码的友好提示。
"""

from __future__ import annotations


class MigrateError(Exception):
    """迁移工具基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(MigrateError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ManifestNotFoundError(MigrateError):
    """输入清单文件不存在或不可读"""

    code = "MANIFEST_NOT_FOUND"


class ManifestParseError(MigrateError):
    """清单文件不是合法 JSON，或顶层不是对象"""

    code = "MANIFEST_PARSE_ERROR"


class ManifestWriteError(MigrateError):
    """输出清单写入失败"""

    code = "MANIFEST_WRITE_ERROR"


class ValidationError(MigrateError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ManifestValidationError(ValidationError):
    """v1 清单缺少必填字段或字段类型错误"""
