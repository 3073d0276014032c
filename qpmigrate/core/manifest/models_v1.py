"""qpm.json (v1) 清单数据模型

v1 清单结构:
  - sharedDir / dependenciesDir: 相对路径
  - info: 包标识 (id / version 必填) + 可选 additionalData 扩展包
  - workspace: 脚本阶段 + qmod 打包配置
  - dependencies: 依赖数组，每项带 additionalData 标志位

ManifestV1.from_dict() 负责解析和必填字段校验，所有问题一次性收集后
以 ManifestValidationError 抛出；可选嵌套结构缺省时为 None。
JSON 中的 null 与缺省同等处理。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from qpmigrate.core.exceptions import ManifestValidationError

# compileOptions 已知字段: (JSON 键, 属性名)
COMPILE_OPTION_KEYS = (
    ("includePaths", "include_paths"),
    ("systemIncludes", "system_includes"),
    ("cppFlags", "cpp_flags"),
    ("cFlags", "c_flags"),
)


# =========================================================================
# 字段读取辅助 —— 出错时追加到 errors，返回占位值
# =========================================================================


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _required_str(data: dict[str, Any], key: str, path: str, errors: list[str]) -> str:
    value = data.get(key)
    if value is None:
        errors.append(f"{_join(path, key)}: 缺少必填字段")
        return ""
    if not isinstance(value, str):
        errors.append(f"{_join(path, key)}: 应为字符串，实际为 {type(value).__name__}")
        return ""
    return value


def _optional_str(data: dict[str, Any], key: str, path: str, errors: list[str]) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        errors.append(f"{_join(path, key)}: 应为字符串，实际为 {type(value).__name__}")
        return None
    return value


def _optional_bool(data: dict[str, Any], key: str, path: str, errors: list[str]) -> bool | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        errors.append(f"{_join(path, key)}: 应为布尔值，实际为 {type(value).__name__}")
        return None
    return value


def _str_list(value: Any, path: str, errors: list[str]) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        errors.append(f"{path}: 应为字符串数组")
        return []
    return list(value)


def _optional_str_list(
    data: dict[str, Any], key: str, path: str, errors: list[str],
) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    return _str_list(value, _join(path, key), errors)


def _object(
    data: dict[str, Any], key: str, path: str, errors: list[str], required: bool = False,
) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        if required:
            errors.append(f"{_join(path, key)}: 缺少必填字段")
        return None
    if not isinstance(value, dict):
        errors.append(f"{_join(path, key)}: 应为对象，实际为 {type(value).__name__}")
        return None
    return value


# =========================================================================
# 数据模型
# =========================================================================


@dataclass
class CompileOptions:
    """附加编译选项，v1 与 v2 共用同一结构

    未识别的键保存在 extra 中。key_order 记录源对象的键顺序，
    to_dict() 按该顺序输出；编程构造时为空，按已知字段声明顺序输出。
    """

    include_paths: list[str] | None = None
    system_includes: list[str] | None = None
    cpp_flags: list[str] | None = None
    c_flags: list[str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    key_order: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, data: dict[str, Any], path: str, errors: list[str]) -> CompileOptions:
        known = {json_key for json_key, _ in COMPILE_OPTION_KEYS}
        values = {
            attr: _optional_str_list(data, json_key, path, errors)
            for json_key, attr in COMPILE_OPTION_KEYS
        }
        extra = {k: v for k, v in data.items() if k not in known}
        return cls(**values, extra=extra, key_order=list(data))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for json_key, attr in COMPILE_OPTION_KEYS:
            value = getattr(self, attr)
            if value is not None:
                result[json_key] = list(value)
        result.update(self.extra)
        if not self.key_order:
            return result
        ordered = {k: result[k] for k in self.key_order if k in result}
        ordered.update((k, v) for k, v in result.items() if k not in ordered)
        return ordered


@dataclass
class PackageAdditionalDataV1:
    """info.additionalData 扩展包"""

    override_so_name: str | None = None
    cmake: bool | None = None
    toolchain_out: str | None = None
    mod_link: str | None = None
    compile_options: CompileOptions | None = None

    @classmethod
    def parse(cls, data: dict[str, Any], path: str, errors: list[str]) -> PackageAdditionalDataV1:
        raw_options = _object(data, "compileOptions", path, errors)
        return cls(
            override_so_name=_optional_str(data, "overrideSoName", path, errors),
            cmake=_optional_bool(data, "cmake", path, errors),
            toolchain_out=_optional_str(data, "toolchainOut", path, errors),
            mod_link=_optional_str(data, "modLink", path, errors),
            compile_options=(
                CompileOptions.parse(raw_options, _join(path, "compileOptions"), errors)
                if raw_options is not None else None
            ),
        )


@dataclass
class PackageInfoV1:
    """info 段: 包标识与元信息"""

    id: str
    version: str
    name: str | None = None
    url: str | None = None
    author: str | None = None
    additional_data: PackageAdditionalDataV1 | None = None

    @classmethod
    def parse(cls, data: dict[str, Any], path: str, errors: list[str]) -> PackageInfoV1:
        package_id = _required_str(data, "id", path, errors)
        version = _required_str(data, "version", path, errors)
        # 必填字段为空字符串同样视为缺失
        if isinstance(data.get("id"), str) and not package_id:
            errors.append(f"{_join(path, 'id')}: 不能为空")
        if isinstance(data.get("version"), str) and not version:
            errors.append(f"{_join(path, 'version')}: 不能为空")

        raw_extra = _object(data, "additionalData", path, errors)
        return cls(
            id=package_id,
            version=version,
            name=_optional_str(data, "name", path, errors),
            url=_optional_str(data, "url", path, errors),
            author=_optional_str(data, "author", path, errors),
            additional_data=(
                PackageAdditionalDataV1.parse(raw_extra, _join(path, "additionalData"), errors)
                if raw_extra is not None else None
            ),
        )


@dataclass
class WorkspaceV1:
    """workspace 段: 脚本阶段与 qmod 打包配置"""

    scripts: dict[str, list[str]] = field(default_factory=dict)
    qmod_include_dirs: list[str] = field(default_factory=list)
    qmod_include_files: list[str] = field(default_factory=list)
    qmod_output: str = ""

    @classmethod
    def parse(cls, data: dict[str, Any], path: str, errors: list[str]) -> WorkspaceV1:
        scripts: dict[str, list[str]] = {}
        raw_scripts = _object(data, "scripts", path, errors) or {}
        for phase, commands in raw_scripts.items():
            if commands is None:
                continue
            scripts[phase] = _str_list(commands, f"{path}.scripts.{phase}", errors)

        return cls(
            scripts=scripts,
            qmod_include_dirs=_optional_str_list(data, "qmodIncludeDirs", path, errors) or [],
            qmod_include_files=_optional_str_list(data, "qmodIncludeFiles", path, errors) or [],
            qmod_output=_optional_str(data, "qmodOutput", path, errors) or "",
        )


@dataclass
class DependencyAdditionalDataV1:
    """依赖项的标志位"""

    include_qmod: bool | None = None
    required: bool | None = None
    private: bool | None = None


@dataclass
class DependencyV1:
    """dependencies 数组中的单个依赖"""

    id: str
    version_range: str
    additional_data: DependencyAdditionalDataV1 = field(
        default_factory=DependencyAdditionalDataV1,
    )

    @property
    def is_private(self) -> bool:
        return self.additional_data.private is True

    @classmethod
    def parse(cls, data: dict[str, Any], path: str, errors: list[str]) -> DependencyV1:
        raw_flags = _object(data, "additionalData", path, errors) or {}
        flags_path = _join(path, "additionalData")
        return cls(
            id=_required_str(data, "id", path, errors),
            version_range=_required_str(data, "versionRange", path, errors),
            additional_data=DependencyAdditionalDataV1(
                include_qmod=_optional_bool(raw_flags, "includeQmod", flags_path, errors),
                required=_optional_bool(raw_flags, "required", flags_path, errors),
                private=_optional_bool(raw_flags, "private", flags_path, errors),
            ),
        )


@dataclass
class ManifestV1:
    """qpm.json v1 清单"""

    shared_dir: str
    dependencies_dir: str
    info: PackageInfoV1
    workspace: WorkspaceV1 = field(default_factory=WorkspaceV1)
    dependencies: list[DependencyV1] = field(default_factory=list)
    schema_version: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ManifestV1:
        """从解析后的 JSON 构建 v1 清单

        异常:
            ManifestValidationError: 必填字段缺失或类型错误，details 列出全部问题
        """
        errors: list[str] = []

        # v1 顶层 schema 标记写在 version 键上，兼容 schemaVersion 写法
        schema_version = _optional_str(data, "version", "", errors)
        if schema_version is None:
            schema_version = _optional_str(data, "schemaVersion", "", errors)

        raw_info = _object(data, "info", "", errors, required=True)
        info = (
            PackageInfoV1.parse(raw_info, "info", errors)
            if raw_info is not None else PackageInfoV1(id="", version="")
        )

        raw_workspace = _object(data, "workspace", "", errors, required=True)
        workspace = (
            WorkspaceV1.parse(raw_workspace, "workspace", errors)
            if raw_workspace is not None else WorkspaceV1()
        )

        dependencies: list[DependencyV1] = []
        raw_deps = data.get("dependencies")
        if raw_deps is not None and not isinstance(raw_deps, list):
            errors.append(f"dependencies: 应为数组，实际为 {type(raw_deps).__name__}")
        for idx, raw_dep in enumerate(raw_deps if isinstance(raw_deps, list) else []):
            dep_path = f"dependencies[{idx}]"
            if not isinstance(raw_dep, dict):
                errors.append(f"{dep_path}: 应为对象，实际为 {type(raw_dep).__name__}")
                continue
            dependencies.append(DependencyV1.parse(raw_dep, dep_path, errors))

        manifest = cls(
            shared_dir=_required_str(data, "sharedDir", "", errors),
            dependencies_dir=_required_str(data, "dependenciesDir", "", errors),
            info=info,
            workspace=workspace,
            dependencies=dependencies,
            schema_version=schema_version,
        )

        if errors:
            raise ManifestValidationError(
                f"v1 清单校验失败 ({len(errors)} 处)", details=errors,
            )
        return manifest
