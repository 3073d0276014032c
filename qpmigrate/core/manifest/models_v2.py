"""qpm2.json (v2) 清单数据模型

v2 相比 v1 的主要变化:
  - id / version 提升到顶层
  - 引入 triplet（命名构建配置），依赖、编译选项、产物都挂在 triplet 下
  - 依赖由数组改为 id -> DependencySpec 的映射，并区分 dependencies / devDependencies

to_dict() 输出普通 dict，键顺序与 qpm 写出的 qpm2.json 一致，
取值为 None 的可选字段不输出。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from qpmigrate.core.manifest.models_v1 import CompileOptions

DEFAULT_TRIPLET = "default"
CONFIG_VERSION = "2.0.0"
SCRIPT_PHASES = ("build", "debug", "copy", "qmod")


def _drop_none(entries: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in entries.items() if v is not None}


@dataclass
class DependencySpec:
    """v2 依赖项"""

    version_range: str
    triplet: str | None = DEFAULT_TRIPLET
    qmod_export: bool | None = None
    qmod_required: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "versionRange": self.version_range,
            "triplet": self.triplet,
            "qmodExport": self.qmod_export,
            "qmodRequired": self.qmod_required,
        })


@dataclass
class Triplet:
    """命名构建配置"""

    dependencies: dict[str, DependencySpec] = field(default_factory=dict)
    dev_dependencies: dict[str, DependencySpec] = field(default_factory=dict)
    env: dict[str, str] = field(default_factory=dict)
    compile_options: CompileOptions | None = None
    qmod_url: str | None = None
    qmod_id: str | None = None
    qmod_template: str | None = None
    out_binaries: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "dependencies": {k: v.to_dict() for k, v in self.dependencies.items()},
            "devDependencies": {k: v.to_dict() for k, v in self.dev_dependencies.items()},
            "compileOptions": (
                self.compile_options.to_dict() if self.compile_options is not None else None
            ),
            "outBinaries": list(self.out_binaries) if self.out_binaries is not None else None,
            "qmodId": self.qmod_id,
            "qmodTemplate": self.qmod_template,
            "qmodUrl": self.qmod_url,
            "env": dict(self.env),
        })


@dataclass
class WorkspaceV2:
    """workspace 段，scripts 中缺省的阶段不输出"""

    scripts: dict[str, list[str] | None] = field(default_factory=dict)
    qmod_include_dirs: list[str] = field(default_factory=list)
    qmod_include_files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scripts": {k: list(v) for k, v in self.scripts.items() if v is not None},
            "qmodIncludeDirs": list(self.qmod_include_dirs),
            "qmodIncludeFiles": list(self.qmod_include_files),
        }


@dataclass
class AdditionalDataV2:
    """v2 包描述信息（新结构，与 v1 的 additionalData 无关）"""

    description: str = ""
    author: str | None = None
    license: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "description": self.description,
            "author": self.author,
            "license": self.license,
        })


@dataclass
class ManifestV2:
    """qpm2.json v2 清单"""

    id: str
    version: str
    dependencies_directory: str
    shared_directory: str
    workspace: WorkspaceV2
    triplets: dict[str, Triplet]
    toolchain_out: str
    additional_data: AdditionalDataV2 | None = None
    config_version: str = CONFIG_VERSION

    @property
    def default_triplet(self) -> Triplet:
        return self.triplets[DEFAULT_TRIPLET]

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "version": self.version,
            "dependenciesDirectory": self.dependencies_directory,
            "sharedDirectory": self.shared_directory,
            "workspace": self.workspace.to_dict(),
            "additionalData": (
                self.additional_data.to_dict() if self.additional_data is not None else None
            ),
            "triplets": {name: t.to_dict() for name, t in self.triplets.items()},
            "configVersion": self.config_version,
            "toolchainOut": self.toolchain_out,
        })
