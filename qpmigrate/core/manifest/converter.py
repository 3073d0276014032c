"""v1 -> v2 清单转换

纯内存映射，不做任何 IO，不修改输入对象。

映射规则:
  - info.id / info.version 提升为顶层 id / version
  - sharedDir / dependenciesDir 改名为 sharedDirectory / dependenciesDirectory
  - 依赖按 additionalData.private 拆分: private=true 进入 devDependencies，
    其余进入 dependencies；同 id 重复时后出现者覆盖前者
  - v1 没有 triplet 概念，全部内容收敛到唯一的 "default" triplet
  - 产物路径为 ./build/ + (overrideSoName 或 <id>.so)

转换过程中被丢弃或存疑的字段只记录日志，不影响输出。
"""

from __future__ import annotations

import logging

from qpmigrate.core.manifest.models_v1 import (
    DependencyV1,
    ManifestV1,
    PackageAdditionalDataV1,
)
from qpmigrate.core.manifest.models_v2 import (
    CONFIG_VERSION,
    DEFAULT_TRIPLET,
    SCRIPT_PHASES,
    AdditionalDataV2,
    DependencySpec,
    ManifestV2,
    Triplet,
    WorkspaceV2,
)

logger = logging.getLogger(__name__)

BUILD_DIR_PREFIX = "./build/"
DEFAULT_TOOLCHAIN_OUT = "toolchain.json"
QMOD_TEMPLATE = "mod.template.json"


def convert_dependency(dep: DependencyV1) -> DependencySpec:
    """转换单个依赖

    qmodExport 与 qmodRequired 都取自 includeQmod（缺省为 False），
    v1 的 required 标志不参与映射。
    """
    include_qmod = dep.additional_data.include_qmod
    return DependencySpec(
        version_range=dep.version_range,
        triplet=DEFAULT_TRIPLET,
        qmod_export=include_qmod if include_qmod is not None else False,
        qmod_required=include_qmod if include_qmod is not None else False,
    )


def partition_dependencies(
    dependencies: list[DependencyV1],
) -> tuple[dict[str, DependencySpec], dict[str, DependencySpec]]:
    """按 private 标志拆分为 (dependencies, devDependencies)"""
    runtime: dict[str, DependencySpec] = {}
    dev: dict[str, DependencySpec] = {}
    seen: set[str] = set()

    for dep in dependencies:
        if dep.id in seen:
            logger.warning("依赖 %s 重复出现，以最后一项为准", dep.id)
        seen.add(dep.id)

        flags = dep.additional_data
        if flags.required is not None and flags.required != (flags.include_qmod or False):
            logger.warning(
                "依赖 %s: required=%s 与 includeQmod=%s 不一致，"
                "qmodRequired 沿用 includeQmod",
                dep.id, flags.required, flags.include_qmod,
            )

        target = dev if dep.is_private else runtime
        target[dep.id] = convert_dependency(dep)

    return runtime, dev


def output_binary(package_id: str, extra: PackageAdditionalDataV1 | None) -> str:
    """计算 default triplet 的产物路径"""
    so_name = None
    if extra is not None:
        so_name = extra.override_so_name
    if so_name is None:
        so_name = f"{package_id}.so"
    return BUILD_DIR_PREFIX + so_name


def _log_dropped_fields(v1: ManifestV1) -> None:
    workspace = v1.workspace
    if workspace.qmod_output:
        logger.warning(
            "workspace.qmodOutput (%s) 在 v2 中没有对应字段，已丢弃",
            workspace.qmod_output,
        )

    unknown = [phase for phase in workspace.scripts if phase not in SCRIPT_PHASES]
    if unknown:
        logger.warning("以下脚本阶段不会迁移: %s", ", ".join(unknown))

    info = v1.info
    if info.name is not None:
        logger.debug("info.name (%s) 不迁移", info.name)
    if info.url is not None:
        logger.debug("info.url (%s) 不迁移", info.url)
    if info.additional_data is not None and info.additional_data.cmake is not None:
        logger.debug("info.additionalData.cmake 不迁移")


def convert(v1: ManifestV1) -> ManifestV2:
    """将 v1 清单转换为 v2 清单"""
    _log_dropped_fields(v1)

    info = v1.info
    extra = info.additional_data
    dependencies, dev_dependencies = partition_dependencies(v1.dependencies)

    compile_options = None
    mod_link = None
    toolchain_out = None
    if extra is not None:
        compile_options = extra.compile_options
        mod_link = extra.mod_link
        toolchain_out = extra.toolchain_out

    triplet = Triplet(
        dependencies=dependencies,
        dev_dependencies=dev_dependencies,
        env={},
        compile_options=compile_options,
        qmod_url=mod_link,
        qmod_id=info.id,
        qmod_template=QMOD_TEMPLATE,
        out_binaries=[output_binary(info.id, extra)],
    )

    scripts = v1.workspace.scripts
    workspace = WorkspaceV2(
        scripts={
            phase: list(scripts[phase]) if phase in scripts else None
            for phase in SCRIPT_PHASES
        },
        qmod_include_dirs=list(v1.workspace.qmod_include_dirs),
        qmod_include_files=list(v1.workspace.qmod_include_files),
    )

    manifest = ManifestV2(
        id=info.id,
        version=info.version,
        dependencies_directory=v1.dependencies_dir,
        shared_directory=v1.shared_dir,
        workspace=workspace,
        additional_data=AdditionalDataV2(description="", author=info.author, license=""),
        triplets={DEFAULT_TRIPLET: triplet},
        config_version=CONFIG_VERSION,
        toolchain_out=toolchain_out if toolchain_out is not None else DEFAULT_TOOLCHAIN_OUT,
    )

    logger.info(
        "已转换 %s@%s: %d 个依赖, %d 个开发依赖",
        manifest.id, manifest.version, len(dependencies), len(dev_dependencies),
    )
    return manifest
