"""迁移服务 — CLI 共享的「读取 → 转换 → 写出」流程

转换本身是纯函数 (core.manifest.converter.convert)，本服务只负责
文件读写、$schema 注入和结果汇总。任何一步失败都直接抛出，
不会留下部分写入的输出文件。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from qpmigrate.core.config import Config, get_config
from qpmigrate.core.manifest import ManifestV1, ManifestV2, convert
from qpmigrate.utils.json_io import dump_json, load_json, save_text

logger = logging.getLogger(__name__)


@dataclass
class MigrateRequest:
    """迁移请求 DTO，空值表示使用配置中的默认值"""

    input_path: str = ""
    output_path: str = ""
    indent: int | None = None
    include_schema: bool | None = None
    dry_run: bool = False


@dataclass
class MigrateReport:
    """单次迁移的结果摘要"""

    input_path: str
    output_path: str
    package_id: str
    version: str
    dependency_count: int
    dev_dependency_count: int
    written: bool
    content: str


def render_manifest(manifest: ManifestV2, indent: int = 2, schema: str = "") -> str:
    """将 v2 清单序列化为 JSON 文本，schema 非空时在最前面加 $schema 键"""
    data: dict[str, Any] = {}
    if schema:
        data["$schema"] = schema
    data.update(manifest.to_dict())
    return dump_json(data, indent=indent)


class MigrateService:
    """qpm.json -> qpm2.json 迁移服务"""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def load(self, input_path: str | Path) -> ManifestV1:
        """读取并校验 v1 清单"""
        data = load_json(input_path)
        return ManifestV1.from_dict(data)

    def migrate(self, request: MigrateRequest) -> MigrateReport:
        """执行一次迁移"""
        cfg = self.config
        input_path = request.input_path or cfg.input_file
        output_path = request.output_path or cfg.output_file
        indent = request.indent if request.indent is not None else cfg.indent
        include_schema = (
            request.include_schema if request.include_schema is not None
            else cfg.include_schema
        )

        logger.info("读取 v1 清单: %s", input_path)
        manifest = convert(self.load(input_path))
        content = render_manifest(
            manifest, indent=indent,
            schema=cfg.schema_url if include_schema else "",
        )

        if request.dry_run:
            logger.info("dry-run 模式，跳过写入: %s", output_path)
        else:
            save_text(output_path, content)
            logger.info("已写入 v2 清单: %s", output_path)

        triplet = manifest.default_triplet
        return MigrateReport(
            input_path=str(input_path),
            output_path=str(output_path),
            package_id=manifest.id,
            version=manifest.version,
            dependency_count=len(triplet.dependencies),
            dev_dependency_count=len(triplet.dev_dependencies),
            written=not request.dry_run,
            content=content,
        )
