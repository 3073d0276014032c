"""CLI — 清单迁移命令"""

from __future__ import annotations

import click

from qpmigrate.cli import _fail
from qpmigrate.core.exceptions import MigrateError
from qpmigrate.core.manifest.converter import partition_dependencies
from qpmigrate.services.migrate_service import MigrateRequest, MigrateService


def register(group: click.Group) -> None:
    group.add_command(migrate)
    group.add_command(inspect_manifest)


@click.command()
@click.option("--input", "-i", "input_path", default="", help="v1 清单路径（默认取配置 input_file）")
@click.option("--output", "-o", "output_path", default="", help="v2 清单输出路径（默认取配置 output_file）")
@click.option("--indent", type=click.IntRange(min=0), default=None, help="JSON 缩进空格数")
@click.option("--schema/--no-schema", "include_schema", default=None, help="是否写入 $schema 链接")
@click.option("--stdout", "to_stdout", is_flag=True, help="输出到标准输出，不写文件")
def migrate(
    input_path: str, output_path: str, indent: int | None,
    include_schema: bool | None, to_stdout: bool,
) -> None:
    """将 qpm.json (v1) 转换为 qpm2.json (v2)"""
    svc = MigrateService()
    try:
        report = svc.migrate(MigrateRequest(
            input_path=input_path, output_path=output_path,
            indent=indent, include_schema=include_schema,
            dry_run=to_stdout,
        ))
    except MigrateError as e:
        raise _fail(e) from e

    if to_stdout:
        click.echo(report.content)
        return
    click.echo(
        f"已迁移 {report.package_id}@{report.version}: "
        f"{report.input_path} -> {report.output_path} "
        f"(依赖 {report.dependency_count}, 开发依赖 {report.dev_dependency_count})"
    )


@click.command(name="inspect")
@click.option("--input", "-i", "input_path", default="", help="v1 清单路径（默认取配置 input_file）")
def inspect_manifest(input_path: str) -> None:
    """校验 v1 清单并预览依赖拆分结果，不写任何文件"""
    svc = MigrateService()
    path = input_path or svc.config.input_file
    try:
        manifest = svc.load(path)
    except MigrateError as e:
        raise _fail(e) from e

    click.echo(f"包: {manifest.info.id}@{manifest.info.version}")
    runtime, dev = partition_dependencies(manifest.dependencies)
    if not runtime and not dev:
        click.echo("没有依赖。")
        return
    for title, deps in (("依赖", runtime), ("开发依赖", dev)):
        if not deps:
            continue
        click.echo(f"{title}:")
        for dep_id, spec in deps.items():
            qmod = "qmod" if spec.qmod_export else "-"
            click.echo(f"  {dep_id:30s} {spec.version_range:16s} [{qmod}]")
