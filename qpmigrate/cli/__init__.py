"""qpmigrate 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import click

from qpmigrate import __version__
from qpmigrate.core.config import DEFAULT_CONFIG_FILE, init_config
from qpmigrate.core.exceptions import MigrateError, ValidationError
from qpmigrate.utils.logger import resolve_level, setup_logging


def _fail(err: MigrateError) -> click.ClickException:
    """将业务异常转换为 click 异常，附带错误码和校验明细"""
    lines = [f"[{err.code}] {err}"]
    if isinstance(err, ValidationError):
        lines.extend(f"  - {d}" for d in err.details)
    return click.ClickException("\n".join(lines))


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path", default=DEFAULT_CONFIG_FILE,
    help="配置文件路径（不存在时使用默认配置）",
)
@click.option("--verbose", "-v", count=True, help="输出调试日志（字段映射细节）")
@click.option("--quiet", "-q", is_flag=True, help="只输出错误")
def main(config_path: str, verbose: int, quiet: bool) -> None:
    """qpmigrate - qpm.json (v1) 到 qpm2.json (v2) 的清单迁移工具"""
    setup_logging(resolve_level(verbose=verbose, quiet=quiet))
    try:
        init_config(config_path)
    except MigrateError as e:
        raise _fail(e) from e


# 注册各领域子命令
from qpmigrate.cli.cmd_migrate import register as _reg_migrate  # noqa: E402

_reg_migrate(main)
