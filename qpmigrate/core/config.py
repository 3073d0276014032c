"""集中配置管理

提供迁移工具的默认输入/输出路径和输出格式，支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field

import yaml

from qpmigrate.core.exceptions import ConfigError
from qpmigrate.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "qpmigrate.yml"

# qpm v2 包配置的 JSON Schema 地址
PACKAGE_SCHEMA_URL = (
    "https://raw.githubusercontent.com/QuestPackageManager/"
    "QPM.Package/refs/heads/main/qpm.schema.json"
)


@dataclass
class Config:
    """迁移工具全局配置"""

    # 文件
    input_file: str = "qpm.json"
    output_file: str = "qpm2.json"

    # 输出格式
    indent: int = 2
    include_schema: bool = False
    schema_url: str = PACKAGE_SCHEMA_URL

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, OSError, ValueError) as e:
            raise ConfigError(f"配置文件无效: {path} ({e})") from e
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        cfg.validate()
        return cfg

    def validate(self) -> None:
        """检查字段取值，非法时抛出 ConfigError"""
        if not isinstance(self.indent, int) or isinstance(self.indent, bool) or self.indent < 0:
            raise ConfigError(f"indent 必须是非负整数: {self.indent!r}")
        if not self.input_file or not self.output_file:
            raise ConfigError("input_file / output_file 不能为空")

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.debug("配置已加载: %s", path)
    return _current
