"""qpmigrate 日志配置

只给 "qpmigrate" logger 挂一个 stderr handler，不动根日志器，
--stdout 模式下 stdout 只包含迁移结果。

级别来源（优先级从高到低）:
  1. -q / --quiet            -> ERROR
  2. -v / --verbose (可叠加)  -> DEBUG
  3. 环境变量 QPMIGRATE_LOG_LEVEL
  4. 默认 INFO

文本格式随级别变化: INFO 及以上只输出 "[级别] 消息"，
DEBUG 时附带时间和模块名，便于排查字段映射。
"""

from __future__ import annotations

import json
import logging
import os
import sys

PACKAGE_LOGGER = "qpmigrate"
LEVEL_ENV = "QPMIGRATE_LOG_LEVEL"
JSON_ENV = "QPMIGRATE_LOG_JSON"

_BRIEF_FORMAT = "[%(levelname)s] %(message)s"
_DEBUG_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """单行 JSON 日志，供 CI 收集迁移告警

    输出字段: level / logger / msg，有异常时附带 exc
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def resolve_level(verbose: int = 0, quiet: bool = False) -> int:
    """根据命令行开关和环境变量计算日志级别，无法识别的名称回退到 INFO"""
    if quiet:
        return logging.ERROR
    if verbose > 0:
        return logging.DEBUG
    name = os.getenv(LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: int = logging.INFO, json_output: bool | None = None) -> logging.Handler:
    """为 qpmigrate logger 安装 stderr handler，重复调用时替换上一次安装的 handler

    json_output 为 None 时读取环境变量 QPMIGRATE_LOG_JSON=1。
    """
    if json_output is None:
        json_output = os.getenv(JSON_ENV, "") == "1"

    log = logging.getLogger(PACKAGE_LOGGER)
    for old in [h for h in log.handlers if getattr(h, "_qpmigrate", False)]:
        log.removeHandler(old)
        old.close()

    handler = logging.StreamHandler(sys.stderr)
    handler._qpmigrate = True  # type: ignore[attr-defined]
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = _DEBUG_FORMAT if level <= logging.DEBUG else _BRIEF_FORMAT
        handler.setFormatter(logging.Formatter(fmt))

    log.addHandler(handler)
    log.setLevel(level)
    return handler
