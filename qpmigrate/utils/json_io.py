"""JSON 清单读写工具

集中管理清单文件的反序列化/序列化：
  - 统一 encoding="utf-8"
  - 输出格式与 qpm 一致（缩进 2 空格、保留非 ASCII、无结尾换行）
  - 原子写入，失败时不留下半截文件
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from qpmigrate.core.exceptions import (
    ManifestNotFoundError,
    ManifestParseError,
    ManifestWriteError,
)

logger = logging.getLogger(__name__)

# 清单文件最大大小限制 (10MB)
MAX_JSON_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写同目录临时文件再 rename

    异常:
        OSError: 文件写入或移动失败
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        # 只捕获普通异常，不拦截 KeyboardInterrupt/SystemExit
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def load_json(path: str | Path) -> dict[str, Any]:
    """读取 JSON 清单文件，顶层必须是对象

    异常:
        ManifestNotFoundError: 文件不存在或不可读
        ManifestParseError: JSON 格式错误、顶层不是对象或文件过大
    """
    p = Path(path)
    if not p.is_file():
        raise ManifestNotFoundError(f"清单文件不存在: {p}")

    file_size = p.stat().st_size
    if file_size > MAX_JSON_SIZE:
        raise ManifestParseError(
            f"清单文件过大: {p} ({file_size} 字节), 超过限制 {MAX_JSON_SIZE} 字节"
        )

    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("读取文件失败: %s, 错误: %s", p, e)
        raise ManifestNotFoundError(f"无法读取清单文件: {p} ({e})") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("解析 JSON 文件失败: %s, 错误: %s", p, e)
        raise ManifestParseError(
            f"清单文件不是合法 JSON: {p} (第 {e.lineno} 行, 第 {e.colno} 列: {e.msg})"
        ) from e

    if not isinstance(data, dict):
        raise ManifestParseError(
            f"清单顶层必须是对象: {p} (实际类型: {type(data).__name__})"
        )
    return data


def dump_json(data: Any, indent: int = 2) -> str:
    """序列化为 JSON 文本，不追加结尾换行；indent 为 0 时输出紧凑格式"""
    if indent <= 0:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def save_text(path: str | Path, content: str) -> None:
    """原子写入已序列化的文本

    异常:
        ManifestWriteError: 写入失败
    """
    p = Path(path)
    try:
        atomic_write(p, content)
    except OSError as e:
        logger.error("写入文件失败: %s, 错误: %s", p, e)
        raise ManifestWriteError(f"无法写入清单文件: {p} ({e})") from e
