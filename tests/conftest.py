"""共享 fixture — v1 清单样例 + 配置单例隔离"""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable

import pytest

import qpmigrate.core.config as cfgmod

_SAMPLE_V1: dict[str, Any] = {
    "version": "0.1.0",
    "sharedDir": "shared",
    "dependenciesDir": "extern",
    "info": {
        "id": "mymod",
        "version": "1.0.0",
    },
    "workspace": {
        "scripts": {"build": ["qpm build"]},
        "qmodIncludeDirs": [],
        "qmodIncludeFiles": [],
        "qmodOutput": "x.qmod",
    },
    "dependencies": [
        {
            "id": "dep1",
            "versionRange": "^1.0.0",
            "additionalData": {"includeQmod": True, "private": False},
        },
        {
            "id": "dep2",
            "versionRange": "^2.0.0",
            "additionalData": {"private": True},
        },
    ],
}


@pytest.fixture()
def v1_data() -> dict[str, Any]:
    """最小可用 v1 清单（每个测试独立拷贝，可随意修改）"""
    return deepcopy(_SAMPLE_V1)


@pytest.fixture()
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """将 dict 写为 qpm.json，返回路径"""

    def _write(data: dict[str, Any], name: str = "qpm.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_config():
    """每个测试前后清空全局配置单例"""
    cfgmod._current = None
    yield
    cfgmod._current = None
