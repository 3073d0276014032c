"""分层基础模块测试：exceptions / config / logger"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import yaml

from qpmigrate.core.config import (
    PACKAGE_SCHEMA_URL,
    Config,
    get_config,
    init_config,
)
from qpmigrate.core.exceptions import (
    ConfigError,
    ManifestNotFoundError,
    ManifestParseError,
    ManifestValidationError,
    ManifestWriteError,
    MigrateError,
    ValidationError,
)
from qpmigrate.utils.logger import (
    PACKAGE_LOGGER,
    JSONFormatter,
    resolve_level,
    setup_logging,
)

# =========================================================================
# exceptions.py
# =========================================================================


class TestExceptions:
    @pytest.mark.parametrize("cls", [
        ConfigError, ManifestNotFoundError, ManifestParseError,
        ManifestWriteError, ValidationError, ManifestValidationError,
    ])
    def test_hierarchy(self, cls: type) -> None:
        assert issubclass(cls, MigrateError)

    def test_validation_error_details(self) -> None:
        e = ManifestValidationError("校验失败", details=["info.id", "info.version"])
        assert e.details == ["info.id", "info.version"] and e.code == "VALIDATION_ERROR"

    def test_default_details(self) -> None:
        assert ValidationError("x").details == []


# =========================================================================
# config.py
# =========================================================================


def _write_cfg(tmp_path: Path, data: object) -> Path:
    f = tmp_path / "qpmigrate.yml"
    f.write_text(yaml.dump(data, allow_unicode=True), encoding="utf-8")
    return f


class TestConfig:
    def test_default_values(self) -> None:
        cfg = Config()
        assert cfg.input_file == "qpm.json"
        assert cfg.output_file == "qpm2.json"
        assert cfg.indent == 2
        assert cfg.include_schema is False
        assert cfg.schema_url == PACKAGE_SCHEMA_URL

    def test_from_file_missing(self, tmp_path: Path) -> None:
        cfg = Config.from_file(str(tmp_path / "nonexist.yml"))
        assert cfg.output_file == "qpm2.json"

    def test_from_file_with_data(self, tmp_path: Path) -> None:
        f = _write_cfg(tmp_path, {"output_file": "out/qpm2.json", "indent": 4})
        cfg = Config.from_file(str(f))
        assert cfg.output_file == "out/qpm2.json"
        assert cfg.indent == 4

    def test_extra_fields(self, tmp_path: Path) -> None:
        f = _write_cfg(tmp_path, {"indent": 2, "custom_field": "hello"})
        cfg = Config.from_file(str(f))
        assert cfg.extra == {"custom_field": "hello"}

    @pytest.mark.parametrize("data", [{"indent": -1}, {"indent": "2"}, {"output_file": ""}])
    def test_invalid_values(self, tmp_path: Path, data: dict) -> None:
        f = _write_cfg(tmp_path, data)
        with pytest.raises(ConfigError):
            Config.from_file(str(f))

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "qpmigrate.yml"
        f.write_text("indent: [1,\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="配置文件无效"):
            Config.from_file(str(f))

    def test_to_dict(self) -> None:
        d = Config().to_dict()
        assert isinstance(d, dict) and d["input_file"] == "qpm.json"

    def test_global_singleton(self, tmp_path: Path) -> None:
        assert get_config().indent == 2
        f = _write_cfg(tmp_path, {"indent": 8})
        init_config(str(f))
        assert get_config().indent == 8


# =========================================================================
# logger.py
# =========================================================================


@pytest.fixture()
def pkg_logger():
    """返回 qpmigrate logger，测试结束后卸掉安装的 handler 并恢复级别"""
    log = logging.getLogger(PACKAGE_LOGGER)
    yield log
    for h in log.handlers[:]:
        log.removeHandler(h)
    log.setLevel(logging.NOTSET)


class TestLogger:
    def test_json_formatter(self) -> None:
        record = logging.LogRecord(
            "qpmigrate.test", logging.WARNING, __file__, 10, "丢弃 %s", ("qmodOutput",), None,
        )
        entry = json.loads(JSONFormatter().format(record))
        assert entry == {"level": "WARNING", "logger": "qpmigrate.test", "msg": "丢弃 qmodOutput"}

    @pytest.mark.parametrize(("verbose", "quiet", "env", "expected"), [
        (0, False, None, logging.INFO),
        (0, False, "warning", logging.WARNING),
        (0, False, "nonsense", logging.INFO),
        (2, False, "ERROR", logging.DEBUG),
        (1, True, "DEBUG", logging.ERROR),
    ])
    def test_resolve_level(
        self, monkeypatch: pytest.MonkeyPatch,
        verbose: int, quiet: bool, env: str | None, expected: int,
    ) -> None:
        if env is None:
            monkeypatch.delenv("QPMIGRATE_LOG_LEVEL", raising=False)
        else:
            monkeypatch.setenv("QPMIGRATE_LOG_LEVEL", env)
        assert resolve_level(verbose=verbose, quiet=quiet) == expected

    def test_setup_replaces_own_handler_only(self, pkg_logger: logging.Logger) -> None:
        foreign = logging.NullHandler()
        pkg_logger.addHandler(foreign)
        root_handlers = logging.getLogger().handlers[:]

        setup_logging(logging.DEBUG, json_output=True)
        handler = setup_logging(logging.DEBUG, json_output=True)

        assert pkg_logger.handlers == [foreign, handler]
        assert isinstance(handler.formatter, JSONFormatter)
        assert pkg_logger.level == logging.DEBUG
        assert logging.getLogger().handlers == root_handlers

    def test_format_depends_on_level(self, pkg_logger: logging.Logger) -> None:
        brief = setup_logging(logging.INFO, json_output=False)
        assert brief.formatter._fmt == "[%(levelname)s] %(message)s"
        detailed = setup_logging(logging.DEBUG, json_output=False)
        assert "%(name)s" in detailed.formatter._fmt

    def test_json_from_env(self, pkg_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QPMIGRATE_LOG_JSON", "1")
        assert isinstance(setup_logging().formatter, JSONFormatter)
