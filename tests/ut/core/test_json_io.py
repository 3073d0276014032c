"""JSON 清单读写测试"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from qpmigrate.core.exceptions import (
    ManifestNotFoundError,
    ManifestParseError,
    ManifestWriteError,
)
from qpmigrate.utils.json_io import atomic_write, dump_json, load_json, save_text


class TestLoadJson:
    def test_load_object(self, tmp_path: Path) -> None:
        f = tmp_path / "qpm.json"
        f.write_text('{"info": {"id": "a"}}', encoding="utf-8")
        assert load_json(f) == {"info": {"id": "a"}}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestNotFoundError, match="不存在"):
            load_json(tmp_path / "nope.json")

    def test_directory_is_not_a_manifest(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestNotFoundError):
            load_json(tmp_path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        f = tmp_path / "qpm.json"
        f.write_text('{"info": ', encoding="utf-8")
        with pytest.raises(ManifestParseError, match="不是合法 JSON"):
            load_json(f)

    def test_top_level_must_be_object(self, tmp_path: Path) -> None:
        f = tmp_path / "qpm.json"
        f.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ManifestParseError, match="list"):
            load_json(f)


class TestDumpJson:
    def test_two_space_indent_no_trailing_newline(self) -> None:
        text = dump_json({"a": [1], "b": {}})
        assert text == '{\n  "a": [\n    1\n  ],\n  "b": {}\n}'

    def test_non_ascii_kept(self) -> None:
        assert dump_json({"author": "张三"}) == '{\n  "author": "张三"\n}'

    def test_compact_when_zero_indent(self) -> None:
        assert dump_json({"a": [1, 2]}, indent=0) == '{"a":[1,2]}'


class TestSaveText:
    def test_overwrites_existing(self, tmp_path: Path) -> None:
        f = tmp_path / "qpm2.json"
        f.write_text("old content", encoding="utf-8")
        save_text(f, dump_json({"id": "x"}))
        assert json.loads(f.read_text(encoding="utf-8")) == {"id": "x"}

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        f = tmp_path / "a" / "b" / "qpm2.json"
        save_text(f, "{}")
        assert f.read_text(encoding="utf-8") == "{}"

    def test_write_failure_wrapped(self, tmp_path: Path) -> None:
        with patch("qpmigrate.utils.json_io.atomic_write", side_effect=PermissionError("denied")):
            with pytest.raises(ManifestWriteError, match="denied"):
                save_text(tmp_path / "qpm2.json", "{}")

    def test_atomic_write_cleans_tmp_on_failure(self, tmp_path: Path) -> None:
        with patch("qpmigrate.utils.json_io.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError):
                atomic_write(tmp_path / "out.json", "{}")
        assert list(tmp_path.iterdir()) == []
