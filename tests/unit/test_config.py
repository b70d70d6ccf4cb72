#!/usr/bin/env python3
# ruff: noqa: S101
"""
luxmeter.config モジュールのユニットテスト
"""
from __future__ import annotations

import json
import textwrap

import pytest

import luxmeter.config


class TestFormatPath:
    """_format_path 関数のテスト"""

    def test_empty_path_returns_root(self):
        """空のパスはルートを返す"""
        assert luxmeter.config._format_path([]) == "ルート"

    def test_nested_string_elements(self):
        """ネストした文字列要素"""
        assert luxmeter.config._format_path(["sensor", "gain"]) == "sensor.gain"

    def test_mixed_path(self):
        """混合パス"""
        assert luxmeter.config._format_path(["items", 0, "name"]) == "items[0].name"


class TestFormatValue:
    """_format_value 関数のテスト"""

    @pytest.mark.parametrize(
        ("value", "expected"), [(None, "null"), (True, "true"), ("high", '"high"'), (0x39, "57")]
    )
    def test_format(self, value, expected):
        """値を表示用に変換する"""
        assert luxmeter.config._format_value(value) == expected


class TestGetData:
    """get_data 関数のテスト"""

    def test_nested(self):
        """ネストした値を取得する"""
        assert luxmeter.config.get_data({"sensor": {"bus": 1}}, ["sensor", "bus"]) == 1

    def test_missing_returns_default(self):
        """存在しないキーは default"""
        assert luxmeter.config.get_data({}, ["sensor", "bus"]) is None
        assert luxmeter.config.get_data({"sensor": {}}, ["sensor", "bus"], 3) == 3


class TestLoad:
    """load 関数のテスト"""

    def _write(self, path, content):
        path.write_text(textwrap.dedent(content))
        return path

    def test_loads_valid_config(self, temp_dir):
        """正しい設定ファイルを読み込む"""
        config_path = self._write(
            temp_dir / "config.yaml",
            """
            sensor:
              bus: 1
              dev_addr: 0x39
              gain: high
              integration_time: 402ms
            measure:
              interval_sec: 0.5
              count: 3
            """,
        )

        config = luxmeter.config.load(config_path)

        assert config["sensor"]["dev_addr"] == 0x39
        assert config["sensor"]["gain"] == "high"
        assert config["measure"]["interval_sec"] == 0.5
        assert config["base_dir"] == temp_dir.resolve()

    def test_empty_config(self, temp_dir):
        """空の設定ファイルは空の辞書"""
        config_path = self._write(temp_dir / "config.yaml", "")

        config = luxmeter.config.load(config_path)

        assert config == {"base_dir": temp_dir.resolve()}

    def test_missing_file(self, temp_dir):
        """存在しないファイル"""
        with pytest.raises(luxmeter.config.ConfigFileNotFoundError) as exc_info:
            luxmeter.config.load(temp_dir / "none.yaml")

        assert "none.yaml" in exc_info.value.details

    def test_parse_error(self, temp_dir):
        """YAML の構文エラー"""
        config_path = self._write(temp_dir / "config.yaml", "sensor: [1, 2\n")

        with pytest.raises(luxmeter.config.ConfigParseError):
            luxmeter.config.load(config_path)

    def test_invalid_gain(self, temp_dir):
        """許可されていないゲイン"""
        config_path = self._write(
            temp_dir / "config.yaml",
            """
            sensor:
              gain: medium
            """,
        )

        with pytest.raises(luxmeter.config.ConfigValidationError) as exc_info:
            luxmeter.config.load(config_path)

        assert "sensor.gain" in exc_info.value.details
        assert '"medium"' in exc_info.value.details

    def test_invalid_interval(self, temp_dir):
        """0 以下の計測間隔"""
        config_path = self._write(
            temp_dir / "config.yaml",
            """
            measure:
              interval_sec: 0
            """,
        )

        with pytest.raises(luxmeter.config.ConfigValidationError) as exc_info:
            luxmeter.config.load(config_path)

        assert "measure.interval_sec" in exc_info.value.details

    def test_unknown_key(self, temp_dir):
        """未定義のキー"""
        config_path = self._write(temp_dir / "config.yaml", "unknown: 1\n")

        with pytest.raises(luxmeter.config.ConfigValidationError):
            luxmeter.config.load(config_path)

    def test_custom_schema(self, temp_dir):
        """スキーマを指定できる"""
        schema_path = temp_dir / "schema.json"
        schema_path.write_text(json.dumps({"type": "object", "required": ["name"]}))
        config_path = self._write(temp_dir / "config.yaml", "other: 1\n")

        with pytest.raises(luxmeter.config.ConfigValidationError):
            luxmeter.config.load(config_path, schema_path)

    def test_without_schema(self, temp_dir):
        """スキーマなしなら検証しない"""
        config_path = self._write(temp_dir / "config.yaml", "unknown: 1\n")

        assert luxmeter.config.load(config_path, None)["unknown"] == 1

    def test_example_config_is_valid(self):
        """同梱の設定例が検証を通る"""
        import pathlib

        example_path = pathlib.Path(__file__).parents[2] / "config.example.yaml"

        config = luxmeter.config.load(example_path)

        assert config["sensor"]["integration_time"] == "402ms"
