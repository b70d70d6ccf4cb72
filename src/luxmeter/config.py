#!/usr/bin/env python3
"""
YAML 型式で定義された設定ファイルを読み込むライブラリです。

Usage:
  config.py [-c CONFIG] [-D]

Options:
  -c CONFIG         : CONFIG を設定ファイルとして読み込んで実行します。[default: config.yaml]
  -D                : デバッグモードで動作します。
"""

from __future__ import annotations

import json
import logging
import pathlib
from typing import Any

import jsonschema
import yaml

CONFIG_PATH: str = "config.yaml"
SCHEMA_PATH: pathlib.Path = pathlib.Path(__file__).parent / "config.schema"


class ConfigError(Exception):
    """設定ファイル関連エラーの基底クラス"""

    def __init__(self, message: str, details: str) -> None:
        """例外を初期化する。

        Args:
            message: エラーメッセージ
            details: 詳細なエラー情報

        """
        super().__init__(message)
        self.details = details


class ConfigValidationError(ConfigError):
    """YAML 設定ファイルの検証エラー."""


class ConfigParseError(ConfigError):
    """YAML パースエラー."""


class ConfigFileNotFoundError(ConfigError):
    """設定ファイルが見つからないエラー."""


def _format_path(path: list[str | int]) -> str:
    """エラーパスを人間が読みやすい形式に変換."""
    if not path:
        return "ルート"

    formatted_parts: list[str] = []
    for part in path:
        if isinstance(part, int):
            formatted_parts.append(f"[{part}]")
        elif formatted_parts:
            formatted_parts.append(f".{part}")
        else:
            formatted_parts.append(str(part))

    return "".join(formatted_parts)


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def _format_validation_error(error: jsonschema.exceptions.ValidationError) -> str:
    lines: list[str] = [f"  場所: {_format_path(list(error.path))}"]

    if error.validator == "enum":
        allowed_str = ", ".join(_format_value(v) for v in error.validator_value)
        lines.append("  問題: 許可されていない値です")
        lines.append(f"  指定値: {_format_value(error.instance)}")
        lines.append(f"  許可される値: {allowed_str}")
    elif error.validator in ("minimum", "exclusiveMinimum", "maximum"):
        lines.append("  問題: 値が範囲外です")
        lines.append(f"  指定値: {error.instance}")
        lines.append(f"  制約: {error.validator} {error.validator_value}")
    else:
        lines.append(f"  問題: {error.message}")

    return "\n".join(lines)


def validate_config(yaml_data: dict[str, Any], schema: dict[str, Any]) -> None:
    """YAML データをスキーマで検証し、エラーがあれば詳細を表示."""
    validator = jsonschema.Draft202012Validator(schema)
    errors = list(validator.iter_errors(yaml_data))

    if not errors:
        return

    error_messages: list[str] = ["=" * 60, "設定ファイルの検証エラー", "=" * 60, ""]

    for i, error in enumerate(errors, 1):
        error_messages.append(f"エラー {i}:")
        error_messages.append(_format_validation_error(error))
        error_messages.append("")

    error_messages.append("=" * 60)

    details = "\n".join(error_messages)
    logging.error("\n%s", details)

    raise ConfigValidationError(f"設定ファイルに {len(errors)} 件の検証エラーがあります", details)


def get_data(config: dict[str, Any], conf_path: list[str], default: Any = None) -> Any:
    conf: Any = config
    for key in conf_path:
        if not isinstance(conf, dict) or key not in conf:
            return default
        conf = conf[key]

    return conf


def load(
    config_path: str | pathlib.Path = CONFIG_PATH,
    schema_path: str | pathlib.Path | None = SCHEMA_PATH,
) -> dict[str, Any]:
    config_path_obj = pathlib.Path(config_path).resolve()

    logging.info("Load config: %s", config_path_obj)

    if not config_path_obj.exists():
        details = f"  ファイルパス: {config_path_obj}"
        logging.error("設定ファイルが見つかりません\n%s", details)
        raise ConfigFileNotFoundError(f"設定ファイルが見つかりません: {config_path_obj}", details)

    with config_path_obj.open() as file:
        yaml_content = file.read()

    try:
        yaml_data: dict[str, Any] = yaml.load(yaml_content, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        details = f"  問題: {e!s}"
        logging.error("YAML 構文エラー\n%s", details)  # noqa: TRY400
        raise ConfigParseError("YAML ファイルの構文エラー", details) from e

    if yaml_data is None:
        yaml_data = {}

    if schema_path is not None:
        with pathlib.Path(schema_path).open() as file:
            schema: dict[str, Any] = json.load(file)
            validate_config(yaml_data, schema)

    if isinstance(yaml_data, dict):
        yaml_data["base_dir"] = config_path_obj.parent

    return yaml_data


if __name__ == "__main__":
    # TEST Code
    import pprint

    import docopt

    import luxmeter.logger

    assert __doc__ is not None
    args = docopt.docopt(__doc__)

    config_file = args["-c"]
    debug_mode = args["-D"]

    luxmeter.logger.init("test", level=logging.DEBUG if debug_mode else logging.INFO)

    logging.info(pprint.pformat(load(config_file)))
