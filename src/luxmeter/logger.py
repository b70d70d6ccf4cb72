#!/usr/bin/env python3
from __future__ import annotations

import bz2
import io
import logging
import logging.handlers
import os
import pathlib

import coloredlogs

MAX_SIZE: int = 10 * 1024 * 1024
ROTATE_COUNT: int = 10

LOG_FORMAT: str = "{name} %(asctime)s %(levelname)s [%(filename)s:%(lineno)s %(funcName)s] %(message)s"


def _log_formatter(name: str) -> logging.Formatter:
    return logging.Formatter(fmt=LOG_FORMAT.format(name=name), datefmt="%Y-%m-%d %H:%M:%S")


class _GZipRotator:
    @staticmethod
    def namer(name: str) -> str:
        return name + ".bz2"

    @staticmethod
    def rotator(source: str, dest: str) -> None:
        with pathlib.Path(source).open(mode="rb") as fs, bz2.open(dest, "wb") as fd:
            fd.writelines(fs)
        pathlib.Path.unlink(pathlib.Path(source))


def _file_handler(name: str, log_dir_path: pathlib.Path) -> logging.Handler:
    log_dir_path.mkdir(exist_ok=True, parents=True)

    log_file_path = str(log_dir_path / f"{name}.log")

    logging.info("Log to %s", log_file_path)

    handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        encoding="utf8",
        maxBytes=MAX_SIZE,
        backupCount=ROTATE_COUNT,
    )
    handler.formatter = _log_formatter(name)
    handler.namer = _GZipRotator.namer
    handler.rotator = _GZipRotator.rotator  # type: ignore[assignment]

    return handler


def init(
    name: str,
    level: int = logging.WARNING,
    log_dir_path: str | pathlib.Path | None = None,
    is_str_log: bool = False,
) -> io.StringIO | None:
    root_logger = logging.getLogger()

    if os.environ.get("NO_COLORED_LOGS", "false") != "true":
        # NOTE: 既存の StreamHandler を削除しないと二重に出力される
        root_logger.handlers = [h for h in root_logger.handlers if not isinstance(h, logging.StreamHandler)]
        coloredlogs.install(
            fmt=LOG_FORMAT.format(name=name),
            level=level,
            reconfigure=True,
            isatty=None,
        )
    else:
        root_logger.setLevel(level)

    if log_dir_path is not None:
        root_logger.addHandler(_file_handler(name, pathlib.Path(log_dir_path)))

    if is_str_log:
        str_io = io.StringIO()
        stream_handler = logging.StreamHandler(str_io)
        stream_handler.formatter = _log_formatter(name)
        root_logger.addHandler(stream_handler)

        return str_io

    return None
