#!/usr/bin/env python3
from __future__ import annotations

import pathlib
import unittest.mock
from typing import Any, Generator

import pytest


class FakeTSL2561Bus:
    """TSL2561 のレジスタを模擬する I2CBUS の代替"""

    def __init__(self, bus_id: int = 1) -> None:
        self.bus_id = bus_id
        self.registers: dict[int, int] = {
            0x00: 0x00,  # CONTROL
            0x01: 0x02,  # TIMING (gain 1x, 402ms)
            0x0A: 0x50,  # ID (TSL2561T, rev 0)
            0x0C: 0x00,
            0x0D: 0x00,
            0x0E: 0x00,
            0x0F: 0x00,
        }
        self.pointer: int = 0x00
        self.calls: list[tuple[Any, ...]] = []
        self.error: OSError | None = None
        self.closed = False
        self.bus_class: unittest.mock.MagicMock | None = None

    def set_channel(self, broadband: int, infrared: int) -> None:
        self.registers[0x0C] = broadband & 0xFF
        self.registers[0x0D] = broadband >> 8
        self.registers[0x0E] = infrared & 0xFF
        self.registers[0x0F] = infrared >> 8

    def write(self, dev_addr: int, data: list[int]) -> None:
        self.calls.append(("write", dev_addr, list(data)))
        if self.error is not None:
            raise self.error

        assert data[0] & 0x80  # noqa: S101
        self.pointer = data[0] & 0x0F
        if len(data) > 1:
            self.registers[self.pointer] = data[1]

    def read(self, dev_addr: int, length: int) -> list[int]:
        self.calls.append(("read", dev_addr, length))
        if self.error is not None:
            raise self.error

        return [self.registers.get(self.pointer + i, 0) for i in range(length)]

    def close(self) -> None:
        self.calls.append(("close",))
        self.closed = True


@pytest.fixture
def temp_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path


@pytest.fixture
def fake_bus() -> Generator[FakeTSL2561Bus, None, None]:
    """I2CBUS を FakeTSL2561Bus に差し替える"""
    bus = FakeTSL2561Bus()
    with unittest.mock.patch("luxmeter.sensor.i2cbus.I2CBUS", return_value=bus) as bus_class:
        bus.bus_class = bus_class
        yield bus
