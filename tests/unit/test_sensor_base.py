#!/usr/bin/env python3
# ruff: noqa: S101
"""sensor/base.py のテスト"""

from __future__ import annotations

import asyncio

import pytest

from luxmeter.sensor.base import I2CSensorBase


class _TestSensor(I2CSensorBase):
    NAME = "Test"
    DEV_ADDR = 0x42

    def __init__(self, *args, ping_result=True, **kwargs):
        super().__init__(*args, **kwargs)
        self.ping_result = ping_result
        self.ping_called = False

    async def _ping_impl(self) -> bool:
        self.ping_called = True
        if isinstance(self.ping_result, Exception):
            raise self.ping_result
        return self.ping_result

    async def get_value(self):
        return 1.0

    async def get_value_map(self):
        return {"value": await self.get_value()}


class TestI2CSensorBase:
    """I2CSensorBase クラスのテスト"""

    def test_is_abstract(self):
        """抽象クラスである"""
        with pytest.raises(TypeError, match="abstract"):
            I2CSensorBase()  # type: ignore[abstract]

    def test_class_attributes(self):
        """クラス属性のデフォルト値"""
        assert I2CSensorBase.NAME == "Unknown"
        assert I2CSensorBase.TYPE == "I2C"
        assert I2CSensorBase.DEV_ADDR == 0x00

    def test_init_with_defaults(self):
        """デフォルト値で初期化できる"""
        sensor = _TestSensor()

        assert sensor.bus_id == 0x1
        assert sensor.dev_addr == 0x42
        assert sensor.required is False

    def test_init_with_custom_address(self):
        """カスタムアドレスで初期化できる"""
        sensor = _TestSensor(bus_id=0, dev_addr=0x50)

        assert sensor.bus_id == 0
        assert sensor.dev_addr == 0x50

    def test_ping_returns_true_on_success(self):
        """ping 成功時に True を返す"""
        sensor = _TestSensor()

        assert asyncio.run(sensor.ping()) is True
        assert sensor.ping_called is True

    def test_ping_returns_false_on_exception(self):
        """ping で例外が発生した場合に False を返す"""
        sensor = _TestSensor(ping_result=OSError("I2C error"))

        assert asyncio.run(sensor.ping()) is False
