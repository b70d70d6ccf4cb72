#!/usr/bin/env python3
"""
TSL2561 を使って照度を取得するライブラリです。

Usage:
  tsl2561.py [-b BUS] [-d DEV_ADDR] [-D]

Options:
  -b BUS            : I2C バス番号。[default: 0x01]
  -d DEV_ADDR       : デバイスアドレス(7bit)。 [default: 0x39]
  -D                : デバッグモードで動作します。
"""

# NOTE: 各操作はコルーチンで、バス I/O はスレッドで実行する。
# ロックは持たないので、同じインスタンスを並行して使う場合は呼び出し側で直列化すること。

from __future__ import annotations

import asyncio
import enum
import logging
from typing import TYPE_CHECKING

from luxmeter.sensor import i2cbus
from luxmeter.sensor import tsl2561_register as reg
from luxmeter.sensor.base import I2CSensorBase
from luxmeter.sensor.exceptions import NotInitializedError, SensorError, TransportError
from luxmeter.sensor.lux import Gain, IntegrationTime, compute_lux

if TYPE_CHECKING:
    from types import TracebackType


class State(enum.Enum):
    UNINITIALIZED = enum.auto()
    READY = enum.auto()
    FREED = enum.auto()


class TSL2561(I2CSensorBase):
    NAME: str = "TSL2561"
    DEV_ADDR: int = 0x39  # 7bit

    # NOTE: 0x0, 0x1 は CS パッケージ、0x4, 0x5 は T/FN/CL パッケージ
    PART_NUMBER_LIST: tuple[int, ...] = (0x0, 0x1, 0x4, 0x5)

    def __init__(self, bus_id: int = i2cbus.I2CBUS.ARM, dev_addr: int | None = None) -> None:  # noqa: D107
        super().__init__(bus_id, dev_addr)
        self.state: State = State.UNINITIALIZED
        self.i2cbus: i2cbus.I2CBUS | None = None

    async def __aenter__(self) -> TSL2561:
        if self.state is not State.READY:
            await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if self.state is State.READY:
            await self.free()

    async def init(self, bus_id: int | None = None, dev_addr: int | None = None) -> TSL2561:
        """I2C バスをオープンする

        Args:
            bus_id: I2C バス番号（省略時はコンストラクタで指定した値）
            dev_addr: デバイスアドレス（省略時はコンストラクタで指定した値）

        Returns:
            自分自身

        Raises:
            SensorError: 既に初期化済みの場合
            TransportError: バスのオープンに失敗した場合
        """
        if self.state is State.READY:
            raise SensorError(f"{self.NAME} is already initialized, call free() first")

        new_bus_id = bus_id if bus_id is not None else self.bus_id
        new_dev_addr = dev_addr if dev_addr is not None else self.dev_addr

        try:
            self.i2cbus = await asyncio.to_thread(i2cbus.I2CBUS, new_bus_id)
        except OSError as e:
            raise TransportError(f"Failed to open I2C bus {new_bus_id}") from e

        # NOTE: オープンに成功した場合だけ接続先を更新する
        self.bus_id = new_bus_id
        self.dev_addr = new_dev_addr
        self.state = State.READY
        logging.info("%s initialized (bus:0x%02X, dev:0x%02X)", self.NAME, self.bus_id, self.dev_addr)

        return self

    async def free(self) -> TSL2561:
        """I2C バスをクローズする

        クローズに失敗した場合も、状態は FREED になる。
        """
        bus = self.__check_init()

        self.i2cbus = None
        self.state = State.FREED

        try:
            await asyncio.to_thread(bus.close)
        except OSError as e:
            raise TransportError(f"Failed to close I2C bus {self.bus_id}") from e

        logging.info("%s freed (bus:0x%02X)", self.NAME, self.bus_id)

        return self

    async def enable(self) -> TSL2561:
        """電源を入れる。無効な状態では計測値は全て 0 になる"""
        await self.__write_register(reg.Register.CONTROL, reg.CONTROL_POWER_ON)
        return self

    async def disable(self) -> TSL2561:
        await self.__write_register(reg.Register.CONTROL, reg.CONTROL_POWER_OFF)
        return self

    async def is_enabled(self) -> bool:
        return reg.is_power_on(await self.__read_register(reg.Register.CONTROL))

    async def get_id(self) -> reg.ChipId:
        return reg.decode_id(await self.__read_register(reg.Register.ID))

    async def get_broadband(self) -> int:
        return await self.__read_register(reg.Register.CHAN0_LOW, 2)

    async def get_infrared(self) -> int:
        return await self.__read_register(reg.Register.CHAN1_LOW, 2)

    async def get_luminosity(self) -> tuple[int, int]:
        """broadband と infrared のチャンネル値を組で返す"""
        broadband = await self.get_broadband()
        infrared = await self.get_infrared()
        return (broadband, infrared)

    async def get_gain(self) -> Gain:
        return reg.decode_gain(await self.__read_register(reg.Register.TIMING))

    async def set_gain(self, gain: Gain | int) -> TSL2561:
        return await self.configure(gain=gain)

    async def get_integration_time(self) -> IntegrationTime:
        return reg.decode_integration_time(await self.__read_register(reg.Register.TIMING))

    async def set_integration_time(self, integration_time: IntegrationTime | int) -> TSL2561:
        return await self.configure(integration_time=integration_time)

    async def configure(
        self, gain: Gain | int | None = None, integration_time: IntegrationTime | int | None = None
    ) -> TSL2561:
        """TIMING レジスタを読んで、指定されたフィールドだけを書き換える

        Args:
            gain: 新しいゲイン（None なら変更しない）
            integration_time: 新しい積分時間（None なら変更しない）

        Returns:
            自分自身

        Raises:
            ValueError: 範囲外の値が指定された場合
        """
        self.__check_init()

        new_gain = Gain(gain) if gain is not None else None
        new_integration_time = IntegrationTime(integration_time) if integration_time is not None else None

        timing = await self.__read_register(reg.Register.TIMING)
        value = timing
        if new_gain is not None:
            value = reg.encode_gain(value, new_gain)
        if new_integration_time is not None:
            value = reg.encode_integration_time(value, new_integration_time)

        logging.debug("Update TIMING register: 0x%02X -> 0x%02X", timing, value)

        await self.__write_register(reg.Register.TIMING, value)

        return self

    async def get_lux(self) -> float | None:
        """照度を計測する

        Returns:
            照度。飽和している場合などで計算できない場合は None

        Raises:
            ValueError: 積分時間が MANUAL に設定されている場合
        """
        self.__check_init()

        broadband, infrared = await self.get_luminosity()
        integration_time = await self.get_integration_time()
        gain = await self.get_gain()

        return compute_lux(broadband, infrared, gain, integration_time)

    async def _ping_impl(self) -> bool:
        chip_id = await self.get_id()
        return chip_id.part_number in self.PART_NUMBER_LIST

    async def get_value(self) -> float | None:
        return await self.get_lux()

    async def get_value_map(self) -> dict[str, float | None]:
        value = await self.get_value()

        return {"lux": value}

    def __check_init(self) -> i2cbus.I2CBUS:
        if self.state is not State.READY or self.i2cbus is None:
            raise NotInitializedError(f"{self.NAME} I2C bus is not initialized, call init() first")
        return self.i2cbus

    def __transfer(self, bus: i2cbus.I2CBUS, command: int, count: int) -> list[int]:
        bus.write(self.dev_addr, [command])
        return bus.read(self.dev_addr, count)

    async def __read_register(self, register: reg.Register, count: int = 1) -> int:
        bus = self.__check_init()

        try:
            data = await asyncio.to_thread(self.__transfer, bus, reg.command_byte(register, count), count)
        except OSError as e:
            raise TransportError(f"Failed to read {register.name} register") from e

        return reg.decode(data)

    async def __write_register(self, register: reg.Register, value: int) -> None:
        bus = self.__check_init()

        try:
            await asyncio.to_thread(bus.write, self.dev_addr, reg.write_frame(register, value))
        except OSError as e:
            raise TransportError(f"Failed to write {register.name} register") from e


if __name__ == "__main__":
    # TEST Code
    import docopt

    import luxmeter.logger

    assert __doc__ is not None
    args = docopt.docopt(__doc__)
    bus_id = int(args["-b"], 0)
    dev_addr = int(args["-d"], 0)
    debug_mode = args["-D"]

    luxmeter.logger.init("test", level=logging.DEBUG if debug_mode else logging.INFO)

    async def main() -> None:
        async with TSL2561(bus_id=bus_id, dev_addr=dev_addr) as sensor:
            ping = await sensor.ping()
            logging.info("PING: %s", ping)
            if ping:
                await sensor.enable()
                await asyncio.sleep(0.5)
                logging.info("VALUE: %s", await sensor.get_value_map())

    asyncio.run(main())
