#!/usr/bin/env python3
"""
TSL2561 の情報を表示した後、定期的に照度を計測します。

Usage:
  luxmeter-measure [-c CONFIG] [-b BUS] [-d DEV_ADDR] [-g GAIN] [-t TIME] [-i INTERVAL] [-n COUNT] [-D]

Options:
  -c CONFIG         : CONFIG を設定ファイルとして読み込みます。
  -b BUS            : I2C バス番号。(省略時: 0x01)
  -d DEV_ADDR       : デバイスアドレス(7bit)。(省略時: 0x39)
  -g GAIN           : ゲイン (low / high)。省略時はセンサーの設定のまま。
  -t TIME           : 積分時間 (13.7ms / 101ms / 402ms)。省略時はセンサーの設定のまま。
  -i INTERVAL       : 計測間隔 [秒]。(省略時: 1)
  -n COUNT          : 計測回数。0 なら止めるまで計測し続けます。(省略時: 0)
  -D                : デバッグモードで動作します。
"""

from __future__ import annotations

import asyncio
import logging
import pathlib
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

import docopt

import luxmeter.config
import luxmeter.logger
from luxmeter.sensor import i2cbus
from luxmeter.sensor.lux import Gain, IntegrationTime
from luxmeter.sensor.tsl2561 import TSL2561

GAIN_NAME: dict[str, Gain] = {"low": Gain.LOW, "high": Gain.HIGH}
GAIN_LABEL: dict[Gain, str] = {Gain.LOW: "1x", Gain.HIGH: "16x"}

INTEGRATION_TIME_NAME: dict[str, IntegrationTime] = {
    "13.7ms": IntegrationTime.T_13_7MS,
    "101ms": IntegrationTime.T_101MS,
    "402ms": IntegrationTime.T_402MS,
}
INTEGRATION_TIME_LABEL: dict[IntegrationTime, str] = {
    **{value: name for name, value in INTEGRATION_TIME_NAME.items()},
    IntegrationTime.MANUAL: "manual",
}


@dataclass
class Setting:
    bus_id: int = i2cbus.I2CBUS.ARM
    dev_addr: int = TSL2561.DEV_ADDR
    gain: Gain | None = None
    integration_time: IntegrationTime | None = None
    interval_sec: float = 1.0
    count: int = 0
    log_dir_path: pathlib.Path | None = None


def _parse_choice(name: str, value: str, choice: dict[str, Any]) -> Any:
    if value not in choice:
        raise ValueError(f"Unknown {name}: {value} (choose from {', '.join(choice)})")
    return choice[value]


def build_setting(config: dict[str, Any], args: dict[str, Any]) -> Setting:
    """設定ファイルの内容にコマンドライン引数を上書きして設定を作る"""
    setting = Setting()

    bus = args.get("-b") or luxmeter.config.get_data(config, ["sensor", "bus"])
    if bus is not None:
        setting.bus_id = int(bus, 0) if isinstance(bus, str) else bus

    dev_addr = args.get("-d") or luxmeter.config.get_data(config, ["sensor", "dev_addr"])
    if dev_addr is not None:
        setting.dev_addr = int(dev_addr, 0) if isinstance(dev_addr, str) else dev_addr

    gain = args.get("-g") or luxmeter.config.get_data(config, ["sensor", "gain"])
    if gain is not None:
        setting.gain = _parse_choice("gain", gain, GAIN_NAME)

    integration_time = args.get("-t") or luxmeter.config.get_data(config, ["sensor", "integration_time"])
    if integration_time is not None:
        setting.integration_time = _parse_choice("integration time", integration_time, INTEGRATION_TIME_NAME)

    interval_sec = args.get("-i") or luxmeter.config.get_data(config, ["measure", "interval_sec"])
    if interval_sec is not None:
        setting.interval_sec = float(interval_sec)
    if setting.interval_sec <= 0:
        raise ValueError(f"Interval must be positive: {setting.interval_sec}")

    count = args.get("-n") or luxmeter.config.get_data(config, ["measure", "count"])
    if count is not None:
        setting.count = int(count)
    if setting.count < 0:
        raise ValueError(f"Count must not be negative: {setting.count}")

    log_dir = luxmeter.config.get_data(config, ["logging", "dir"])
    if log_dir is not None:
        setting.log_dir_path = pathlib.Path(config.get("base_dir", pathlib.Path.cwd()), log_dir)

    return setting


async def get_info(sensor: TSL2561) -> dict[str, Any]:
    chip_id = await sensor.get_id()

    return {
        "part_number": chip_id.part_number,
        "revision_number": chip_id.revision_number,
        "gain": await sensor.get_gain(),
        "integration_time": await sensor.get_integration_time(),
        "enabled": await sensor.is_enabled(),
    }


def format_info(info: dict[str, Any]) -> str:
    return "\n".join(
        [
            f"Sensor {TSL2561.NAME}",
            f" Part number : {info['part_number']}",
            f" Revision number : {info['revision_number']}",
            f" Gain : {GAIN_LABEL[info['gain']]}",
            f" Integration Time : {INTEGRATION_TIME_LABEL[info['integration_time']]}",
            f" Enabled : {'yes' if info['enabled'] else 'no'}",
        ]
    )


async def measure(sensor: TSL2561, interval_sec: float, count: int = 0) -> AsyncIterator[dict[str, Any]]:
    """interval_sec 毎に計測する。count が 0 なら無限に計測する"""
    i = 0
    while True:
        broadband, infrared = await sensor.get_luminosity()
        lux = await sensor.get_lux()

        yield {"broadband": broadband, "infrared": infrared, "lux": lux}

        i += 1
        if count != 0 and i >= count:
            return

        await asyncio.sleep(interval_sec)


async def execute(setting: Setting) -> None:
    async with TSL2561(bus_id=setting.bus_id, dev_addr=setting.dev_addr) as sensor:
        info = await get_info(sensor)
        logging.info("\n%s", format_info(info))

        if not info["enabled"]:
            await sensor.enable()

        if (setting.gain is not None) or (setting.integration_time is not None):
            await sensor.configure(gain=setting.gain, integration_time=setting.integration_time)

        async for value in measure(sensor, setting.interval_sec, setting.count):
            logging.info(
                "Measure : Broadband %d, Infrared %d, Lux %s", value["broadband"], value["infrared"], value["lux"]
            )


def main(argv: list[str] | None = None) -> None:
    assert __doc__ is not None  # noqa: S101
    args = docopt.docopt(__doc__, argv=argv)

    debug_mode = args["-D"]

    luxmeter.logger.init("luxmeter", level=logging.DEBUG if debug_mode else logging.INFO)

    config: dict[str, Any] = {}
    if args["-c"] is not None:
        config = luxmeter.config.load(args["-c"])

    setting = build_setting(config, args)

    if setting.log_dir_path is not None:
        luxmeter.logger.init(
            "luxmeter", level=logging.DEBUG if debug_mode else logging.INFO, log_dir_path=setting.log_dir_path
        )

    try:
        asyncio.run(execute(setting))
    except KeyboardInterrupt:
        logging.info("Stopped.")


if __name__ == "__main__":
    main()
