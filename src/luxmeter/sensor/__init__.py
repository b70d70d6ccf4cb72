# noqa: D104
from __future__ import annotations

import logging
import pathlib
from typing import Any

import luxmeter.sensor
import luxmeter.sensor.i2cbus

from .base import I2CSensorBase
from .tsl2561 import TSL2561 as tsl2561  # noqa: N811

__all__ = [
    "i2cbus",
    "tsl2561",
]


async def load(sensor_def_list: list[dict[str, Any]]) -> list[I2CSensorBase]:
    logging.info("Load drivers...")

    sensor_list = []
    for sensor_def in sensor_def_list:
        logging.info("Load %s driver", sensor_def["name"])

        param = {}
        if "i2c_bus" in sensor_def:
            param["bus_id"] = getattr(luxmeter.sensor.i2cbus.I2CBUS, sensor_def["i2c_bus"])
            dev_file = pathlib.Path(f"/dev/i2c-{param['bus_id']}")
            if not dev_file.exists():
                logging.warning("I2C bus %s (%s) does NOT exist. skipping.", sensor_def["i2c_bus"], dev_file)
                continue

        if "dev_addr" in sensor_def:
            param["dev_addr"] = sensor_def["dev_addr"]

        sensor = getattr(luxmeter.sensor, sensor_def["name"])(**param)
        await sensor.init()

        sensor.required = sensor_def.get("required", False)
        sensor_list.append(sensor)

    return sensor_list


def sensor_info(sensor: I2CSensorBase) -> str:
    if sensor.TYPE == "I2C":
        return f"{sensor.NAME} (I2C: 0x{sensor.dev_addr:02X})"
    else:
        return f"{sensor.NAME} ({sensor.TYPE})"


async def ping(sensor_list: list[I2CSensorBase]) -> list[I2CSensorBase]:
    logging.info("Check sensor existences...")

    active_sensor_list = []
    for sensor in sensor_list:
        if await sensor.ping():
            logging.info("Sensor %s exists.", sensor.NAME)
            active_sensor_list.append(sensor)
        elif sensor.required:
            logging.error("Sensor %s does NOT exist.", sensor.NAME)
            raise RuntimeError(f"The required sensor {sensor.NAME} could not be found.")
        else:
            logging.warning("Sensor %s does NOT exist. Ignored.", sensor.NAME)

    logging.info("Active sensor list: %s", ", ".join([sensor_info(sensor) for sensor in active_sensor_list]))
    return active_sensor_list


async def sense(sensor_list: list[I2CSensorBase]) -> tuple[dict[str, Any], bool]:
    value_map: dict[str, Any] = {}
    is_success = True
    for sensor in sensor_list:
        try:
            logging.info("Measurement is taken using %s", sensor.NAME)
            val = await sensor.get_value_map()
            logging.info(val)
            value_map.update(val)
        except Exception:  # noqa: PERF203
            logging.exception("Failed to measure using %s", sensor.NAME)
            is_success = False

    logging.info("Measured results: %s", value_map)

    return (value_map, is_success)
