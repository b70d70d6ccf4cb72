#!/usr/bin/env python3
"""
TSL2561 のレジスタアクセスに使うバイト列の生成と、応答の解釈を行います。

コマンドバイトは 0x80 | レジスタアドレス で、2 バイト読み出し時は
ワードモードのビット (0x20) を立てます。
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from luxmeter.sensor.lux import Gain, IntegrationTime

COMMAND_BIT: int = 0x80
WORD_BIT: int = 0x20

CONTROL_POWER_ON: int = 0x03
CONTROL_POWER_OFF: int = 0x00
CONTROL_POWER_MASK: int = 0x03

GAIN_SHIFT: int = 4
GAIN_MASK: int = 0xEF
INTEGRATION_TIME_MASK: int = 0xFC


class Register(enum.IntEnum):
    CONTROL = 0x00
    TIMING = 0x01
    ID = 0x0A
    CHAN0_LOW = 0x0C
    CHAN1_LOW = 0x0E


@dataclass(frozen=True)
class ChipId:
    part_number: int
    revision_number: int


def command_byte(register: Register | int, count: int = 1) -> int:
    command = COMMAND_BIT | register
    if count > 1:
        command |= WORD_BIT
    return command


def write_frame(register: Register | int, value: int) -> list[int]:
    return [command_byte(register), value & 0xFF]


def decode(data: list[int] | bytes) -> int:
    """読み出した 1 バイトもしくは 2 バイト (リトルエンディアン) を値に変換する

    Args:
        data: レジスタから読み出したバイト列

    Returns:
        1 バイトならその値、2 バイトなら data[1] << 8 | data[0]
    """
    if len(data) == 1:
        return data[0]
    return data[1] << 8 | data[0]


def decode_id(value: int) -> ChipId:
    return ChipId(part_number=(value >> 4) & 0x0F, revision_number=value & 0x0F)


def is_power_on(value: int) -> bool:
    return (value & CONTROL_POWER_MASK) != 0


def decode_gain(timing: int) -> Gain:
    return Gain((timing >> GAIN_SHIFT) & 0x01)


def decode_integration_time(timing: int) -> IntegrationTime:
    return IntegrationTime(timing & 0x03)


def encode_gain(timing: int, gain: Gain) -> int:
    # NOTE: 積分時間のビットは残す
    return (timing & GAIN_MASK) | (gain << GAIN_SHIFT)


def encode_integration_time(timing: int, integration_time: IntegrationTime) -> int:
    # NOTE: ゲインのビットは残す
    return (timing & INTEGRATION_TIME_MASK) | (integration_time & 0x03)
