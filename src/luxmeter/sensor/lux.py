#!/usr/bin/env python3
"""
TSL2561 の 2 チャンネルの生値から照度 (lux) を計算します。

データシートの T, FN, CL パッケージ向けの近似式を使います。近似式は
ゲイン 16 倍・積分時間 402ms を前提にしているため、それ以外の設定では
結果をスケーリングします。
"""

from __future__ import annotations

import enum
import logging


class Gain(enum.IntEnum):
    LOW = 0  # 1x
    HIGH = 1  # 16x


class IntegrationTime(enum.IntEnum):
    T_13_7MS = 0
    T_101MS = 1
    T_402MS = 2
    MANUAL = 3


GAIN_SCALE: dict[Gain, float] = {Gain.LOW: 16, Gain.HIGH: 1}

TIME_SCALE: dict[IntegrationTime, float] = {
    IntegrationTime.T_13_7MS: 1 / 0.034,
    IntegrationTime.T_101MS: 1 / 0.252,
    IntegrationTime.T_402MS: 1.0,
}

CLIP_THRESHOLD: dict[IntegrationTime, int] = {
    IntegrationTime.T_13_7MS: 4900,
    IntegrationTime.T_101MS: 37000,
    IntegrationTime.T_402MS: 65000,
}


def compute_lux(
    broadband: int, infrared: int, gain: Gain | int, integration_time: IntegrationTime | int
) -> float | None:
    """生値から照度を計算する

    Args:
        broadband: 可視光 + 赤外のチャンネル (CH0) の値
        infrared: 赤外のチャンネル (CH1) の値
        gain: 計測時のゲイン
        integration_time: 計測時の積分時間

    Returns:
        照度。飽和している場合や broadband が 0 の場合は None

    Raises:
        ValueError: 積分時間が MANUAL の場合
    """
    gain = Gain(gain)
    integration_time = IntegrationTime(integration_time)

    if integration_time not in CLIP_THRESHOLD:
        raise ValueError(f"Lux can not be computed with integration time {integration_time.name}")

    threshold = CLIP_THRESHOLD[integration_time]
    if broadband == 0 or broadband > threshold or infrared > threshold:
        logging.debug(
            "Invalid reading (broadband: %d, infrared: %d, threshold: %d)", broadband, infrared, threshold
        )
        return None

    ratio = infrared / broadband

    if ratio <= 0.50:
        lux = 0.0304 * broadband - 0.062 * broadband * ratio**1.4
    elif ratio <= 0.61:
        lux = 0.0224 * broadband - 0.031 * infrared
    elif ratio <= 0.80:
        lux = 0.0128 * broadband - 0.0153 * infrared
    elif ratio <= 1.30:
        lux = 0.00146 * broadband - 0.00112 * infrared
    else:
        lux = 0.0

    lux *= GAIN_SCALE[gain]
    lux *= TIME_SCALE[integration_time]

    return lux
