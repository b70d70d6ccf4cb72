#!/usr/bin/env python3
"""センサー関連の例外クラス定義"""

from __future__ import annotations


class SensorError(Exception):
    """センサー関連エラーの基底クラス"""

    pass


class NotInitializedError(SensorError):
    """init 前、もしくは free 後にセンサーを操作しようとしたエラー"""

    pass


class TransportError(SensorError):
    """I2C バスのオープン・読み書きに失敗したエラー

    元の例外は __cause__ に保持される。
    """

    pass
