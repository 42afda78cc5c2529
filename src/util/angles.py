"""
どこで: `util.angles`。
何を: 度 ↔ ラジアン変換。
なぜ: 行列コンストラクタはラジアンのみを受け取るため、設定値（度）からの変換を呼び出し側に置く。
"""

from __future__ import annotations

import math


def deg2rad(degree: float) -> float:
    return degree * math.pi / 180


def rad2deg(rad: float) -> float:
    return rad * 180 / math.pi


__all__ = ["deg2rad", "rad2deg"]
