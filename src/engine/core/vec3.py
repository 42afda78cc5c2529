"""
どこで: `engine.core` の 3 成分ベクトル。
何を: カメラ位置/注視点/上方向やライト方向を表す不変値型 `Vec3` を提供。
なぜ: 行列コンストラクタ（LookAt/回転軸/平行移動）とユニフォーム詰めの入力を一種類に揃えるため。

方針:
- すべての演算は新しいインスタンスを返す純関数（副作用ゼロ）。
- 入力検証は行わない。ゼロベクトルの `normalize()` は NaN/Inf をそのまま伝播する。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from common.types import Vec4Tuple


@dataclass(frozen=True)
class Vec3:
    """不変な 3 成分ベクトル（右手系）。"""

    x: float
    y: float
    z: float

    @classmethod
    def coerce(cls, value: "Vec3 | Sequence[float]") -> "Vec3":
        """`Vec3` または長さ 3 のシーケンスを `Vec3` に揃える。"""
        if isinstance(value, Vec3):
            return value
        return cls(float(value[0]), float(value[1]), float(value[2]))

    # ── 基本演算（すべて純粋） ────────
    def add(self, v: "Vec3") -> "Vec3":
        return Vec3(self.x + v.x, self.y + v.y, self.z + v.z)

    def sub(self, v: "Vec3") -> "Vec3":
        return Vec3(self.x - v.x, self.y - v.y, self.z - v.z)

    def scale(self, s: float) -> "Vec3":
        return Vec3(self.x * s, self.y * s, self.z * s)

    def dot(self, v: "Vec3") -> float:
        return self.x * v.x + self.y * v.y + self.z * v.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> "Vec3":
        """単位ベクトルを返す。

        Notes
        -----
        長さ 0 の場合は `1/0 = inf` を経由して成分が NaN になる。呼び出し側で避けること。
        Python の `float` 除算は例外を送出するため、逆数のみ IEEE 754 の規則で計算する。
        """
        with np.errstate(divide="ignore", invalid="ignore"):
            inv = float(np.float64(1.0) / np.float64(self.length()))
        return self.scale(inv)

    def cross(self, v: "Vec3") -> "Vec3":
        return Vec3(
            self.y * v.z - self.z * v.y,
            self.z * v.x - self.x * v.z,
            self.x * v.y - self.y * v.x,
        )

    def to_vec4(self, w: float = 0.0) -> Vec4Tuple:
        """ユニフォームの `vec4<f32>` 用に `(x, y, z, w)` を返す。"""
        return (self.x, self.y, self.z, float(w))

    # 演算子糖衣
    def __add__(self, other: "Vec3") -> "Vec3":
        return self.add(other)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return self.sub(other)

    def __mul__(self, s: float) -> "Vec3":
        return self.scale(s)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z


__all__ = ["Vec3"]
