"""
どこで: `common` の型定義。
何を: Vec3Like/Vec4Like などの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に配置して循環と分散定義を避けるため。
"""

from __future__ import annotations

from typing import Sequence

Vec3Tuple = tuple[float, float, float]
Vec4Tuple = tuple[float, float, float, float]
Vec4Like = Sequence[float]


__all__ = ["Vec3Tuple", "Vec4Tuple", "Vec4Like"]
