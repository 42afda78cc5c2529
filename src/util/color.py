"""
どこで: `util.color`。
何を: 色指定の正規化/変換（Hex, RGBA 0–1, RGBA 0–255）と HSV → RGBA 変換を一元化。
なぜ: 環境光色などの設定値と頂点カラー生成で、同一の受理仕様とエラーメッセージを提供するため。
"""

from __future__ import annotations

import math
from typing import Sequence

from common.types import Vec4Tuple


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def hsva(h: float, s: float, v: float, a: float) -> Vec4Tuple | None:
    """HSV(+α) を RGBA(0–1) に変換する。

    - `h` は度（360 で一周、負値も周期的に扱う）。
    - `s`, `v`, `a` のいずれかが 1 を超える場合は `None`。
    - `s == 0` は無彩色 `(v, v, v, a)`。
    """
    if s > 1 or v > 1 or a > 1:
        return None
    if s == 0:
        return (v, v, v, a)
    th = h % 360
    i = int(math.floor(th / 60))
    f = th / 60 - i
    m = v * (1 - s)
    n = v * (1 - s * f)
    k = v * (1 - s * (1 - f))
    r = (v, n, m, m, k, v, v)[i]
    g = (k, v, v, n, m, m, k)[i]
    b = (m, m, k, v, v, n, m)[i]
    return (r, g, b, a)


def parse_hex_color_str(s: str) -> Vec4Tuple:
    """Hex 文字列から RGBA(0–1) を返す。

    受理形式: "#RRGGBB", "#RRGGBBAA", "0xRRGGBB", "0xRRGGBBAA", "RRGGBB", "RRGGBBAA"。
    大文字/小文字は不問。
    """
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB or RRGGBBAA)")
    try:
        r = int(t[0:2], 16)
        g = int(t[2:4], 16)
        b = int(t[4:6], 16)
        a = int(t[6:8], 16) if len(t) == 8 else 255
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


def _as_sequence(value: object) -> Sequence[float | int] | None:
    if isinstance(value, (list, tuple)):
        return value  # type: ignore[return-value]
    return None


def normalize_color(value: object) -> Vec4Tuple:
    """色を RGBA(0–1) へ正規化する。

    - 受理: Hex 文字列, (r,g,b[,a]) （0–1 または 0–255）
    - 返値: (r,g,b,a) （0–1）
    """
    if isinstance(value, str):
        return parse_hex_color_str(value)
    seq = _as_sequence(value)
    if seq is None:
        raise ValueError(f"unsupported color type: {type(value)!r}")
    if len(seq) not in (3, 4):
        raise ValueError("color tuple/list must be length 3 or 4")
    try:
        fseq = [float(x) for x in seq]
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e
    if len(fseq) == 3:
        fseq.append(1.0)
    # まず 0–1 とみなし、範囲外なら 0–255 として丸めてからスケール
    if all(0.0 <= x <= 1.0 for x in fseq):
        r, g, b, a = (_clamp01(x) for x in fseq)
        return (r, g, b, a)
    if len(seq) == 3:
        fseq[3] = 255.0
    r8, g8, b8, a8 = (max(0, min(255, int(round(x)))) for x in fseq)
    return (r8 / 255.0, g8 / 255.0, b8 / 255.0, a8 / 255.0)


__all__ = [
    "hsva",
    "parse_hex_color_str",
    "normalize_color",
]
