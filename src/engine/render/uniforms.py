"""
どこで: `engine.render` のユニフォームブロック詰め。
何を: 行列/vec4/スカラーを 1 つのユニフォームバッファへ並べるレイアウト `UniformLayout` と、
      サンプルシーンで使う既定レイアウト（scene/model/wvp）を提供。
なぜ: WGSL の uniform アドレス空間ではベクトル/行列が 16 バイト境界に揃う必要があり、
      オフセット計算を手書きで散在させると転送先のずれに気付けないため。

レイアウト例（`SCENE_WVP_LAYOUT`）:

    # offset  size  field
    #      0    64  wvp            mat4x4<f32>
    #     64    64  iw             mat4x4<f32>
    #    128    16  light_dir      vec4<f32>
    #    144    16  eye_dir        vec4<f32>
    #    160    16  ambient_color  vec4<f32>
    # size = 176
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import numpy as np

from common.settings import get as _get_settings
from common.types import Vec4Like
from engine.core.mat4x4 import BYTE_LENGTH, Mat4x4
from engine.core.vec3 import Vec3

_logger = logging.getLogger(__name__)

# kind -> (size, align)
_KINDS: dict[str, tuple[int, int]] = {
    "mat4x4": (BYTE_LENGTH, 16),
    "vec4": (16, 16),
    "f32": (4, 4),
}

VEC4_ALIGN = 16


def _align_up(value: int, align: int) -> int:
    return (value + align - 1) // align * align


def _as_bytes_view(buffer: Any) -> memoryview:
    return memoryview(buffer).cast("B")


def _check_aligned(offset: int, align: int, what: str) -> None:
    if _get_settings().UNIFORM_ALIGN_CHECK and offset % align != 0:
        raise ValueError(f"{what} のオフセット {offset} が {align} バイト境界に揃っていません")


def write_vec4(buffer: Any, offset: int, v: Vec3 | Vec4Like, w: float = 0.0) -> None:
    """`vec4<f32>` を `buffer[offset : offset + 16]` に書き込む。

    `Vec3` は `(x, y, z, w)` に拡張する（方向ベクトルは既定の `w=0`）。
    4 要素シーケンスはそのまま（`w` は無視）。
    """
    _check_aligned(offset, VEC4_ALIGN, "vec4")
    if isinstance(v, Vec3):
        values = v.to_vec4(w)
    else:
        values = (float(v[0]), float(v[1]), float(v[2]), float(v[3]))
    data = np.asarray(values, dtype=np.float32).tobytes()
    _as_bytes_view(buffer)[offset : offset + 16] = data


def write_mat4x4(buffer: Any, offset: int, m: Mat4x4) -> None:
    """`mat4x4<f32>` を `buffer[offset : offset + 64]` に書き込む。"""
    _check_aligned(offset, 16, "mat4x4")
    m.write_into(buffer, offset)


def write_f32(buffer: Any, offset: int, value: float) -> None:
    _check_aligned(offset, 4, "f32")
    _as_bytes_view(buffer)[offset : offset + 4] = np.float32(value).tobytes()


_WRITERS = {
    "mat4x4": write_mat4x4,
    "vec4": write_vec4,
    "f32": write_f32,
}


@dataclass(frozen=True)
class UniformField:
    """ユニフォームブロック内の 1 フィールド。"""

    name: str
    kind: str


class UniformLayout:
    """フィールド列から各オフセットとブロックサイズを求める不変レイアウト。

    Parameters
    ----------
    fields : Iterable[UniformField | tuple[str, str]]
        宣言順のフィールド。`kind` は `"mat4x4" | "vec4" | "f32"`。

    Raises
    ------
    ValueError
        フィールド名の重複、または未知の `kind`。

    Notes
    -----
    - 各フィールドは自身のアラインメント（mat4x4/vec4 は 16、f32 は 4）へ切り上げて配置する。
    - ブロック全体のサイズは 16 の倍数へ切り上げる。
    """

    __slots__ = ("fields", "offsets", "size")

    fields: tuple[UniformField, ...]
    offsets: dict[str, int]
    size: int

    def __init__(self, fields: Iterable[UniformField | tuple[str, str]]) -> None:
        norm: list[UniformField] = []
        offsets: dict[str, int] = {}
        cursor = 0
        for f in fields:
            field = f if isinstance(f, UniformField) else UniformField(str(f[0]), str(f[1]))
            if field.kind not in _KINDS:
                allowed = ", ".join(sorted(_KINDS))
                raise ValueError(f"unknown uniform kind: {field.kind!r}; allowed={allowed}")
            if field.name in offsets:
                raise ValueError(f"duplicate uniform field: {field.name!r}")
            size, align = _KINDS[field.kind]
            cursor = _align_up(cursor, align)
            offsets[field.name] = cursor
            cursor += size
            norm.append(field)
        self.fields = tuple(norm)
        self.offsets = offsets
        self.size = _align_up(cursor, 16)
        if _get_settings().DEBUG_UNIFORMS:
            _logger.debug(
                "[uniforms] layout %s size=%d",
                ", ".join(f"{f.name}@{offsets[f.name]}" for f in self.fields),
                self.size,
            )

    def offset_of(self, name: str) -> int:
        """フィールドのバイトオフセット（未知の名前は `KeyError`）。"""
        try:
            return self.offsets[name]
        except KeyError:
            raise KeyError(f"unknown uniform field: {name!r}") from None

    def kind_of(self, name: str) -> str:
        for f in self.fields:
            if f.name == name:
                return f.kind
        raise KeyError(f"unknown uniform field: {name!r}")

    def allocate(self) -> bytearray:
        """ゼロ埋めされたブロック分のバッファを返す。"""
        return bytearray(self.size)

    def write(self, buffer: Any, name: str, value: Any, *, base: int = 0) -> None:
        """フィールド `name` を `buffer` の `base + offset` に書き込む。

        他フィールドのバイトには触れない。`base` は 1 つのバッファに複数ブロックを並べる場合の先頭位置。
        """
        kind = self.kind_of(name)
        offset = base + self.offset_of(name)
        if _get_settings().DEBUG_UNIFORMS:
            _logger.debug("[uniforms] write %s (%s) at %d", name, kind, offset)
        _WRITERS[kind](buffer, offset, value)

    def pack(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> bytearray:
        """新しいバッファに値を詰めて返す。未指定のフィールドは 0 のまま。"""
        merged: dict[str, Any] = dict(values or {})
        merged.update(kwargs)
        buf = self.allocate()
        for name, value in merged.items():
            self.write(buf, name, value)
        return buf

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        body = ", ".join(f"{f.name}:{f.kind}@{self.offsets[f.name]}" for f in self.fields)
        return f"UniformLayout({body}; size={self.size})"


# サンプルシーンの既定レイアウト
WVP_LAYOUT = UniformLayout([("wvp", "mat4x4")])

SCENE_WVP_LAYOUT = UniformLayout(
    [
        ("wvp", "mat4x4"),
        ("iw", "mat4x4"),
        ("light_dir", "vec4"),
        ("eye_dir", "vec4"),
        ("ambient_color", "vec4"),
    ]
)

SCENE_VP_LAYOUT = UniformLayout(
    [
        ("vp", "mat4x4"),
        ("light_dir", "vec4"),
        ("eye_dir", "vec4"),
        ("ambient_color", "vec4"),
    ]
)

MODEL_LAYOUT = UniformLayout([("w", "mat4x4"), ("iw", "mat4x4")])

LAYOUTS: dict[str, UniformLayout] = {
    "wvp": WVP_LAYOUT,
    "scene-wvp": SCENE_WVP_LAYOUT,
    "scene-vp": SCENE_VP_LAYOUT,
    "model": MODEL_LAYOUT,
}


__all__ = [
    "UniformField",
    "UniformLayout",
    "write_vec4",
    "write_mat4x4",
    "write_f32",
    "WVP_LAYOUT",
    "SCENE_WVP_LAYOUT",
    "SCENE_VP_LAYOUT",
    "MODEL_LAYOUT",
    "LAYOUTS",
]
