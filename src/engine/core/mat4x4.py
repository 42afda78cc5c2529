"""
どこで: `engine.core` の 4x4 変換行列。
何を: ワールド/ビュー/射影行列の名前付きコンストラクタ、合成 `mul`、転置、回転抽出、
      および GPU ユニフォーム向けのバイト列化を持つ不変値型 `Mat4x4` を提供。
なぜ: 毎フレームの WVP 合成とユニフォーム転送を、規約（行ベクトル/列優先格納/逆 Z）を
      一箇所に固定した上で行うため。

規約（不変条件）:
- 行ベクトル規約: 点は左から掛ける `v' = v * M`。合成は適用順に左から並べる
  （`wvp = world * view * projection`）。シェーダ側も `position * wvp` を前提とする。
- 格納は列優先: 数学的に (row=r, col=c) にある要素は `storage[c * 4 + r]`。
  コンストラクタ引数は人が読みやすい行優先で受け取り、`_rows_to_storage()` の一箇所だけで転置する。
- 逆 Z 射影: `perspective_fov_rh` は near → 深度 1.0、far → 深度 0.0 に写す。
- 不変: すべての演算は新しいインスタンスを返し、内部配列は書き込み不可。

エラー方針:
- 入力検証・ログ・クランプは一切行わない。退化入力（eye == at、ゼロ軸、far == near 等）は
  IEEE 754 に従って NaN/Inf として後段へ伝播する。

直感図（格納順）:

    # 行優先の引数           列優先の storage
    #  [a b c d]             [a e i m,
    #  [e f g h]     →        b f j n,
    #  [i j k l]              c g k o,
    #  [m n o p]              d h l p]
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .vec3 import Vec3

BYTE_LENGTH = 16 * 4  # float32 x 16

RowsLike = np.ndarray | Sequence[Sequence[float]]
Vec3Like = Vec3 | Sequence[float]


def _rows_to_storage(rows: RowsLike) -> np.ndarray:
    """行優先 4x4 → 列優先 float32 (16,)（唯一の転置点）。"""
    with np.errstate(over="ignore", invalid="ignore"):
        a = np.asarray(rows, dtype=np.float64).reshape(4, 4)
        storage = np.ascontiguousarray(a.T, dtype=np.float32).reshape(16)
    storage.setflags(write=False)
    return storage


def _div(a: float, b: float) -> float:
    # ゼロ除算も IEEE 754 のまま（inf/nan）にする
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return float(np.float64(a) / np.float64(b))


def _cos_sin(rad: float) -> tuple[float, float]:
    # math.cos(inf) は例外になるため numpy で NaN を返させる
    with np.errstate(invalid="ignore"):
        r = np.float64(rad)
        return float(np.cos(r)), float(np.sin(r))


def _tan(rad: float) -> float:
    with np.errstate(invalid="ignore"):
        return float(np.tan(np.float64(rad)))


class Mat4x4:
    """列優先で格納する不変 4x4 行列（行ベクトル規約）。

    生成は行優先の 4x4 入れ子シーケンス、または名前付きコンストラクタで行う。

    >>> m = Mat4x4.translation(Vec3(1.0, 2.0, 3.0))
    >>> m.apply((0.0, 0.0, 0.0, 1.0)).tolist()
    [1.0, 2.0, 3.0, 1.0]
    """

    __slots__ = ("_m",)

    _m: np.ndarray

    def __init__(self, rows: RowsLike) -> None:
        self._m = _rows_to_storage(rows)

    # ── 名前付きコンストラクタ（引数は行優先で記述） ───────────
    @classmethod
    def identity(cls) -> "Mat4x4":
        return cls(
            [
                [1, 0, 0, 0],
                [0, 1, 0, 0],
                [0, 0, 1, 0],
                [0, 0, 0, 1],
            ]
        )

    @classmethod
    def translation(cls, t: Vec3Like) -> "Mat4x4":
        t = Vec3.coerce(t)
        return cls(
            [
                [1, 0, 0, 0],
                [0, 1, 0, 0],
                [0, 0, 1, 0],
                [t.x, t.y, t.z, 1],
            ]
        )

    @classmethod
    def scale(cls, s: Vec3Like) -> "Mat4x4":
        s = Vec3.coerce(s)
        return cls(
            [
                [s.x, 0, 0, 0],
                [0, s.y, 0, 0],
                [0, 0, s.z, 0],
                [0, 0, 0, 1],
            ]
        )

    @classmethod
    def rotation_x(cls, rad: float) -> "Mat4x4":
        c, s = _cos_sin(rad)
        return cls(
            [
                [1, 0, 0, 0],
                [0, c, s, 0],
                [0, -s, c, 0],
                [0, 0, 0, 1],
            ]
        )

    @classmethod
    def rotation_y(cls, rad: float) -> "Mat4x4":
        c, s = _cos_sin(rad)
        return cls(
            [
                [c, 0, -s, 0],
                [0, 1, 0, 0],
                [s, 0, c, 0],
                [0, 0, 0, 1],
            ]
        )

    @classmethod
    def rotation_z(cls, rad: float) -> "Mat4x4":
        c, s = _cos_sin(rad)
        return cls(
            [
                [c, s, 0, 0],
                [-s, c, 0, 0],
                [0, 0, 1, 0],
                [0, 0, 0, 1],
            ]
        )

    @classmethod
    def rotation_axis(cls, axis: Vec3Like, rad: float) -> "Mat4x4":
        """任意軸回転（Rodrigues）。軸は内部で正規化する。

        交差項の符号は上三角が `+axis.k * s`、下三角が `-axis.k * s`。
        `rotation_x/y/z` に軸 (1,0,0)/(0,1,0)/(0,0,1) を与えた場合と一致する。
        """
        a = Vec3.coerce(axis).normalize()
        c, s = _cos_sin(rad)
        k = 1 - c
        xx = a.x * a.x
        xy = a.x * a.y
        xz = a.x * a.z
        yy = a.y * a.y
        yz = a.y * a.z
        zz = a.z * a.z
        return cls(
            [
                [xx * k + c, xy * k + a.z * s, xz * k - a.y * s, 0],
                [xy * k - a.z * s, yy * k + c, yz * k + a.x * s, 0],
                [xz * k + a.y * s, yz * k - a.x * s, zz * k + c, 0],
                [0, 0, 0, 1],
            ]
        )

    @classmethod
    def look_at_rh(cls, eye: Vec3Like, at: Vec3Like, up: Vec3Like) -> "Mat4x4":
        """右手系のビュー行列。カメラは -Z 方向を向く。

        Parameters
        ----------
        eye : Vec3Like
            カメラ位置。
        at : Vec3Like
            注視点。`eye` と一致すると全要素 NaN になる。
        up : Vec3Like
            上方向のヒント（カメラの実際の上方向ではない）。

        Returns
        -------
        Mat4x4
            ワールド → ビュー空間の変換。
        """
        eye = Vec3.coerce(eye)
        at = Vec3.coerce(at)
        up = Vec3.coerce(up)
        z = eye.sub(at).normalize()
        x = up.cross(z).normalize()
        y = z.cross(x)
        return cls(
            [
                [x.x, y.x, z.x, 0],
                [x.y, y.y, z.y, 0],
                [x.z, y.z, z.z, 0],
                [-x.dot(eye), -y.dot(eye), -z.dot(eye), 1],
            ]
        )

    @classmethod
    def perspective_fov_rh(
        cls, fov: float, aspect: float, near: float, far: float
    ) -> "Mat4x4":
        """右手系・逆 Z の透視射影行列。

        Parameters
        ----------
        fov : float
            垂直画角（ラジアン）。
        aspect : float
            幅 / 高さ。
        near, far : float
            クリップ面距離（正値）。near は深度 1.0、far は深度 0.0 に写る。

        Notes
        -----
        深度テストは `greater-equal`、深度クリア値は 0.0 を前提とする。
        """
        scale_y = _div(1.0, _tan(fov * 0.5))
        scale_x = _div(scale_y, aspect)
        scale_z = _div(near, far - near)
        trans_z = _div(near * far, far - near)
        return cls(
            [
                [scale_x, 0, 0, 0],
                [0, scale_y, 0, 0],
                [0, 0, scale_z, -1],
                [0, 0, trans_z, 0],
            ]
        )

    # ── 演算（すべて純粋） ────────────
    def mul(self, other: "Mat4x4") -> "Mat4x4":
        """行列積 `self * other`（`v * C == (v * self) * other`）。

        列優先の格納から行優先の値を取り出し、float64 で k=0..3 の順に和を取って float32 へ戻す。
        """
        a = self.to_rows().astype(np.float64)
        b = other.to_rows().astype(np.float64)
        with np.errstate(over="ignore", invalid="ignore"):
            c = (
                a[:, 0:1] * b[0:1, :]
                + a[:, 1:2] * b[1:2, :]
                + a[:, 2:3] * b[2:3, :]
                + a[:, 3:4] * b[3:4, :]
            )
        return Mat4x4(c)

    def transpose(self) -> "Mat4x4":
        # storage を行優先の引数として読み直すと転置になる
        return Mat4x4(self._m.reshape(4, 4))

    def rotation(self) -> "Mat4x4":
        """左上 3x3 のみを残した行列（平行移動/射影成分は 0、w=1）。

        スケールを含まない行列が前提（検証はしない）。直交行列では転置が逆行列になるため、
        `world.rotation().transpose()` をライト/視線方向のオブジェクト空間への変換に用いる。
        """
        rows = np.eye(4, dtype=np.float64)
        rows[:3, :3] = self.to_rows()[:3, :3]
        return Mat4x4(rows)

    def apply(self, v: Sequence[float]) -> np.ndarray:
        """行ベクトル `v (4,)` に右から掛けた結果 `v * M` を float64 (4,) で返す。"""
        a = self.to_rows().astype(np.float64)
        vv = np.asarray(v, dtype=np.float64)
        with np.errstate(over="ignore", invalid="ignore"):
            return vv[0] * a[0] + vv[1] * a[1] + vv[2] * a[2] + vv[3] * a[3]

    # ── アクセサ ──────────────────────
    def as_array(self) -> np.ndarray:
        """列優先 float32 (16,) の読み取り専用ビューを返す。"""
        view = self._m.view()
        view.setflags(write=False)
        return view

    def to_rows(self) -> np.ndarray:
        """行優先 float32 (4, 4) のコピーを返す。"""
        return self._m.reshape(4, 4).T.copy()

    def __getitem__(self, index: tuple[int, int]) -> float:
        r, c = index
        return float(self._m[c * 4 + r])

    # ── バイト列化 ────────────────────
    @property
    def byte_length(self) -> int:
        return BYTE_LENGTH

    def tobytes(self) -> bytes:
        """列優先の float32 x 16（ネイティブエンディアン）。"""
        return self._m.tobytes()

    def __bytes__(self) -> bytes:
        return self.tobytes()

    def write_into(self, buffer: bytearray | memoryview | np.ndarray, offset: int = 0) -> None:
        """外部所有のバッファ `buffer` の `[offset, offset + 64)` にのみ書き込む。

        `buffer` は書き込み可能な C 連続のバッファ（bytearray/memoryview/ndarray 等）。
        参照は保持しない。
        """
        view = memoryview(buffer).cast("B")
        view[offset : offset + BYTE_LENGTH] = self._m.tobytes()

    # ── 比較/表示 ──────────────────────
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mat4x4):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    def __hash__(self) -> int:
        # -0.0 と 0.0 は等価なので Python float のハッシュで畳む
        return hash(tuple(self._m.tolist()))

    def allclose(self, other: "Mat4x4", *, atol: float = 1e-5) -> bool:
        return bool(np.allclose(self._m, other._m, rtol=0.0, atol=atol))

    # 演算子糖衣
    def __matmul__(self, other: "Mat4x4") -> "Mat4x4":
        """糖衣: `mul` のエイリアス。"""
        return self.mul(other)

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        rows = self.to_rows()
        body = ", ".join("[" + ", ".join(f"{v:.4g}" for v in row) + "]" for row in rows)
        return f"Mat4x4([{body}])"


__all__ = ["Mat4x4", "BYTE_LENGTH"]
