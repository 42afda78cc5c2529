"""
どこで: `api.camera`（カメラ/ライティングの値オブジェクト）。
何を: eye/at/up と画角・クリップ面からビュー/射影/VP 行列を組み立てる `Camera` と、
      ライト方向・環境光色を保持する `Lighting` を提供。
なぜ: サンプルシーンごとに繰り返される「LookAt → 透視射影 → view * projection」の手順と
      構成ファイルからの既定値解決を一箇所にまとめるため。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

from common.types import Vec3Tuple
from engine.core.mat4x4 import Mat4x4
from engine.core.vec3 import Vec3
from util.angles import deg2rad, rad2deg
from util.color import hsva, normalize_color

DEFAULT_EYE: Vec3Tuple = (0.0, 0.0, 12.0)
DEFAULT_AT: Vec3Tuple = (0.0, 0.0, 0.0)
DEFAULT_UP: Vec3Tuple = (0.0, 1.0, 0.0)
DEFAULT_FOV_DEG = 45.0
DEFAULT_NEAR = 0.1
DEFAULT_FAR = 100.0

DEFAULT_LIGHT_DIR: Vec3Tuple = (-0.5, 0.5, 0.5)
DEFAULT_AMBIENT: Vec3Tuple = (0.1, 0.1, 0.1)


def _section(cfg: Mapping[str, Any] | None, key: str) -> Mapping[str, Any]:
    if not cfg:
        return {}
    sec = cfg.get(key, {})
    if sec is None:
        return {}
    if not isinstance(sec, Mapping):
        raise ValueError(f"config section '{key}' must be a mapping, got: {type(sec).__name__}")
    return sec


def _vec3_from(value: Any, key: str) -> Vec3:
    try:
        if len(value) != 3:
            raise ValueError
        return Vec3.coerce(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"'{key}' must be a sequence of 3 numbers, got: {value!r}") from e


def _ambient_from_hsva(value: Any) -> Vec3Tuple:
    try:
        h, s, v, a = (float(x) for x in value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"'lighting.ambient_hsva' must be [h, s, v, a], got: {value!r}") from e
    rgba = hsva(h, s, v, a)
    if rgba is None:
        raise ValueError(f"'lighting.ambient_hsva' s/v/a must be <= 1, got: {value!r}")
    return (rgba[0], rgba[1], rgba[2])


@dataclass(frozen=True)
class Camera:
    """右手系の透視カメラ。

    Attributes
    ----------
    eye, at, up : Vec3
        カメラ位置・注視点・上方向ヒント。
    fov_rad : float
        垂直画角（ラジアン）。
    aspect : float
        幅 / 高さ。
    near, far : float
        クリップ面。逆 Z のため near が深度 1.0、far が深度 0.0。
    """

    eye: Vec3
    at: Vec3
    up: Vec3
    fov_rad: float
    aspect: float
    near: float = DEFAULT_NEAR
    far: float = DEFAULT_FAR

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any] | None, *, aspect: float) -> "Camera":
        """構成辞書の `camera:` セクションから生成する。

        キー: `eye`, `at`, `up`（3 要素）, `fov_deg`, `near`, `far`。未指定は既定値。
        形式が不正な場合は `ValueError`。
        """
        sec = _section(cfg, "camera")
        try:
            fov_deg = float(sec.get("fov_deg", DEFAULT_FOV_DEG))
            near = float(sec.get("near", DEFAULT_NEAR))
            far = float(sec.get("far", DEFAULT_FAR))
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid camera config: {dict(sec)!r}") from e
        return cls(
            eye=_vec3_from(sec.get("eye", DEFAULT_EYE), "camera.eye"),
            at=_vec3_from(sec.get("at", DEFAULT_AT), "camera.at"),
            up=_vec3_from(sec.get("up", DEFAULT_UP), "camera.up"),
            fov_rad=deg2rad(fov_deg),
            aspect=float(aspect),
            near=near,
            far=far,
        )

    @property
    def fov_deg(self) -> float:
        return rad2deg(self.fov_rad)

    def with_aspect(self, aspect: float) -> "Camera":
        """ウィンドウサイズ変更時などにアスペクト比だけ差し替えたコピーを返す。"""
        return replace(self, aspect=float(aspect))

    def view(self) -> Mat4x4:
        return Mat4x4.look_at_rh(self.eye, self.at, self.up)

    def projection(self) -> Mat4x4:
        return Mat4x4.perspective_fov_rh(self.fov_rad, self.aspect, self.near, self.far)

    def view_projection(self) -> Mat4x4:
        """`view * projection`（行ベクトル規約のため適用順に左から）。"""
        return self.view().mul(self.projection())

    def eye_dir(self) -> Vec3:
        """原点から見たカメラ方向（正規化済み）。"""
        return self.eye.normalize()


@dataclass(frozen=True)
class Lighting:
    """平行光源の方向と環境光色。`light_dir` は正規化済みで保持する。"""

    light_dir: Vec3
    ambient_color: Vec3

    @classmethod
    def create(
        cls,
        light_dir: Vec3 | Vec3Tuple = DEFAULT_LIGHT_DIR,
        ambient_color: Vec3 | Vec3Tuple = DEFAULT_AMBIENT,
    ) -> "Lighting":
        return cls(
            light_dir=Vec3.coerce(light_dir).normalize(),
            ambient_color=Vec3.coerce(ambient_color),
        )

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any] | None) -> "Lighting":
        """構成辞書の `lighting:` セクションから生成する。

        `ambient_color` は `util.color.normalize_color` の受理形式（Hex/0–1/0–255）を受け付ける。
        `ambient_hsva: [h, s, v, a]`（h は度）があればそちらを優先する。
        """
        sec = _section(cfg, "lighting")
        light_dir = _vec3_from(sec.get("light_dir", DEFAULT_LIGHT_DIR), "lighting.light_dir")
        if "ambient_hsva" in sec:
            r, g, b = _ambient_from_hsva(sec["ambient_hsva"])
        else:
            r, g, b, _a = normalize_color(sec.get("ambient_color", DEFAULT_AMBIENT))
        return cls.create(light_dir, (r, g, b))


__all__ = ["Camera", "Lighting"]
