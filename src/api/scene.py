"""
どこで: `api.scene`（1 フレーム分の変換とユニフォーム詰め）。
何を: ワールド行列から `wvp` と逆回転 `iw` を求め、scene/model ユニフォームブロックのバイト列を作る。
なぜ: 毎フレームのコールバックが「合成 → 逆回転 → 詰める」を同じ順序・同じレイアウトで行えるようにするため。

使用例:
    scene = Scene.load(aspect=width / height)
    world = Mat4x4.rotation_axis(Vec3(0, 1, 1), rad)
    data = scene.pack_scene_wvp(world)   # -> bytes (176)
    # queue.write_buffer(uniform_buffer, 0, data)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from engine.core.mat4x4 import Mat4x4
from engine.render.uniforms import MODEL_LAYOUT, SCENE_VP_LAYOUT, SCENE_WVP_LAYOUT, WVP_LAYOUT
from util.utils import load_config

from .camera import Camera, Lighting

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectTransforms:
    """1 オブジェクト分の変換（world, wvp, 逆回転 iw）。"""

    world: Mat4x4
    wvp: Mat4x4
    iw: Mat4x4


def object_transforms(world: Mat4x4, vp: Mat4x4) -> ObjectTransforms:
    """`wvp = world * vp` と `iw = world.rotation().transpose()` を求める。

    `iw` はスケールを含まない world を前提とした逆回転（直交行列の転置 = 逆行列）。
    非一様スケールを含む場合はライティングが崩れるが、検証はしない。
    """
    return ObjectTransforms(
        world=world,
        wvp=world.mul(vp),
        iw=world.rotation().transpose(),
    )


@dataclass(frozen=True)
class Scene:
    """カメラとライティングの組。VP 行列は呼び出しごとに再計算する（値は不変）。"""

    camera: Camera
    lighting: Lighting

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any] | None, *, aspect: float) -> "Scene":
        scene = cls(camera=Camera.from_config(cfg, aspect=aspect), lighting=Lighting.from_config(cfg))
        _logger.debug(
            "scene: eye=%s at=%s fov=%.1fdeg aspect=%.4f near=%g far=%g",
            tuple(scene.camera.eye),
            tuple(scene.camera.at),
            scene.camera.fov_deg,
            scene.camera.aspect,
            scene.camera.near,
            scene.camera.far,
        )
        return scene

    @classmethod
    def load(cls, *, aspect: float) -> "Scene":
        """プロジェクト構成（`configs/default.yaml` → `config.yaml` → `WVP_CONFIG`）から生成する。"""
        return cls.from_config(load_config(), aspect=aspect)

    def view_projection(self) -> Mat4x4:
        return self.camera.view_projection()

    def transforms_for(self, world: Mat4x4) -> ObjectTransforms:
        return object_transforms(world, self.view_projection())

    # ── ユニフォーム詰め ─────────────
    def pack_wvp(self, world: Mat4x4) -> bytes:
        """`wvp` のみのブロック（頂点カラーのみのシーン用）。"""
        t = self.transforms_for(world)
        return bytes(WVP_LAYOUT.pack(wvp=t.wvp))

    def pack_scene_wvp(self, world: Mat4x4) -> bytes:
        """`[wvp][iw][light_dir][eye_dir][ambient_color]` のブロック。"""
        t = self.transforms_for(world)
        return bytes(
            SCENE_WVP_LAYOUT.pack(
                wvp=t.wvp,
                iw=t.iw,
                light_dir=self.lighting.light_dir,
                eye_dir=self.camera.eye_dir(),
                ambient_color=self.lighting.ambient_color,
            )
        )

    def pack_scene_vp(self) -> bytes:
        """`[vp][light_dir][eye_dir][ambient_color]` のブロック（オブジェクト行列は model 側）。"""
        return bytes(
            SCENE_VP_LAYOUT.pack(
                vp=self.view_projection(),
                light_dir=self.lighting.light_dir,
                eye_dir=self.camera.eye_dir(),
                ambient_color=self.lighting.ambient_color,
            )
        )

    def pack_model(self, world: Mat4x4) -> bytes:
        """`[w][iw]` のモデルブロック。"""
        t = self.transforms_for(world)
        return bytes(MODEL_LAYOUT.pack(w=t.world, iw=t.iw))


__all__ = ["ObjectTransforms", "object_transforms", "Scene"]
