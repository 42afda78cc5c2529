"""
どこで: `api` 入口（高レベル公開 API）。
何を: 値型 `Vec3`/`Mat4x4`、カメラ/ライティング、シーン単位のユニフォーム詰めを再輸出。
なぜ: 利用者が単一名前空間から「行列を組む → 合成する → バイト列にする」まで完結できるようにするため。

Usage:
    from api import Mat4x4, Scene, Vec3

    scene = Scene.load(aspect=16 / 9)
    world = Mat4x4.rotation_y(0.5).mul(Mat4x4.translation(Vec3(1.0, 0.0, 0.0)))
    block = scene.pack_scene_wvp(world)
"""

# コアクラス
from engine.core.mat4x4 import Mat4x4
from engine.core.vec3 import Vec3
from engine.render.uniforms import UniformLayout

# 主要API
from .camera import Camera, Lighting
from .scene import ObjectTransforms, Scene, object_transforms

__all__ = [
    "Vec3",
    "Mat4x4",
    "UniformLayout",
    "Camera",
    "Lighting",
    "Scene",
    "ObjectTransforms",
    "object_transforms",
]

# バージョン情報
__version__ = "2026.10"
