"""
どこで: `engine.core` サブパッケージ。
何を: 3 成分ベクトル `Vec3` と 4x4 変換行列 `Mat4x4`（行ベクトル規約・列優先格納・逆 Z）を提供。
なぜ: ワールド/ビュー/射影の構築と合成を副作用のない値型に閉じ込め、上位層（render/api）から再利用するため。
"""

from .mat4x4 import Mat4x4
from .vec3 import Vec3

__all__ = ["Mat4x4", "Vec3"]
