"""共通フィクスチャ。

- 乱数シード固定
- 代表的な行列・カメラ試料
- 設定（環境変数）の退避/復元
"""

from __future__ import annotations

import math
from typing import Iterator

import numpy as np
import pytest

from common import settings
from engine.core.mat4x4 import Mat4x4
from engine.core.vec3 import Vec3


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture()
def eye() -> Vec3:
    return Vec3(0.0, 1.0, 3.0)


@pytest.fixture()
def view(eye: Vec3) -> Mat4x4:
    return Mat4x4.look_at_rh(eye, Vec3(0.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))


@pytest.fixture()
def projection() -> Mat4x4:
    return Mat4x4.perspective_fov_rh(math.pi / 2, 1.0, 0.1, 100.0)


@pytest.fixture()
def mixed_matrix() -> Mat4x4:
    """回転・平行移動・スケールを混ぜた非対称な行列。"""
    return (
        Mat4x4.scale(Vec3(2.0, 0.5, 1.5))
        .mul(Mat4x4.rotation_axis(Vec3(1.0, 2.0, 3.0), 0.7))
        .mul(Mat4x4.translation(Vec3(-1.0, 4.0, 2.5)))
    )


@pytest.fixture()
def restore_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    """テスト中に `monkeypatch.setenv` → `settings.reload_from_env()` してよい。終了時に再読込。"""
    yield monkeypatch
    monkeypatch.undo()
    settings.reload_from_env()
