from __future__ import annotations

import numpy as np
import pytest

from common import settings
from engine.core.mat4x4 import Mat4x4
from engine.core.vec3 import Vec3
from engine.render.uniforms import (
    LAYOUTS,
    MODEL_LAYOUT,
    SCENE_VP_LAYOUT,
    SCENE_WVP_LAYOUT,
    UniformField,
    UniformLayout,
    write_vec4,
)


def test_scene_wvp_layout_offsets() -> None:
    assert SCENE_WVP_LAYOUT.offsets == {
        "wvp": 0,
        "iw": 64,
        "light_dir": 128,
        "eye_dir": 144,
        "ambient_color": 160,
    }
    assert SCENE_WVP_LAYOUT.size == 176


def test_scene_vp_and_model_layout_offsets() -> None:
    assert SCENE_VP_LAYOUT.offsets == {"vp": 0, "light_dir": 64, "eye_dir": 80, "ambient_color": 96}
    assert SCENE_VP_LAYOUT.size == 112
    assert MODEL_LAYOUT.offsets == {"w": 0, "iw": 64}
    assert MODEL_LAYOUT.size == 128


def test_vec4_after_scalar_is_aligned_to_16() -> None:
    layout = UniformLayout([("time", "f32"), ("color", "vec4"), ("scale", "f32")])
    assert layout.offset_of("time") == 0
    assert layout.offset_of("color") == 16
    assert layout.offset_of("scale") == 32
    # 36 → 48
    assert layout.size == 48


def test_every_vector_and_matrix_offset_is_multiple_of_16() -> None:
    for layout in LAYOUTS.values():
        for f in layout.fields:
            if f.kind in ("vec4", "mat4x4"):
                assert layout.offset_of(f.name) % 16 == 0


def test_layout_accepts_field_objects() -> None:
    layout = UniformLayout([UniformField("m", "mat4x4"), UniformField("v", "vec4")])
    assert layout.kind_of("v") == "vec4"
    assert layout.size == 80


def test_layout_rejects_duplicates_and_unknown_kinds() -> None:
    with pytest.raises(ValueError):
        UniformLayout([("a", "vec4"), ("a", "vec4")])
    with pytest.raises(ValueError):
        UniformLayout([("a", "vec3")])


def test_unknown_field_raises_key_error() -> None:
    with pytest.raises(KeyError):
        SCENE_WVP_LAYOUT.offset_of("nope")
    with pytest.raises(KeyError):
        SCENE_WVP_LAYOUT.write(SCENE_WVP_LAYOUT.allocate(), "nope", 1.0)


def test_pack_scene_block_roundtrips_as_float32() -> None:
    wvp = Mat4x4.rotation_y(0.3).mul(Mat4x4.translation(Vec3(1.0, 2.0, 3.0)))
    iw = wvp.rotation().transpose()
    light = Vec3(-0.5, 0.5, 0.5).normalize()
    buf = SCENE_WVP_LAYOUT.pack(
        wvp=wvp,
        iw=iw,
        light_dir=light,
        eye_dir=Vec3(0.0, 0.0, 1.0),
        ambient_color=Vec3(0.1, 0.1, 0.1),
    )
    floats = np.frombuffer(bytes(buf), dtype=np.float32)
    assert floats.size == 44
    np.testing.assert_array_equal(floats[0:16], wvp.as_array())
    np.testing.assert_array_equal(floats[16:32], iw.as_array())
    np.testing.assert_allclose(floats[32:36], [light.x, light.y, light.z, 0.0], rtol=1e-6)
    np.testing.assert_array_equal(floats[36:40], [0.0, 0.0, 1.0, 0.0])
    np.testing.assert_allclose(floats[40:44], [0.1, 0.1, 0.1, 0.0], rtol=1e-6)


def test_pack_leaves_missing_fields_zero() -> None:
    buf = SCENE_VP_LAYOUT.pack({"eye_dir": (1.0, 2.0, 3.0, 4.0)})
    floats = np.frombuffer(bytes(buf), dtype=np.float32)
    assert not floats[:20].any()
    np.testing.assert_array_equal(floats[20:24], [1.0, 2.0, 3.0, 4.0])
    assert not floats[24:].any()


def test_write_with_base_offset_touches_only_its_range() -> None:
    buf = bytearray(b"\xff" * (MODEL_LAYOUT.size * 2))
    m = Mat4x4.scale(Vec3(2.0, 2.0, 2.0))
    MODEL_LAYOUT.write(buf, "iw", m, base=MODEL_LAYOUT.size)
    start = MODEL_LAYOUT.size + 64
    assert buf[:start] == b"\xff" * start
    assert buf[start : start + 64] == m.tobytes()
    assert buf[start + 64 :] == b"\xff" * (len(buf) - start - 64)


def test_write_vec4_pads_vec3_with_w() -> None:
    buf = bytearray(32)
    write_vec4(buf, 16, Vec3(1.0, 2.0, 3.0), w=1.0)
    floats = np.frombuffer(bytes(buf), dtype=np.float32)
    np.testing.assert_array_equal(floats, [0, 0, 0, 0, 1, 2, 3, 1])


def test_write_vec4_misaligned_raises_when_check_enabled(restore_settings) -> None:
    restore_settings.setenv("WVP_UNIFORM_ALIGN_CHECK", "1")
    settings.reload_from_env()
    with pytest.raises(ValueError):
        write_vec4(bytearray(64), 8, Vec3(1.0, 0.0, 0.0))


def test_write_vec4_misaligned_allowed_when_check_disabled(restore_settings) -> None:
    restore_settings.setenv("WVP_UNIFORM_ALIGN_CHECK", "0")
    settings.reload_from_env()
    buf = bytearray(64)
    write_vec4(buf, 8, Vec3(1.0, 0.0, 0.0))
    assert np.frombuffer(bytes(buf[8:24]), dtype=np.float32).tolist() == [1.0, 0.0, 0.0, 0.0]


def test_debug_logging_reports_offsets(restore_settings, caplog: pytest.LogCaptureFixture) -> None:
    restore_settings.setenv("WVP_DEBUG_UNIFORMS", "1")
    settings.reload_from_env()
    with caplog.at_level("DEBUG", logger="engine.render.uniforms"):
        layout = UniformLayout([("a", "vec4"), ("b", "mat4x4")])
        layout.pack(a=(1.0, 2.0, 3.0, 4.0))
    text = caplog.text
    assert "a@0" in text and "b@16" in text
    assert "write a (vec4) at 0" in text
