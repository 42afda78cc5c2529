import math

import numpy as np
import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a dev optional dependency")
from hypothesis import given, strategies as st  # type: ignore

from engine.core.mat4x4 import Mat4x4
from engine.core.vec3 import Vec3

_coord = st.floats(-10, 10, allow_nan=False, allow_infinity=False)
_angle = st.floats(-2 * math.pi, 2 * math.pi, allow_nan=False, allow_infinity=False)
_vec = st.builds(Vec3, _coord, _coord, _coord)
_nonzero_vec = _vec.filter(lambda v: v.length() > 1e-3)


@st.composite
def _affine(draw) -> Mat4x4:
    """回転・スケール・平行移動を合成した行列。"""
    axis = draw(_nonzero_vec)
    scale = draw(st.builds(Vec3, *(st.floats(0.1, 3.0),) * 3))
    return (
        Mat4x4.scale(scale)
        .mul(Mat4x4.rotation_axis(axis, draw(_angle)))
        .mul(Mat4x4.translation(draw(_vec)))
    )


@given(m=_affine())
def test_identity_two_sided(m):
    ident = Mat4x4.identity()
    np.testing.assert_allclose(ident.mul(m).as_array(), m.as_array(), atol=1e-5)
    np.testing.assert_allclose(m.mul(ident).as_array(), m.as_array(), atol=1e-5)


@given(a=_affine(), b=_affine(), c=_affine())
def test_mul_associative(a, b, c):
    left = a.mul(b).mul(c)
    right = a.mul(b.mul(c))
    np.testing.assert_allclose(left.as_array(), right.as_array(), rtol=1e-4, atol=1e-3)


@given(m=_affine())
def test_double_transpose_exact(m):
    assert m.transpose().transpose() == m


@given(t=_vec)
def test_translation_of_origin(t):
    out = Mat4x4.translation(t).apply((0.0, 0.0, 0.0, 1.0))
    np.testing.assert_allclose(out, [t.x, t.y, t.z, 1.0], rtol=1e-6, atol=1e-6)


@given(axis=_nonzero_vec)
def test_rotation_axis_zero_is_identity(axis):
    m = Mat4x4.rotation_axis(axis.normalize(), 0.0)
    np.testing.assert_allclose(m.as_array(), Mat4x4.identity().as_array(), atol=1e-5)


@given(axis=_nonzero_vec, th=_angle)
def test_rotation_axis_orthonormal(axis, th):
    rows = Mat4x4.rotation_axis(axis, th).to_rows()[:3, :3].astype(np.float64)
    np.testing.assert_allclose(rows @ rows.T, np.eye(3), atol=1e-5)


@given(v=_vec)
def test_cross_self_is_zero(v):
    assert v.cross(v) == Vec3(0.0, 0.0, 0.0)


@given(v=_nonzero_vec)
def test_normalize_has_unit_length(v):
    assert v.normalize().length() == pytest.approx(1.0, abs=1e-9)
