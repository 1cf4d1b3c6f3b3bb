"""Tests for transformations, elementary constructors and rotation matrices."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jax_registration.core import Dim, InvalidArgumentError, UnsupportedOperationError
from jax_registration.transforms import TransformKind, Transformation, compose, elementary, rotation


# Basic tests
def test_translation_moves_points():
    """Test translation adds the offset to single points and batches."""
    t = elementary.translation(jnp.array([1.0, -2.0, 0.5]))
    np.testing.assert_allclose(t(jnp.zeros(3)), jnp.array([1.0, -2.0, 0.5]), rtol=1e-12)

    points = jnp.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    np.testing.assert_allclose(t(points), points + jnp.array([1.0, -2.0, 0.5]), rtol=1e-12)


def test_translation_derivatives_are_identity():
    t = elementary.translation(jnp.array([3.0, 4.0]))
    x = jnp.array([1.0, 2.0])
    np.testing.assert_allclose(t.take_derivative(x), jnp.eye(2))
    np.testing.assert_allclose(t.take_derivative_wrt_parameters(x), jnp.eye(2))


def test_scaling_about_center():
    """Test isotropic scaling keeps the center fixed."""
    center = jnp.array([1.0, 1.0])
    s = elementary.scaling(2.0, center)
    np.testing.assert_allclose(s(center), center)
    np.testing.assert_allclose(s(jnp.array([2.0, 3.0])), jnp.array([3.0, 5.0]))
    np.testing.assert_allclose(s.take_derivative(center), 2.0 * jnp.eye(2))
    np.testing.assert_allclose(
        s.take_derivative_wrt_parameters(jnp.array([2.0, 3.0])), jnp.array([[1.0], [2.0]])
    )


def test_scaling_with_zero_factor_has_non_finite_inverse():
    s = elementary.scaling(0.0, jnp.zeros(2))
    inverse = s.inverse()
    assert not np.all(np.isfinite(np.asarray(inverse(jnp.array([1.0, 1.0])))))


def test_anisotropic_scaling():
    s = elementary.anisotropic_scaling(jnp.array([2.0, 3.0, 1.0]))
    x = jnp.array([1.0, 2.0, 3.0])
    np.testing.assert_allclose(s(x), jnp.array([2.0, 6.0, 3.0]))
    np.testing.assert_allclose(s.take_derivative(x), jnp.diag(jnp.array([2.0, 3.0, 1.0])))
    np.testing.assert_allclose(s.take_derivative_wrt_parameters(x), jnp.diag(x))
    np.testing.assert_allclose(s.inverse()(s(x)), x, rtol=1e-12)


def test_rotation_2d_quarter_turn():
    """Test a 90° rotation about the origin maps x-axis to y-axis."""
    r = elementary.rotation(jnp.array([jnp.pi / 2]))
    np.testing.assert_allclose(r(jnp.array([1.0, 0.0])), jnp.array([0.0, 1.0]), atol=1e-12)


def test_rotation_kind_and_dim():
    r = elementary.rotation(jnp.array([0.1, 0.2, 0.3]))
    assert r.kind is TransformKind.ROTATION
    assert r.dim == Dim.THREE
    assert r.is_invertible


def test_point_dimension_mismatch_raises():
    t = elementary.translation(jnp.array([1.0, 2.0]))
    with pytest.raises(InvalidArgumentError):
        t(jnp.array([1.0, 2.0, 3.0]))
    with pytest.raises(InvalidArgumentError):
        t.take_derivative(jnp.ones((4, 2)))


def test_rotation_center_dimension_mismatch_raises():
    with pytest.raises(InvalidArgumentError):
        elementary.rotation(jnp.array([0.3]), center=jnp.zeros(3))


def test_as_center_defaults_to_origin():
    np.testing.assert_array_equal(elementary.as_center(None, Dim.THREE), jnp.zeros(3))
    np.testing.assert_array_equal(elementary.as_center([1.0, 2.0], Dim.TWO), jnp.array([1.0, 2.0]))
    with pytest.raises(InvalidArgumentError):
        elementary.as_center(jnp.zeros(3), Dim.TWO)


def test_rotation_needs_one_or_three_angles():
    with pytest.raises(InvalidArgumentError):
        rotation.matrix(jnp.array([0.1, 0.2]))
    with pytest.raises(InvalidArgumentError):
        rotation.number_of_angles(Dim.ONE)


# Composition tests
def test_compose_applies_inner_first():
    """Test (outer ∘ inner)(x) == outer(inner(x))."""
    outer = elementary.translation(jnp.array([1.0, 0.0]))
    inner = elementary.scaling(2.0, jnp.zeros(2))
    x = jnp.array([1.0, 1.0])

    composed = outer.compose(inner)
    np.testing.assert_allclose(composed(x), jnp.array([3.0, 2.0]))
    np.testing.assert_allclose(inner.compose(outer)(x), jnp.array([4.0, 2.0]))
    assert composed.kind is TransformKind.COMPOSED
    assert composed.operands == (outer, inner)


def test_compose_chain_rule():
    outer = elementary.rotation(jnp.array([0.4, -0.2, 1.1]), center=jnp.array([1.0, 2.0, 3.0]))
    inner = elementary.anisotropic_scaling(jnp.array([2.0, 0.5, 1.5]))
    composed = compose(outer, inner)
    x = jnp.array([0.3, -1.0, 2.0])

    expected = outer.take_derivative(inner(x)) @ inner.take_derivative(x)
    np.testing.assert_allclose(composed.take_derivative(x), expected, rtol=1e-12)
    np.testing.assert_allclose(composed.take_derivative(x), jax.jacfwd(lambda y: composed(y))(x), rtol=1e-10, atol=1e-12)


def test_compose_parameter_derivative_concatenates():
    outer = elementary.translation(jnp.array([1.0, 1.5]))
    inner = elementary.rotation(jnp.array([0.7]), center=jnp.array([2.0, 3.5]))
    x = jnp.array([2.0, 2.0])

    composed = outer.compose(inner)
    expected = jnp.concatenate(
        [outer.take_derivative_wrt_parameters(x), inner.take_derivative_wrt_parameters(x)], axis=1
    )
    np.testing.assert_allclose(composed.take_derivative_wrt_parameters(x), expected)
    assert composed.take_derivative_wrt_parameters(x).shape == (2, 3)


def test_composed_transformation_is_not_invertible():
    composed = elementary.translation(jnp.ones(2)).compose(elementary.rotation(jnp.array([0.3])))
    assert not composed.is_invertible
    with pytest.raises(UnsupportedOperationError):
        composed.inverse()


def test_with_inverse_attaches_inverse():
    t = elementary.translation(jnp.ones(2))
    r = elementary.rotation(jnp.array([0.3]))
    composed = t.compose(r).with_inverse(lambda: r.inverse().compose(t.inverse()), kind=TransformKind.RIGID)

    x = jnp.array([0.5, -2.0])
    assert composed.kind is TransformKind.RIGID
    np.testing.assert_allclose(composed.inverse()(composed(x)), x, atol=1e-12)


def test_compose_dimension_mismatch_raises():
    with pytest.raises(InvalidArgumentError):
        elementary.translation(jnp.ones(2)).compose(elementary.translation(jnp.ones(3)))


def test_missing_derivative_raises():
    bare = Transformation(kind=TransformKind.COMPOSED, dim=Dim.TWO, apply_fn=lambda x: x)
    with pytest.raises(UnsupportedOperationError):
        bare.take_derivative(jnp.zeros(2))
    with pytest.raises(UnsupportedOperationError):
        bare.take_derivative_wrt_parameters(jnp.zeros(2))

    # a composition with an operand lacking a derivative has none either
    composed = elementary.translation(jnp.ones(2)).compose(bare)
    with pytest.raises(UnsupportedOperationError):
        composed.take_derivative(jnp.zeros(2))


# Rotation matrix tests
def test_rotation_matrix_identity():
    np.testing.assert_allclose(rotation.matrix(jnp.zeros(1)), jnp.eye(2))
    np.testing.assert_allclose(rotation.matrix(jnp.zeros(3)), jnp.eye(3))


def test_rotation_matrix_derivative_2d():
    theta = jnp.array([0.3])
    dR = rotation.matrix_derivative(theta)
    expected = jnp.array([[-jnp.sin(0.3), -jnp.cos(0.3)], [jnp.cos(0.3), -jnp.sin(0.3)]])
    assert dR.shape == (2, 2, 1)
    np.testing.assert_allclose(dR[..., 0], expected, rtol=1e-12)


def test_rotation_jit_compatibility():
    jitted = jax.jit(rotation.matrix_3d)
    angles = jnp.array([0.1, 0.2, 0.3])
    np.testing.assert_allclose(jitted(angles), rotation.matrix_3d(angles), rtol=1e-12)


@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_rotation_matrix_is_orthonormal(seed):
    """Test R R^T = I and det R = 1 for random Euler angles."""
    angles = jax.random.uniform(jax.random.PRNGKey(seed), (3,), minval=-jnp.pi, maxval=jnp.pi)
    R = rotation.matrix(angles)
    np.testing.assert_allclose(R @ rotation.inverse(R), jnp.eye(3), atol=1e-12)
    np.testing.assert_allclose(jnp.linalg.det(R), 1.0, rtol=1e-12)


@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_inverse_angles_give_transposed_matrix(seed):
    angles = jax.random.uniform(jax.random.PRNGKey(seed), (3,), minval=-jnp.pi, maxval=jnp.pi)
    np.testing.assert_allclose(
        rotation.matrix(elementary.inverse_angles(angles)), rotation.matrix(angles).T, atol=1e-12
    )


@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_rotation_parameter_derivative_matches_autodiff(seed):
    key1, key2 = jax.random.split(jax.random.PRNGKey(seed))
    angles = jax.random.uniform(key1, (3,), minval=-jnp.pi, maxval=jnp.pi)
    x = jax.random.uniform(key2, (3,), minval=-5.0, maxval=5.0)
    center = jnp.array([1.0, -1.0, 0.5])

    analytic = elementary.rotation(angles, center).take_derivative_wrt_parameters(x)
    numeric = jax.jacfwd(lambda a: elementary.rotation(a, center)(x))(angles)
    np.testing.assert_allclose(analytic, numeric, rtol=1e-10, atol=1e-12)
