import numpy as np
import pytest

from policydeploy.cubic import CubicInterp


@pytest.fixture
def fitted():
    interp = CubicInterp(3)
    x0 = np.array([0.0, 1.0, -0.5])
    v0 = np.array([0.2, 0.0, 0.1])
    xf = np.array([1.0, -1.0, 0.5])
    vf = np.array([0.0, 0.3, 0.0])
    interp.set_param(x0, v0, xf, vf, 2.0)
    return interp, x0, v0, xf, vf


def test_default_dimension():
    assert CubicInterp().dim == 1


def test_endpoints_match(fitted):
    interp, x0, v0, xf, vf = fitted
    assert np.allclose(interp.curve_point(0.0), x0)
    assert np.allclose(interp.curve_point(2.0), xf)


def test_endpoint_velocities_match(fitted):
    interp, x0, v0, xf, vf = fitted
    assert np.allclose(interp.curve_derivative(0.0), v0)
    assert np.allclose(interp.curve_derivative(2.0), vf)


def test_derivative_matches_finite_difference(fitted):
    interp = fitted[0]
    h = 1e-6
    numeric = (interp.curve_point(0.7 + h) - interp.curve_point(0.7 - h)) / (2 * h)
    assert np.allclose(numeric, interp.curve_derivative(0.7), atol=1e-5)


def test_rest_to_rest_is_monotonic():
    interp = CubicInterp(1)
    interp.set_param([0.0], [0.0], [1.0], [0.0], 1.0)
    samples = [interp.curve_point(t)[0] for t in np.linspace(0, 1, 21)]
    assert all(b >= a for a, b in zip(samples, samples[1:]))
    assert interp.final_time == 1.0


def test_set_dimension_preserves_values(fitted):
    interp, x0, *_ = fitted
    interp.set_dimension(5)
    assert interp.dim == 5
    point = interp.curve_point(0.0)
    assert point.shape == (5,)
    assert np.allclose(point[:3], x0)
    assert not np.any(point[3:])


def test_extra_input_elements_are_ignored():
    interp = CubicInterp(2)
    interp.set_param([1, 2, 99], [0, 0, 99], [3, 4, 99], [0, 0, 99], 1.0)
    assert np.allclose(interp.curve_point(1.0), [3, 4])


def test_short_input_raises():
    interp = CubicInterp(3)
    with pytest.raises(ValueError):
        interp.set_param([0, 0], [0, 0, 0], [1, 1, 1], [0, 0, 0], 1.0)


def test_negative_dimension_raises():
    with pytest.raises(ValueError):
        CubicInterp().set_dimension(-1)


def test_float32_dtype():
    interp = CubicInterp(2, dtype=np.float32)
    interp.set_param([0, 0], [0, 0], [1, 2], [0, 0], 0.5)
    point = interp.curve_point(0.5)
    assert point.dtype == np.float32
    assert np.allclose(point, [1, 2], atol=1e-5)