import math

import numpy as np
import pytest

import curve_eval as ce
from curve_eval import MonomialCurve


def test_decode_curve_params():
    params = [2, 0., 1., 3., 2, 0., 1., 0., 0., 0., 0., 1, 1., 2., 3.]
    curve = ce._decode_curve_params(params)
    assert curve['n'] == 2
    assert curve['pars'] == [0.0, 1.0, 3.0]
    assert curve['segments'][0]['ax'] == [0., 1.]
    assert curve['segments'][1]['order'] == 1
    assert curve['segments'][1]['t0'] == 1.0


def test_decode_accepts_integral_floats():
    curve = ce._decode_curve_params([1., 0., 1., 2., 0., 1., 0., 0., 0., 0.])
    assert curve['n'] == 1
    assert curve['segments'][0]['order'] == 2


@pytest.mark.parametrize("params, message", [
    ([], "no parameters"),
    ([0, 0., 1.], "segment count"),
    ([1, 0.], "missing global parameters"),
    ([1, 0., 1.], "missing segment block"),
    ([1, 0., 1., 2, 0., 1., 0.], "incomplete"),
    ([1, 0., 1., 1, 'CV2', 0., 0.], "numeric"),
    ([1, 1., 1., 1, 0., 0., 0.], "increasing"),
])
def test_decode_rejects_malformed(params, message):
    with pytest.raises(ValueError, match=message):
        ce._decode_curve_params(params)


def test_decode_curve_entity_rejects_other_commands():
    with pytest.raises(ValueError):
        ce.decode_curve_entity({'command': 'POINT', 'params': [1., 2., 3.]})


def test_segment_lookup(wiggly):
    assert wiggly.segment_count() == 3
    assert wiggly.segment_for_parameter(0) == 0
    assert wiggly.segment_for_parameter(1.99) == 0
    assert wiggly.segment_for_parameter(2) == 1
    assert wiggly.segment_for_parameter(4) == 2
    assert wiggly.segment_for_parameter(9) == 2
    assert wiggly.segment_boundary(1) == 2
    assert wiggly.max_parameter() == 4
    assert wiggly.min_parameter() == 0


def test_line_lengths(line):
    assert line.segment_arc_length(0, 0, 1) == pytest.approx(10)
    assert line.segment_arc_length(0, 0.2, 0.7) == pytest.approx(5)
    assert line.segment_arc_length(0, 0.7, 0.2) == pytest.approx(-5)
    assert line.segment_arc_length(0, 0.4, 0.4) == 0
    assert line.total_length() == pytest.approx(10)


def test_quadratic_segment_length():
    # y = x^2 over x in [0, 1]
    curve = MonomialCurve([[[0, 0, 0], [1, 0, 0], [0, 1, 0]]], [0, 1])
    exact = math.sqrt(5) / 2 + math.asinh(2) / 4
    assert curve.segment_arc_length(0, 0, 1) == pytest.approx(exact, rel=1e-12)


def test_arc_length_is_additive(wiggly):
    p, q = 0.35, 0.8
    for k in range(wiggly.segment_count()):
        whole = wiggly.segment_arc_length(k, 0, q)
        parts = wiggly.segment_arc_length(k, 0, p) + wiggly.segment_arc_length(k, p, q)
        assert parts == pytest.approx(whole, rel=1e-12)
    assert wiggly.arc_length(0.5, 3.5) == pytest.approx(
        wiggly.arc_length(0.5, 2.3) + wiggly.arc_length(2.3, 3.5), rel=1e-12)
    assert wiggly.arc_length(0, 4) == pytest.approx(wiggly.total_length(), rel=1e-12)


def test_arc_length_rejects_reversed_bounds(wiggly):
    with pytest.raises(ValueError):
        wiggly.arc_length(3, 1)


def test_curvature_is_taken_in_global_parameter():
    # x = 3 u^2 with u = (t - 1) / 2 on t in [1, 3]
    curve = MonomialCurve([[[0, 0, 0], [0, 0, 0], [3, 0, 0]]], [1, 3])
    result = curve.curvature_at(2)
    assert result.tangent == pytest.approx([1.5, 0, 0])
    assert result.curvature == pytest.approx([1.5, 0, 0])


def test_curvature_at_shared_knot_follows_segment():
    # C0 corner at t = 1: x = u on the first segment, then y = 5 u
    curve = MonomialCurve([[[0, 0, 0], [1, 0, 0]], [[1, 0, 0], [0, 5, 0]]], [0, 1, 2])
    assert curve.curvature_at(1).tangent == pytest.approx([0, 5, 0])
    assert curve.curvature_at(1, 0).tangent == pytest.approx([1, 0, 0])
    assert curve.curvature_at(1, segment=1).tangent == pytest.approx([0, 5, 0])


def test_evaluate_and_sample(wiggly):
    assert wiggly.evaluate(0) == pytest.approx([0, 0, 0])
    assert wiggly.evaluate(2) == pytest.approx([3, 2, 0])
    assert wiggly.evaluate(-1) == pytest.approx([0, 0, 0])
    assert wiggly.evaluate(4) == pytest.approx([10, 3, 1.5])
    pts = wiggly.sample(samples_per_segment=4)
    assert pts.shape == (1 + 3 * 4, 3)
    assert pts[0] == pytest.approx([0, 0, 0])
    assert pts[-1] == pytest.approx([10, 3, 1.5])


def test_float32_curve_stays_float32():
    curve = MonomialCurve([[[0, 0, 0], [1, 1, 0], [0, 1, 0]]], [0, 1], dtype=np.float32)
    assert curve.segment_arc_length(0, 0, 1).dtype == np.float32
    assert curve.curvature_at(0.5).tangent.dtype == np.float32
    assert curve.total_length().dtype == np.float32


@pytest.mark.parametrize("coefficients, pars", [
    ([], [0]),
    ([[[0, 0, 0]]], [0, 1, 2]),
    ([[[0, 0]]], [0, 1]),
    ([[[0, 0, 0]]], [1, 0]),
])
def test_constructor_rejects_bad_shapes(coefficients, pars):
    with pytest.raises(ValueError):
        MonomialCurve(coefficients, pars)


def test_constructor_rejects_integer_dtype():
    with pytest.raises(ValueError):
        MonomialCurve([[[0, 0, 0]]], [0, 1], dtype=np.int64)
