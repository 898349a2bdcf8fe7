import numpy as np
import pytest

from curve_eval import MonomialCurve

# CV1: straight line of length 10 over t in [0, 1]
# CV2: two unit segments, along x then along y, over t in [0, 2]
# PT1: a POINT, to check that non-curves are rejected
VDA_TEXT = """\
$$ arc-length test file
HD1      = HEADER / 2
SENDER TEST SUITE
PROJECT ARC LENGTH
CV1      = CURVE / 1, 0., 1., 2, 0., 10., 0., 0., 0., 0.
CV2      = CURVE / 2, 0., 1., 2.,
  2, 0., 1., 0., 0., 0., 0.,
  2, 1., 0., 0., 1., 0., 0.
PT1      = POINT / 1., 2., 3.
END
"""


@pytest.fixture
def vda_file(tmp_path):
    path = tmp_path / "curves.vda"
    path.write_text(VDA_TEXT, encoding="latin-1")
    return str(path)


def line_curve(dtype=np.float64):
    """Straight segment of length 10 parameterized linearly over t in [0, 1]."""
    return MonomialCurve([[[0, 0, 0], [10, 0, 0]]], [0, 1], dtype=dtype)


@pytest.fixture
def line():
    return line_curve()


@pytest.fixture
def accelerating_line():
    # x = 10 u^2: arc length from 0 to u is 10 u^2
    return MonomialCurve([[[0, 0, 0], [0, 0, 0], [10, 0, 0]]], [0, 1])


@pytest.fixture
def wiggly():
    """Three curved segments with uneven parameter spans, speed bounded away from 0."""
    return MonomialCurve(
        [
            [[0, 0, 0], [3, 0, 0], [0, 2, 0]],
            [[3, 2, 0], [3, 4, 0], [0, 0, 1], [0, -1, 0]],
            [[6, 5, 1], [4, -2, 0.5]],
        ],
        [0, 2, 2.5, 4],
    )
