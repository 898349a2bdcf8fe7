# CURVE decoder & evaluator for VDA-FS (monomial basis).
# Decodes the params of a CURVE entity into per-segment structures and wraps
# them in MonomialCurve, which evaluates points, derivatives and arc length
# per segment in the shape the arc-length solver consumes.

import logging
import math

import numpy as np
from numpy.polynomial import legendre
from numpy.polynomial import polynomial as P

from arclength import Curvature

logger = logging.getLogger(__name__)


def _as_count(v, what):
    if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v) \
            or v != int(v) or v <= 0:
        raise ValueError(f"{what} must be a positive integer, got {v!r}")
    return int(v)


def _decode_curve_params(params):
    """
    Decode a CURVE params list into:
      - n (segments)
      - pars (list of n+1 global parameters)
      - segments: list of dicts with keys:
          {'order': K, 'ax': [...], 'ay': [...], 'az': [...], 't0': par[k], 't1': par[k+1]}
    Returns a dict {'n': n, 'pars': pars, 'segments': segments}
    """
    if not params:
        raise ValueError("CURVE has no parameters")

    n = _as_count(params[0], "CURVE segment count")

    # n+1 global parameters
    need = 1 + (n + 1)
    if len(params) < need:
        raise ValueError("CURVE missing global parameters")
    pars = [float(p) for p in params[1:need]]

    # remaining are segment blocks: for each seg -> [K, K ax, K ay, K az]
    seg_data = params[need:]
    segs = []
    i = 0
    for k in range(n):
        if i >= len(seg_data):
            raise ValueError("CURVE missing segment block")
        K = _as_count(seg_data[i], "CURVE segment order"); i += 1
        if i + 3 * K > len(seg_data):
            raise ValueError("CURVE segment coefficients incomplete")
        ax = seg_data[i: i + K]; i += K
        ay = seg_data[i: i + K]; i += K
        az = seg_data[i: i + K]; i += K

        for arr in (ax, ay, az):
            for v in arr:
                if not isinstance(v, (int, float)):
                    raise ValueError("CURVE coefficients must be numeric")

        t0, t1 = pars[k], pars[k + 1]
        if t1 <= t0:
            raise ValueError("CURVE global parameters must be strictly increasing")

        segs.append({'order': K, 'ax': ax, 'ay': ay, 'az': az, 't0': t0, 't1': t1})

    if i < len(seg_data):
        logger.debug("CURVE: %d trailing parameters ignored", len(seg_data) - i)
    return {'n': n, 'pars': pars, 'segments': segs}


def decode_curve_entity(entity):
    """
    Convenience: given a parsed entity dict {'command','params',...} for CURVE,
    return the decoded structure produced by _decode_curve_params.
    """
    if entity.get('command') != 'CURVE':
        raise ValueError("Entity is not a CURVE")
    return _decode_curve_params(entity.get('params', []))


def curve_from_entity(entity, dtype=np.float64):
    return MonomialCurve.from_decoded(decode_curve_entity(entity), dtype=dtype)


class MonomialCurve:
    """
    Piecewise monomial space curve.

    Segment k is x(u) = sum_j c[k][j] * u^j (same for y, z) with the local
    offset u in [0, 1] mapped linearly onto [pars[k], pars[k+1]].

    Arc length per segment is integrated with composite Gauss-Legendre
    quadrature of the speed |dP/du|: the offset range is split into
    ceil(panels * (b - a)) panels of quadrature_points nodes each.
    """

    def __init__(self, coefficients, pars, dtype=np.float64, quadrature_points=16, panels=8):
        self.dtype = np.dtype(dtype)
        if not np.issubdtype(self.dtype, np.floating):
            raise ValueError(f"curve dtype must be floating, got {self.dtype}")
        if len(coefficients) == 0 or len(pars) != len(coefficients) + 1:
            raise ValueError("need one more global parameter than segments")

        self.pars = np.asarray(pars, dtype=self.dtype)
        if np.any(np.diff(self.pars) <= 0):
            raise ValueError("global parameters must be strictly increasing")

        # (K, 3) coefficient arrays and their first two derivatives in u
        self._coeffs = []
        self._d1 = []
        self._d2 = []
        for c in coefficients:
            c = np.asarray(c, dtype=self.dtype)
            if c.ndim != 2 or c.shape[1] != 3 or c.shape[0] == 0:
                raise ValueError(f"segment coefficients must have shape (K, 3), got {c.shape}")
            self._coeffs.append(c)
            self._d1.append(P.polyder(c, 1))
            self._d2.append(P.polyder(c, 2))

        nodes, weights = legendre.leggauss(quadrature_points)
        self._nodes = nodes.astype(self.dtype)
        self._weights = weights.astype(self.dtype)
        self.panels = panels

    @classmethod
    def from_decoded(cls, curve, dtype=np.float64, **kwargs):
        coefficients = [np.column_stack([seg['ax'], seg['ay'], seg['az']]) for seg in curve['segments']]
        return cls(coefficients, curve['pars'], dtype=dtype, **kwargs)

    def __repr__(self):
        return (f"<MonomialCurve segments={self.segment_count()} "
                f"t=[{self.min_parameter()}, {self.max_parameter()}] dtype={self.dtype.name}>")

    # ---- curve contract

    def segment_count(self):
        return len(self._coeffs)

    def segment_boundary(self, index):
        return self.pars[index]

    def segment_for_parameter(self, t):
        # [pars[k], pars[k+1]) with the last segment closed
        k = int(np.searchsorted(self.pars, t, side='right')) - 1
        return min(max(k, 0), self.segment_count() - 1)

    def max_parameter(self):
        return self.pars[-1]

    def min_parameter(self):
        return self.pars[0]

    def segment_arc_length(self, index, start_offset, end_offset):
        """Arc length between two offsets of a segment (negative if end < start)."""
        a = self.dtype.type(start_offset)
        b = self.dtype.type(end_offset)
        if a == b:
            return self.dtype.type(0)
        panels = max(1, math.ceil(self.panels * abs(float(b) - float(a))))
        edges = np.linspace(a, b, panels + 1, dtype=self.dtype)
        half = (edges[1:] - edges[:-1]) / 2
        mids = (edges[1:] + edges[:-1]) / 2
        u = mids[:, None] + half[:, None] * self._nodes[None, :]
        speed = self._speed(index, u.ravel()).reshape(u.shape)
        return self.dtype.type(np.sum(half[:, None] * self._weights[None, :] * speed))

    def curvature_at(self, t, segment=None):
        """
        First and second derivative of the position with respect to t.

        segment picks the polynomial at a shared knot, where t is both the end
        of one segment and the start of the next; by default the later one.
        """
        k = self.segment_for_parameter(t) if segment is None else int(segment)
        span = self.pars[k + 1] - self.pars[k]
        u = (self.dtype.type(t) - self.pars[k]) / span
        tangent = P.polyval(u, self._d1[k]) / span
        curvature = P.polyval(u, self._d2[k]) / (span * span)
        return Curvature(np.atleast_1d(tangent).astype(self.dtype),
                         np.atleast_1d(curvature).astype(self.dtype))

    # ---- evaluation helpers

    def _speed(self, index, u):
        return np.linalg.norm(P.polyval(u, self._d1[index]), axis=0)

    def evaluate(self, t):
        """Point at global parameter t (clamped into the parameter range)."""
        t = min(max(self.dtype.type(t), self.pars[0]), self.pars[-1])
        k = self.segment_for_parameter(t)
        u = (t - self.pars[k]) / (self.pars[k + 1] - self.pars[k])
        return P.polyval(u, self._coeffs[k])

    def sample(self, samples_per_segment=20):
        """Uniformly sample each segment in u; shared knots appear once. Returns (N, 3)."""
        m = max(2, int(samples_per_segment))
        u = np.linspace(0, 1, m + 1, dtype=self.dtype)
        pts = [P.polyval(u if k == 0 else u[1:], c).T for k, c in enumerate(self._coeffs)]
        return np.concatenate(pts)

    def segment_lengths(self):
        return np.array([self.segment_arc_length(k, 0, 1) for k in range(self.segment_count())],
                        dtype=self.dtype)

    def total_length(self):
        return self.dtype.type(np.sum(self.segment_lengths()))

    def arc_length(self, a, b):
        """Arc length between two global parameters a <= b."""
        if b < a:
            raise ValueError("arc_length needs a <= b")
        ka = self.segment_for_parameter(a)
        kb = self.segment_for_parameter(b)
        pa = self._offset(ka, a)
        pb = self._offset(kb, b)
        if ka == kb:
            return self.segment_arc_length(ka, pa, pb)
        total = self.segment_arc_length(ka, pa, 1)
        for k in range(ka + 1, kb):
            total += self.segment_arc_length(k, 0, 1)
        return total + self.segment_arc_length(kb, 0, pb)

    def _offset(self, k, t):
        return (self.dtype.type(t) - self.pars[k]) / (self.pars[k + 1] - self.pars[k])
