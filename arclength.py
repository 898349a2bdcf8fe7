# Arc-length parameterization of piecewise curves.
#
# solve_length(curve, a, d)  -> t with arc_length(a, t) == d (clamped to the curve end)
# partition(curve, length)   -> t values cutting the curve into pieces of that length
# partition_n(curve, n)      -> n + 1 t values cutting the curve into n equal pieces
#
# The segment holding the answer is found by scanning whole segment lengths,
# then the offset inside it is solved with a value + 1st + 2nd derivative
# iteration (Halley by default, see roots.py).

import logging
import math
from dataclasses import dataclass
from typing import Callable, NamedTuple, Protocol, Sequence

import numpy as np

from roots import halley_iterate

logger = logging.getLogger(__name__)

__all__ = [
    'Curvature', 'Curve', 'Cursor',
    'ArcLengthError', 'OutOfRangeParameterError', 'NegativeDesiredLengthError',
    'NonPositivePieceLengthError', 'InvalidPieceCountError',
    'iteration_budget', 'solve_length', 'partition', 'partition_n', 'advance',
]


class Curvature(NamedTuple):
    tangent: np.ndarray
    curvature: np.ndarray


class Curve(Protocol):
    """What the solver needs from a curve. Offsets are in [0, 1] per segment."""

    dtype: np.dtype

    def segment_for_parameter(self, t) -> int: ...

    def segment_boundary(self, index: int): ...

    def segment_count(self) -> int: ...

    def segment_arc_length(self, index: int, start_offset, end_offset): ...

    def curvature_at(self, t, segment=None) -> Curvature: ...

    def max_parameter(self): ...


RootIterator = Callable[[Callable, float, float, float, int], float]


class ArcLengthError(ValueError):
    pass


class OutOfRangeParameterError(ArcLengthError):
    pass


class NegativeDesiredLengthError(ArcLengthError):
    pass


class NonPositivePieceLengthError(ArcLengthError):
    pass


class InvalidPieceCountError(ArcLengthError):
    pass


def _dtype(curve):
    return np.dtype(getattr(curve, 'dtype', np.float64))


def iteration_budget(dtype):
    """Half the significant bits of the scalar type."""
    return int((np.finfo(dtype).nmant + 1) * 0.5)


def _segment_span(curve, index):
    begin = curve.segment_boundary(index)
    end = curve.segment_boundary(index + 1)
    return begin, end


def _to_parameter(curve, index, percent):
    begin, end = _segment_span(curve, index)
    if percent >= 1:
        return end
    return begin + percent * (end - begin)


def _solve_segment(curve, index, desired_length, max_length, a_percent, iterate=halley_iterate):
    """
    Offset b in [a_percent, 1] of segment index with
    segment_arc_length(index, a_percent, b) == desired_length.

    max_length is the length available from a_percent to the end of the
    segment; asking for all of it returns 1 without iterating.
    """
    dtype = _dtype(curve)
    one = dtype.type(1)
    if desired_length <= 0:
        return dtype.type(a_percent)
    if desired_length >= max_length:
        return one

    a_percent = dtype.type(a_percent)

    # arc length is close to linear in the offset, so spread the desired
    # fraction of the remaining length over the remaining offset range
    desired_percent = desired_length / max_length
    guess = a_percent + desired_percent * (one - a_percent)

    begin, end = _segment_span(curve, index)
    span = end - begin

    def objective(b_percent):
        value = curve.segment_arc_length(index, a_percent, b_percent) - desired_length

        result = curve.curvature_at(begin + b_percent * span, index)
        tangent = np.array(result.tangent, dtype=dtype)
        speed = np.linalg.norm(tangent)
        if speed == 0:
            return value, dtype.type(0), dtype.type(0)

        # d/db of arc length is the tangent speed, the second derivative is
        # the curvature along the unit tangent; both rescaled from t to b
        tangent /= speed
        second = np.dot(tangent, result.curvature)
        return value, speed * span, second * span * span

    b_percent = iterate(objective, guess, a_percent, one, iteration_budget(dtype))
    logger.debug("segment %d: a=%r length=%r -> b=%r", index, a_percent, desired_length, b_percent)
    return b_percent


def _check_length(desired_length):
    if not math.isfinite(desired_length) or desired_length < 0:
        raise NegativeDesiredLengthError(f"desired length must be a finite value >= 0, got {desired_length!r}")


def _check_parameter(curve, t):
    lo = curve.segment_boundary(0)
    hi = curve.max_parameter()
    if not math.isfinite(t) or t < lo or t > hi:
        raise OutOfRangeParameterError(f"parameter {t!r} outside [{lo}, {hi}]")


def solve_length(curve: Curve, a, desired_length, iterate: RootIterator = halley_iterate):
    """
    Compute b such that the arc length from a to b equals desired_length.

    Asking for more length than remains after a returns curve.max_parameter()
    rather than raising; walking past the end of the curve stops at its end.
    """
    _check_parameter(curve, a)
    _check_length(desired_length)
    if desired_length == 0:
        return a

    a_index = curve.segment_for_parameter(a)
    b_index = a_index
    a_begin, a_end = _segment_span(curve, a_index)
    a_percent = (a - a_begin) / (a_end - a_begin)

    b_length = curve.segment_arc_length(a_index, a_percent, 1)

    # b lies beyond a's segment: scan whole segments until one is long enough
    if b_length < desired_length:
        a_percent = 0
        desired_length -= b_length
        count = curve.segment_count()
        while True:
            b_index += 1
            if b_index == count:
                logger.debug("solve_length: %r past the end of the curve, clamped", desired_length)
                return curve.max_parameter()
            b_length = curve.segment_arc_length(b_index, 0, 1)
            if b_length < desired_length:
                desired_length -= b_length
            else:
                break

    b_percent = _solve_segment(curve, b_index, desired_length, b_length, a_percent, iterate)
    return _to_parameter(curve, b_index, b_percent)


@dataclass(frozen=True)
class Cursor:
    """Position reached by a partition: segment, length left in it, offset."""
    index: int
    remainder: float
    percent: float


def advance(curve, segment_lengths: Sequence, cursor: Cursor, length, iterate: RootIterator = halley_iterate):
    """
    Walk length along the curve from cursor.

    Returns (t, next_cursor). Whole segment lengths come from segment_lengths,
    so only the segment holding the answer is integrated.
    """
    index = cursor.index
    remainder = cursor.remainder
    desired = length
    last = len(segment_lengths) - 1

    while remainder < desired:
        if index == last:
            # rounding left less than a full piece on the curve
            desired = remainder
            break
        desired -= remainder
        index += 1
        remainder = segment_lengths[index]

    a_percent = cursor.percent if index == cursor.index else 0
    b_percent = _solve_segment(curve, index, desired, remainder, a_percent, iterate)
    t = _to_parameter(curve, index, b_percent)
    return t, Cursor(index, remainder - desired, b_percent)


def _segment_lengths(curve):
    lengths = [curve.segment_arc_length(k, 0, 1) for k in range(curve.segment_count())]
    return lengths, sum(lengths)


def partition(curve: Curve, length_per_piece, iterate: RootIterator = halley_iterate):
    """
    Cut the curve into pieces of length_per_piece.

    Returns the t values bounding the pieces, starting with the curve start.
    The remainder shorter than one piece, between the last entry and the
    curve end, is not represented.
    """
    if not math.isfinite(length_per_piece) or length_per_piece <= 0:
        raise NonPositivePieceLengthError(f"piece length must be > 0, got {length_per_piece!r}")

    lengths, total = _segment_lengths(curve)
    count = int(total / length_per_piece)

    pieces = [curve.segment_boundary(0)]
    cursor = Cursor(0, lengths[0], 0)
    for _ in range(count):
        t, cursor = advance(curve, lengths, cursor, length_per_piece, iterate)
        pieces.append(t)
    logger.debug("partition: total=%r length=%r -> %d pieces", total, length_per_piece, count)
    return pieces


def partition_n(curve: Curve, n, iterate: RootIterator = halley_iterate):
    """
    Cut the curve into n pieces of equal length.

    Returns n + 1 t values; the first is the curve start and the last is
    exactly curve.max_parameter().
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise InvalidPieceCountError(f"piece count must be an integer >= 1, got {n!r}")

    lengths, total = _segment_lengths(curve)
    length_per_piece = total / n

    pieces = [curve.segment_boundary(0)]
    cursor = Cursor(0, lengths[0], 0)
    for _ in range(1, n):
        t, cursor = advance(curve, lengths, cursor, length_per_piece, iterate)
        pieces.append(t)
    pieces.append(curve.max_parameter())
    return pieces
