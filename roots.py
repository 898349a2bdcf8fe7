# Root iteration primitives used by the arc-length solver.
#
# An iterator has the signature
#   iterate(objective, guess, lower, upper, max_iterations) -> estimate
# where objective(x) returns (value, first_derivative, second_derivative).
# Running out of iterations is not an error: the last estimate is returned.

import logging

import numpy as np
from scipy.optimize import newton

logger = logging.getLogger(__name__)


class _Memo:
    """Evaluate the objective once per trial point and clamp the point into bounds."""

    def __init__(self, objective, lower, upper):
        self.objective = objective
        self.lower = lower
        self.upper = upper
        self._x = None
        self._result = None

    def __call__(self, x):
        x = min(max(x, self.lower), self.upper)
        if self._x is None or x != self._x:
            self._x = x
            self._result = self.objective(x)
        return self._result

    def value(self, x):
        return self(x)[0]

    def first(self, x):
        return self(x)[1]

    def second(self, x):
        return self(x)[2]


def halley_iterate(objective, guess, lower, upper, max_iterations):
    """
    Halley's method (scipy.optimize.newton with fprime2) kept inside [lower, upper].

    The convergence tolerance follows the precision of guess, so float32
    problems stop at float32 resolution. A zero first derivative stops the
    iteration at the current estimate; scipy reports it with a RuntimeWarning,
    which is left to the caller's warning filters.
    """
    dtype = np.asarray(guess).dtype
    if not np.issubdtype(dtype, np.floating):
        dtype = np.dtype(np.float64)
    tol = 10 * float(np.finfo(dtype).resolution)

    memo = _Memo(objective, lower, upper)
    x, info = newton(memo.value, float(guess), fprime=memo.first, fprime2=memo.second,
                     tol=tol, maxiter=max(1, int(max_iterations)),
                     full_output=True, disp=False)
    if not info.converged:
        logger.debug("halley_iterate: no convergence after %d iterations (%s), x=%r",
                     info.iterations, info.flag, x)

    return dtype.type(min(max(x, lower), upper))
