from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)


class ConvergenceError(RuntimeError):
    """Raised when :func:`inverse_function` does not reach its tolerance."""


def clamp(v: float, lo: float, hi: float) -> float:
    if lo > hi:
        raise ValueError(f"empty interval [{lo}, {hi}]")
    return min(max(v, lo), hi)


def sgn(val) -> int:
    return int(0 < val) - int(val < 0)


def inverse_function(
    f: Callable[[float], float],
    df: Callable[[float], float],
    v: float,
    x0: Optional[float] = None,
    bracket: Tuple[float, float] = (0.0, 1.0),
    tol: float = 1e-10,
    max_iter: int = 100,
) -> float:
    """Solve f(x) = v by Newton iteration safeguarded with bisection.

    - When f - v changes sign over ``bracket`` the bracket is shrunk after
      every evaluation, and a Newton step leaving it (or a zero derivative)
      is replaced by a bisection step. Convergence is then guaranteed for
      continuous f.
    - Otherwise plain Newton is run from ``x0``.
    - Stops when |f(x) - v| <= tol or the bracket is narrower than tol.
    - Raises ConvergenceError after ``max_iter`` iterations, on a zero or
      non-finite derivative without a bracket, or on a non-finite iterate.
    """

    lo, hi = float(bracket[0]), float(bracket[1])
    if lo > hi:
        raise ValueError(f"empty bracket [{lo}, {hi}]")

    g_lo = f(lo) - v
    g_hi = f(hi) - v
    if abs(g_lo) <= tol:
        return lo
    if abs(g_hi) <= tol:
        return hi
    bracketed = sgn(g_lo) * sgn(g_hi) < 0

    x = 0.5 * (lo + hi) if x0 is None else float(x0)
    if bracketed:
        x = clamp(x, lo, hi)

    for _ in range(max_iter):
        gx = f(x) - v
        if abs(gx) <= tol:
            return x
        if bracketed:
            if sgn(gx) == sgn(g_lo):
                lo, g_lo = x, gx
            else:
                hi, g_hi = x, gx
            if hi - lo <= tol:
                return 0.5 * (lo + hi)

        d = df(x)
        newton_ok = d != 0.0 and math.isfinite(d)
        x_new = x - gx / d if newton_ok else math.nan
        if bracketed:
            if not (lo < x_new < hi):
                logger.debug("newton step rejected at x=%g, bisecting [%g, %g]", x, lo, hi)
                x_new = 0.5 * (lo + hi)
        elif not newton_ok:
            raise ConvergenceError(f"derivative vanished at x={x} with no bracket to fall back on")
        if not math.isfinite(x_new):
            raise ConvergenceError(f"newton iterate diverged from x={x}")
        x = x_new

    raise ConvergenceError(f"no convergence to f(x)={v} within {max_iter} iterations (last x={x})")
