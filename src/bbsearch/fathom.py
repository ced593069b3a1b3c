from __future__ import annotations

import math

from .base import BnBProblem
from .exceptions import ContractViolation


def _scale(bound: float, incumbent_value: float) -> float:
    scale = abs(bound)
    if scale == 0:
        scale = abs(incumbent_value)
    return scale


def fathom(bound: float, problem: BnBProblem) -> bool:
    """
    Decide whether a subproblem with the given bound can be discarded.

    A subproblem is pruned when its bound cannot beat the incumbent by more
    than the absolute tolerance, or by more than the relative tolerance times
    the bound's magnitude (the incumbent's magnitude when the bound is zero).
    A bound equal to the "no feasible region" sentinel is always pruned.
    """
    if math.isnan(bound):
        raise ContractViolation("compute_bound produced a NaN bound")

    sense = problem.sense
    if sense * bound == math.inf:
        return True

    incumbent_value = problem.incumbent.value
    gap = sense * (incumbent_value - bound)
    if gap <= 0:
        return True
    # No incumbent yet, or an unbounded relaxation
    if math.isinf(gap):
        return False
    if gap < problem.params.abs_tol:
        return True

    scale = _scale(bound, incumbent_value)
    if scale == 0:
        return False
    return gap <= scale * problem.params.rel_tol


def relative_gap(bound: float, incumbent_value: float, sense: int) -> float:
    """Relative optimality gap between a bound and the incumbent, scaled like fathom."""
    scale = _scale(bound, incumbent_value)
    if scale == 0:
        return 0.0
    if math.isinf(scale):
        return math.inf
    return sense * (incumbent_value - bound) / scale
