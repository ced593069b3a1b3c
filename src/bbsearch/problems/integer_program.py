"""
Box-Constrained Integer Convex Programs

Minimize a convex, differentiable objective over integer vectors in a box.
Each node restricts the box; its bound is the objective's minimum over the
continuous box, found with scipy's L-BFGS-B using an autograd gradient.
Branching splits the range of the most fractional relaxed variable at its
floor and ceiling.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

import autograd.numpy as np
from autograd import grad
from scipy.optimize import minimize

from ..base import BnBNode, BnBProblem, BnBSolution
from ..constants import DEFAULT_INT_TOL, Sense
from ..exceptions import ContractViolation
from ..params import SearchParams

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class IntegerSolution(BnBSolution):
    x: np.ndarray | None = None


@dataclass(eq=False)
class BoxNode(BnBNode):
    lower: np.ndarray = field(default_factory=lambda: np.zeros(0))
    upper: np.ndarray = field(default_factory=lambda: np.zeros(0))

    # Parent's relaxed solution, used as a warm start
    warm_start: np.ndarray | None = None


class IntegerProgram(BnBProblem):
    """
    min objective(x) s.t. lower <= x <= upper, x integer.

    The objective must be convex on the box for the relaxation bounds to be
    valid, and must be written with autograd.numpy so it can be differentiated.
    """

    def __init__(
        self,
        objective: Callable[[np.ndarray], float],
        lower,
        upper,
        x0=None,
        params: SearchParams | None = None,
        int_tol: float = DEFAULT_INT_TOL,
        nlp_maxiter: int = 1000,
        nlp_ftol: float = 1e-15,
        nlp_gtol: float = 1e-10,
    ):
        super().__init__(Sense.MINIMIZE, params, IntegerSolution(np.inf))
        lower = np.ceil(np.asarray(lower, dtype=float) - int_tol)
        upper = np.floor(np.asarray(upper, dtype=float) + int_tol)
        if lower.ndim != 1 or lower.shape != upper.shape:
            raise ValueError(
                f"Bounds must be 1-D and of equal length, got shapes "
                f"{lower.shape} and {upper.shape}"
            )
        if not (np.all(np.isfinite(lower)) and np.all(np.isfinite(upper))):
            raise ValueError("Bounds must be finite")

        self.objective = objective
        self._objective_grad = grad(objective)
        self.lower = lower
        self.upper = upper
        self.int_tol = int_tol
        self.nlp_maxiter = nlp_maxiter
        self.nlp_ftol = nlp_ftol
        self.nlp_gtol = nlp_gtol

        if x0 is None:
            x0 = (lower + upper) / 2
        self.x0 = np.clip(np.asarray(x0, dtype=float), lower, upper)

        # Scratch fields shared by compute_bound and the hooks that follow it
        self._relaxed_x: np.ndarray | None = None
        self._branch_idx = -1
        self._branch_val = 0.0

    @property
    def num_vars(self) -> int:
        return len(self.lower)

    def _evaluate(self, x: np.ndarray) -> float:
        val = self.objective(x)
        return float(val.item()) if hasattr(val, "item") else float(val)

    def _fractionality(self, x: np.ndarray) -> np.ndarray:
        return np.abs(x - np.round(x))

    def _solve_relaxation(self, node: BoxNode) -> tuple[np.ndarray, float]:
        if np.all(node.lower == node.upper):
            x = node.lower.copy()
            return x, self._evaluate(x)

        start = node.warm_start if node.warm_start is not None else self.x0
        x0 = np.clip(start, node.lower, node.upper)
        result = minimize(
            self.objective,
            x0,
            method="L-BFGS-B",
            jac=self._objective_grad,
            bounds=list(zip(node.lower, node.upper)),
            options={
                "maxiter": self.nlp_maxiter,
                "ftol": self.nlp_ftol,
                "gtol": self.nlp_gtol,
            },
        )
        if not result.success:
            logger.warning(
                f"Relaxation at node {node.id} did not converge: {result.message}"
            )
        return np.asarray(result.x, dtype=float), float(result.fun)

    # =========================================================================
    # Search Hooks
    # =========================================================================

    def initial_guess(self) -> IntegerSolution:
        if np.any(self.lower > self.upper):
            return IntegerSolution(self.worst_value)
        x = np.clip(np.round(self.x0), self.lower, self.upper)
        return IntegerSolution(self._evaluate(x), x)

    def root_node(self) -> BoxNode:
        return BoxNode(
            lower=self.lower.copy(),
            upper=self.upper.copy(),
            warm_start=self.x0.copy(),
        )

    def compute_bound(self, node: BoxNode) -> float:
        if np.any(node.lower > node.upper):
            self._relaxed_x = None
            node.bound = self.worst_value
            return node.bound

        self._relaxed_x, node.bound = self._solve_relaxation(node)
        return node.bound

    def get_solution(self, node: BoxNode, incumbent: IntegerSolution) -> None:
        x = np.clip(np.round(self._relaxed_x), node.lower, node.upper)
        value = self._evaluate(x)
        if self.improves(value, incumbent.value):
            incumbent.value = value
            incumbent.x = x

    def terminal(self, node: BoxNode) -> bool:
        return not np.any(self._fractionality(self._relaxed_x) > self.int_tol)

    def separate(self, node: BoxNode) -> int:
        # Most fractional: the variable farthest from its nearest integer
        frac = self._fractionality(self._relaxed_x)
        idx = int(np.argmax(frac))
        if frac[idx] <= self.int_tol:
            return 0
        self._branch_idx = idx
        self._branch_val = float(self._relaxed_x[idx])
        return 2

    def make_child(self, node: BoxNode, which_child: int) -> BoxNode:
        idx = self._branch_idx
        lower = node.lower.copy()
        upper = node.upper.copy()
        if which_child == 1:
            upper[idx] = np.floor(self._branch_val)
        elif which_child == 2:
            lower[idx] = np.ceil(self._branch_val)
        else:
            raise ContractViolation(f"{which_child} is not a valid child number")
        return BoxNode(
            bound=node.bound,
            lower=lower,
            upper=upper,
            warm_start=self._relaxed_x.copy(),
        )
