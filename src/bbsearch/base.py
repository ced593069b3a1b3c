"""
Branch-and-Bound Extension Contract

This module contains the shared data carried by every problem family
(solutions, nodes and problems) and the hook operations the search engine
calls on a problem:

- initial_guess: heuristic starting incumbent
- root_node: the unconstrained subproblem
- compute_bound: optimistic bound of a subproblem (lazy, on pop)
- get_solution: extract a feasible solution from the bounding by-products
- terminal: whether the bound of a subproblem is exact
- separate: number of children to branch into
- make_child: build one restricted child subproblem

A concrete family subclasses BnBSolution, BnBNode and BnBProblem and
implements the seven hooks. The engine assigns node ids and depths.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .constants import Sense
from .exceptions import ContractViolation
from .params import SearchParams


@dataclass
class BnBSolution:
    """A complete feasible solution; `value` is its objective."""

    value: float = 0.0


@dataclass
class BnBNode:
    """
    A subproblem in the search tree.

    Bound semantics:
    - `bound` is inherited from the parent when the node is created and
      replaced by the node's own bound when it is popped and bounded.
    - It is never worse (for the problem's sense) than any solution
      reachable by expanding the node.
    """

    bound: float = 0.0
    id: int = 0
    depth: int = 0


class BnBProblem(ABC):
    """
    A problem family the search engine can drive.

    Holds the optimization sense, the current incumbent and the search
    parameters. Subclasses add instance data and the scratch fields their
    hooks share between compute_bound and the hooks that follow it.
    """

    def __init__(
        self,
        sense: Sense | int,
        params: SearchParams | None = None,
        incumbent: BnBSolution | None = None,
    ):
        try:
            self.sense = Sense(sense)
        except ValueError:
            raise ContractViolation(
                f"sense must be +1 (minimize) or -1 (maximize), got {sense!r}"
            ) from None
        self.params = params if params is not None else SearchParams()
        self.incumbent = (
            incumbent if incumbent is not None else BnBSolution(self.worst_value)
        )
        self._searching = False

    @property
    def worst_value(self) -> float:
        """Objective of "no solution": +inf when minimizing, -inf when maximizing."""
        return self.sense * math.inf

    def improves(self, value: float, reference: float) -> bool:
        """True if `value` is strictly better than `reference` for this sense."""
        return self.sense * (value - reference) < 0

    @abstractmethod
    def initial_guess(self) -> BnBSolution:
        """Heuristic starting incumbent; must only read instance data."""

    @abstractmethod
    def root_node(self) -> BnBNode:
        ...

    @abstractmethod
    def compute_bound(self, node: BnBNode) -> float:
        """Set `node.bound` and return it."""

    @abstractmethod
    def get_solution(self, node: BnBNode, incumbent: BnBSolution) -> None:
        """Update `incumbent` in place if the node yields a strictly better solution."""

    @abstractmethod
    def terminal(self, node: BnBNode) -> bool:
        ...

    @abstractmethod
    def separate(self, node: BnBNode) -> int:
        """Prepare branching data and return the number of children."""

    @abstractmethod
    def make_child(self, node: BnBNode, which_child: int) -> BnBNode:
        """Build child `which_child` (1-based) of `node`."""
