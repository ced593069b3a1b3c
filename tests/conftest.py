from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import pytest

from bbsearch.base import BnBNode, BnBProblem, BnBSolution
from bbsearch.constants import Sense
from bbsearch.exceptions import ContractViolation
from bbsearch.params import SearchParams
from bbsearch.problems.knapsack import KnapsackProblem


class StubProblem(BnBProblem):
    """A problem with a single terminal root, for exercising fathom and the queue."""

    def initial_guess(self):
        return BnBSolution(self.worst_value)

    def root_node(self):
        return BnBNode()

    def compute_bound(self, node):
        return node.bound

    def get_solution(self, node, incumbent):
        pass

    def terminal(self, node):
        return True

    def separate(self, node):
        return 0

    def make_child(self, node, which_child):
        raise ContractViolation(f"{which_child} is not a valid child number")


def make_stub(sense=Sense.MINIMIZE, incumbent=10.0, **params) -> StubProblem:
    return StubProblem(sense, SearchParams(**params), BnBSolution(incumbent))


@dataclass
class VectorSolution(BnBSolution):
    x: Tuple[int, ...] = ()


@dataclass
class PrefixNode(BnBNode):
    prefix: Tuple[int, ...] = ()


class CardinalityProblem(BnBProblem):
    """
    Optimize sum(costs[i] * x[i]) over binary x with exactly k ones.

    Nodes fix a prefix of x. The bound drops the cardinality constraint, and
    solutions are completed by switching on the first free positions, so the
    incumbent improves gradually. Every created node and every incumbent
    improvement is recorded.
    """

    def __init__(self, costs, k, sense=Sense.MINIMIZE, params=None, heuristic=False):
        super().__init__(sense, params)
        self.costs = list(costs)
        self.k = k
        self.heuristic = heuristic
        self.created: List[PrefixNode] = []
        self.improvements: List[float] = []
        self.bounded: List[PrefixNode] = []

    @property
    def n(self) -> int:
        return len(self.costs)

    def _optimistic(self, c: float) -> float:
        return min(0.0, c) if self.sense == Sense.MINIMIZE else max(0.0, c)

    def _value(self, x) -> float:
        return float(sum(c * xi for c, xi in zip(self.costs, x)))

    def _complete(self, prefix) -> Tuple[int, ...]:
        need = self.k - sum(prefix)
        rest = [1] * need + [0] * (self.n - len(prefix) - need)
        return tuple(prefix) + tuple(rest)

    def initial_guess(self):
        if self.heuristic and self.k <= self.n:
            x = self._complete(())
            return VectorSolution(self._value(x), x)
        return VectorSolution(self.worst_value)

    def root_node(self):
        node = PrefixNode()
        self.created.append(node)
        return node

    def compute_bound(self, node):
        self.bounded.append(node)
        ones = sum(node.prefix)
        remaining = self.n - len(node.prefix)
        if ones > self.k or self.k - ones > remaining:
            node.bound = self.worst_value
        else:
            fixed = self._value(node.prefix)
            node.bound = fixed + sum(
                self._optimistic(c) for c in self.costs[len(node.prefix):]
            )
        return node.bound

    def get_solution(self, node, incumbent):
        x = self._complete(node.prefix)
        value = self._value(x)
        if self.improves(value, incumbent.value):
            incumbent.value = value
            incumbent.x = x
            self.improvements.append(value)

    def terminal(self, node):
        return len(node.prefix) == self.n

    def separate(self, node):
        return 2

    def make_child(self, node, which_child):
        if which_child not in (1, 2):
            raise ContractViolation(f"{which_child} is not a valid child number")
        child = PrefixNode(bound=node.bound, prefix=node.prefix + (which_child - 1,))
        self.created.append(child)
        return child


def brute_force(costs, k, sense) -> float:
    from itertools import combinations

    values = [sum(costs[i] for i in chosen) for chosen in combinations(range(len(costs)), k)]
    if not values:
        return sense * float("inf")
    return min(values) if sense == Sense.MINIMIZE else max(values)


@pytest.fixture
def small_knapsack():
    """Capacity 10; items (w=5,v=10), (w=4,v=40), (w=6,v=30), (w=3,v=50)."""
    return KnapsackProblem.from_arrays(
        10, weights=[5, 4, 6, 3], values=[10, 40, 30, 50], names=["a", "b", "c", "d"]
    )


@pytest.fixture
def knapsack_file(tmp_path):
    path = tmp_path / "small.txt"
    path.write_text(
        "10\n"
        "a 5 10\n"
        "b 4 40\n"
        "\n"
        "c 6 30\n"
        "# comment line\n"
        "d 3 50\n"
    )
    return path
