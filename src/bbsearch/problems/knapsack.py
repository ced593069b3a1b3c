"""
0/1 Knapsack

Choose a subset of items maximizing total value subject to a weight
capacity. Items are sorted by value/weight ratio; a node locks some items in
and some out, and is bounded by filling the rest greedily in ratio order plus
a fractional share of the first item that does not fit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Sequence, Set, Tuple

import numpy as np

from ..base import BnBNode, BnBProblem, BnBSolution
from ..constants import Sense
from ..exceptions import ContractViolation, InstanceFormatError
from ..params import SearchParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KnapsackItem:
    name: str
    weight: int
    value: int


@dataclass
class KnapsackSolution(BnBSolution):
    # Positions in the problem's ratio-sorted order
    items: Set[int] = field(default_factory=set)


@dataclass
class KnapsackNode(BnBNode):
    locked_in: FrozenSet[int] = frozenset()
    locked_out: FrozenSet[int] = frozenset()


class KnapsackProblem(BnBProblem):
    """A 0/1 knapsack instance, maximized."""

    def __init__(
        self,
        capacity: int,
        items: Sequence[KnapsackItem],
        params: SearchParams | None = None,
    ):
        super().__init__(Sense.MAXIMIZE, params, KnapsackSolution(0))
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {capacity}")
        for item in items:
            if item.weight <= 0:
                raise ValueError(f"Item {item.name!r} must have a positive weight")
            if item.value < 0:
                raise ValueError(f"Item {item.name!r} must have a non-negative value")

        self.capacity = int(capacity)
        self.items = list(items)
        self.num_items = len(self.items)

        # Sort permutation by value/weight ratio, best first
        raw_weights = np.array([item.weight for item in self.items], dtype=float)
        raw_values = np.array([item.value for item in self.items], dtype=float)
        ratios = raw_values / raw_weights
        self.perm = [int(i) for i in np.argsort(-ratios, kind="stable")]
        self.weights = [self.items[i].weight for i in self.perm]
        self.values = [self.items[i].value for i in self.perm]

        # Scratch fields shared by compute_bound and the hooks that follow it
        self._current_items: Set[int] = set()
        self._current_value = 0
        self._space_left = 0
        self._item_index = 0

    @classmethod
    def from_arrays(
        cls,
        capacity: int,
        weights: Sequence[int],
        values: Sequence[int],
        names: Sequence[str] | None = None,
        params: SearchParams | None = None,
    ) -> KnapsackProblem:
        if len(weights) != len(values):
            raise ValueError(
                f"Got {len(weights)} weights but {len(values)} values"
            )
        if names is None:
            names = [f"item{i + 1}" for i in range(len(weights))]
        items = [
            KnapsackItem(str(name), int(w), int(v))
            for name, w, v in zip(names, weights, values)
        ]
        return cls(capacity, items, params)

    def use_integral_tolerance(self) -> None:
        """
        Raise the absolute tolerance to the gcd of the item values.

        Every solution value is a multiple of the gcd, so a subproblem whose
        bound beats the incumbent by less than the gcd cannot hold a strictly
        better solution.
        """
        if self._searching:
            raise RuntimeError("Cannot change tolerances during a search")
        if not self.num_items:
            return
        divisor = int(np.gcd.reduce(np.array(self.values, dtype=np.int64)))
        if divisor > self.params.abs_tol:
            self.params = self.params.replace(abs_tol=float(divisor))
            logger.debug(f"Absolute tolerance raised to {divisor}")

    def _complete_greedy(
        self,
        start: int,
        value: int,
        already_in: Set[int],
        space_left: int,
        excluded: FrozenSet[int],
        solution: KnapsackSolution,
    ) -> None:
        """Fill the remaining space greedily from `start`; keep the result if better."""
        in_items = set(already_in)
        for i in range(start, self.num_items):
            if i not in excluded and i not in in_items and self.weights[i] <= space_left:
                space_left -= self.weights[i]
                value += self.values[i]
                in_items.add(i)
            if space_left == 0:
                break
        if self.improves(value, solution.value):
            solution.value = value
            solution.items = in_items

    # =========================================================================
    # Search Hooks
    # =========================================================================

    def initial_guess(self) -> KnapsackSolution:
        solution = KnapsackSolution(0, set())
        self._complete_greedy(0, 0, set(), self.capacity, frozenset(), solution)
        return solution

    def root_node(self) -> KnapsackNode:
        return KnapsackNode()

    def compute_bound(self, node: KnapsackNode) -> float:
        self._current_items = set(node.locked_in)
        self._space_left = self.capacity - sum(self.weights[i] for i in node.locked_in)
        self._current_value = sum(self.values[i] for i in node.locked_in)
        if self._space_left < 0:
            self._item_index = self.num_items
            node.bound = self.worst_value
            return node.bound

        i = 0
        while i < self.num_items:
            if i not in node.locked_in and i not in node.locked_out:
                if self.weights[i] > self._space_left:
                    break
                self._current_items.add(i)
                self._space_left -= self.weights[i]
                self._current_value += self.values[i]
            i += 1
        self._item_index = i

        node.bound = float(self._current_value)
        if i < self.num_items:
            node.bound += self.values[i] * self._space_left / self.weights[i]
        return node.bound

    def get_solution(self, node: KnapsackNode, incumbent: KnapsackSolution) -> None:
        self._complete_greedy(
            self._item_index,
            self._current_value,
            self._current_items,
            self._space_left,
            node.locked_in | node.locked_out,
            incumbent,
        )

    def terminal(self, node: KnapsackNode) -> bool:
        return self._space_left == 0 or self._item_index >= self.num_items

    def separate(self, node: KnapsackNode) -> int:
        return 2

    def make_child(self, node: KnapsackNode, which_child: int) -> KnapsackNode:
        critical = self._item_index
        if which_child == 1:
            return KnapsackNode(
                bound=node.bound,
                locked_in=node.locked_in | {critical},
                locked_out=node.locked_out,
            )
        if which_child == 2:
            return KnapsackNode(
                bound=node.bound,
                locked_in=node.locked_in,
                locked_out=node.locked_out | {critical},
            )
        raise ContractViolation(f"{which_child} is not a valid child number")


def translate_solution(
    solution: KnapsackSolution, problem: KnapsackProblem
) -> Tuple[List[int], List[str]]:
    """Original 1-based item numbers of a solution, ascending, and their names."""
    by_number = sorted(problem.perm[i] + 1 for i in solution.items)
    by_name = [problem.items[n - 1].name for n in by_number]
    return by_number, by_name


def read_knapsack(
    filename: str | Path, params: SearchParams | None = None
) -> KnapsackProblem:
    """
    Read a knapsack instance.

    The first line holds the capacity; every following non-blank line holds
    an item as ``name weight value``. Lines starting with ``#`` are ignored.
    """
    capacity = None
    items: List[KnapsackItem] = []
    with open(filename, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            tokens = line.split()
            if not tokens or tokens[0].startswith("#"):
                continue
            if capacity is not None and len(tokens) != 3:
                raise InstanceFormatError(
                    f"{filename}:{line_no}: expected 'name weight value', "
                    f"got {len(tokens)} fields"
                )
            try:
                if capacity is None:
                    capacity = int(tokens[0])
                else:
                    items.append(
                        KnapsackItem(tokens[0], int(tokens[1]), int(tokens[2]))
                    )
            except ValueError as e:
                raise InstanceFormatError(f"{filename}:{line_no}: {e}") from e

    if capacity is None:
        raise InstanceFormatError(f"{filename}: missing capacity line")
    try:
        return KnapsackProblem(capacity, items, params)
    except ValueError as e:
        raise InstanceFormatError(f"{filename}: {e}") from e
