"""
Best-First Branch-and-Bound Search

Drives a BnBProblem through its hooks:

- pops the queued node with the most optimistic bound,
- bounds it lazily (children are queued with their parent's bound),
- fathoms it against the incumbent within the configured tolerances,
- re-prunes the worst end of the queue whenever the incumbent improves,
- separates surviving non-terminal nodes into children.

When the queue is exhausted the incumbent is optimal within the tolerances.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Tuple

from .base import BnBNode, BnBProblem, BnBSolution
from .constants import SearchState
from .exceptions import ContractViolation
from .fathom import fathom, relative_gap
from .queue import SearchQueue

logger = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """Statistics from one branch-and-bound run."""

    nodes_bounded: int = 0
    nodes_fathomed: int = 0  # Popped, bounded and discarded
    children_pruned: int = 0  # Discarded before ever entering the queue
    queue_pruned: int = 0  # Removed from the worst end after an improvement
    incumbent_updates: int = 0
    max_queue_size: int = 0
    solve_time: float = 0.0


class BranchAndBound:
    """
    One best-first search over a problem.

    The id counter, the processed-node counter and the queue belong to this
    object, so separate instances never share search state. A problem can
    only be searched by one instance at a time.
    """

    def __init__(self, problem: BnBProblem):
        self.problem = problem
        self.queue = SearchQueue(problem.sense)
        self.stats = SearchStats()
        self.state = SearchState.INITIALIZING
        self._last_id = 0

    def run(self) -> Tuple[BnBSolution, int]:
        problem = self.problem
        if problem._searching:
            raise RuntimeError("Problem is already being searched")
        if self.state is not SearchState.INITIALIZING:
            raise RuntimeError("A BranchAndBound instance can only run once")

        problem._searching = True
        start_time = time.time()
        try:
            self._initialize()
            self.state = SearchState.EXPLORING
            while self.queue:
                self._step()
            self.state = SearchState.EXHAUSTED
        finally:
            problem._searching = False
            self.stats.solve_time = time.time() - start_time

        if problem.params.debug:
            logger.debug(
                f"Search exhausted after bounding {self.stats.nodes_bounded} "
                f"nodes, incumbent {problem.incumbent.value:g}"
            )
        return problem.incumbent, self.stats.nodes_bounded

    # =========================================================================
    # Search Steps
    # =========================================================================

    def _initialize(self) -> None:
        problem = self.problem
        problem.incumbent = problem.initial_guess()
        if problem.params.debug:
            logger.debug(f"Initial solution value is {problem.incumbent.value:g}")

        root = problem.root_node()
        root.id = self._next_id()
        root.depth = 0
        self.queue.push(root)
        self.stats.max_queue_size = 1

    def _step(self) -> None:
        problem = self.problem
        debug = problem.params.debug

        node = self.queue.pop_best()
        bound = problem.compute_bound(node)
        self.stats.nodes_bounded += 1
        if debug:
            logger.debug(f"Got bound of {bound:g} for node {node.id}")

        if fathom(bound, problem):
            self.stats.nodes_fathomed += 1
        else:
            previous_value = problem.incumbent.value
            problem.get_solution(node, problem.incumbent)
            if problem.improves(problem.incumbent.value, previous_value):
                self.stats.incumbent_updates += 1
                self._prune_worst()
                if debug:
                    logger.debug(
                        f"New incumbent value of {problem.incumbent.value:g}, "
                        f"pruned queue to size {len(self.queue)}"
                    )
            if not problem.terminal(node):
                self._branch(node)

        self._report_status()

    def _prune_worst(self) -> None:
        """Drop queued nodes from the worst end until one survives fathoming."""
        while self.queue and fathom(self.queue.peek_worst().bound, self.problem):
            self.queue.pop_worst()
            self.stats.queue_pruned += 1

    def _branch(self, node: BnBNode) -> None:
        problem = self.problem
        debug = problem.params.debug

        num_children = problem.separate(node)
        if num_children < 0:
            raise ContractViolation(
                f"separate returned a negative child count ({num_children})"
            )
        if debug:
            assert isinstance(num_children, int), "separate must return an int"
            logger.debug(f"Separating node {node.id} into {num_children} children")

        for which_child in range(1, num_children + 1):
            child = problem.make_child(node, which_child)
            if debug:
                assert isinstance(child, BnBNode), "make_child must return a BnBNode"
            child.id = self._next_id()
            child.depth = node.depth + 1
            if fathom(child.bound, problem):
                self.stats.children_pruned += 1
                continue
            self.queue.push(child)
            if debug:
                logger.debug(
                    f"Queued child {which_child} with id={child.id}, "
                    f"bound {child.bound:g}"
                )

        self.stats.max_queue_size = max(self.stats.max_queue_size, len(self.queue))

    def _report_status(self) -> None:
        interval = self.problem.params.print_interval
        bounded = self.stats.nodes_bounded
        if interval <= 0 or bounded % interval != 0 or not self.queue:
            return

        best_bound = self.queue.peek_best().bound
        incumbent_value = self.problem.incumbent.value
        gap = relative_gap(best_bound, incumbent_value, self.problem.sense)
        logger.info(
            f"Bounded={bounded} Pool={len(self.queue)} Bound={best_bound:f} "
            f"Inc={incumbent_value:f} Gap={100 * gap:.4f}%"
        )

    def _next_id(self) -> int:
        self._last_id += 1
        return self._last_id


def search(problem: BnBProblem) -> Tuple[BnBSolution, int]:
    """
    Solve `problem` by best-first branch-and-bound.

    Returns:
        The final incumbent and the number of nodes that were bounded.
    """
    return BranchAndBound(problem).run()
