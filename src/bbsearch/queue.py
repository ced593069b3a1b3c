"""
Double-Ended Node Queue

Nodes are kept in two binary heaps keyed on (bound, id): a min-heap and a
max-heap over the same nodes. Removing a node from one heap leaves a stale
entry in the other, which is discarded lazily when it reaches the top.
Ties on the bound are broken by id, i.e. by creation order.

Every push is stamped with a fresh sequence number and liveness is tracked
by that number, so a stale entry never revives when its id is pushed again.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Iterator, List, Set, Tuple

from .base import BnBNode
from .constants import Sense
from .exceptions import ContractViolation

# (bound, id, seq, node); seq is unique, so nodes are never compared
_Entry = Tuple[float, int, int, BnBNode]


class NodeQueue:
    """Priority queue of nodes supporting removal at both ends."""

    # Rebuild a heap once its stale entries exceed the live ones by more than this
    _COMPACT_SLACK = 64

    def __init__(self):
        self._min_heap: List[_Entry] = []
        self._max_heap: List[_Entry] = []
        self._alive: Set[int] = set()
        self._queued_ids: Set[int] = set()
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._alive)

    def __iter__(self) -> Iterator[BnBNode]:
        return (entry[3] for entry in self._min_heap if entry[2] in self._alive)

    def push(self, node: BnBNode) -> None:
        if node.id in self._queued_ids:
            raise ContractViolation(f"Node id {node.id} is already queued")
        bound = float(node.bound)
        seq = next(self._seq)
        heapq.heappush(self._min_heap, (bound, node.id, seq, node))
        heapq.heappush(self._max_heap, (-bound, node.id, seq, node))
        self._alive.add(seq)
        self._queued_ids.add(node.id)

    def peek_min(self) -> BnBNode:
        return self._top(self._min_heap)[3]

    def peek_max(self) -> BnBNode:
        return self._top(self._max_heap)[3]

    def pop_min(self) -> BnBNode:
        return self._pop(self._min_heap, self._max_heap)

    def pop_max(self) -> BnBNode:
        return self._pop(self._max_heap, self._min_heap)

    def _top(self, heap: List[_Entry]) -> _Entry:
        while heap and heap[0][2] not in self._alive:
            heapq.heappop(heap)
        if not heap:
            raise IndexError("peek from an empty node queue")
        return heap[0]

    def _pop(self, heap: List[_Entry], other: List[_Entry]) -> BnBNode:
        self._top(heap)
        _, node_id, seq, node = heapq.heappop(heap)
        self._alive.discard(seq)
        self._queued_ids.discard(node_id)
        if len(other) > 2 * len(self._alive) + self._COMPACT_SLACK:
            self._compact(other)
        return node

    def _compact(self, heap: List[_Entry]) -> None:
        heap[:] = [entry for entry in heap if entry[2] in self._alive]
        heapq.heapify(heap)


class SearchQueue(NodeQueue):
    """
    A NodeQueue oriented by an optimization sense.

    The best end holds the most optimistic bound: the minimum when
    minimizing, the maximum when maximizing. The worst end is the other one.
    """

    def __init__(self, sense: Sense | int):
        super().__init__()
        self.sense = Sense(sense)

    def peek_best(self) -> BnBNode:
        if self.sense == Sense.MINIMIZE:
            return self.peek_min()
        return self.peek_max()

    def peek_worst(self) -> BnBNode:
        if self.sense == Sense.MINIMIZE:
            return self.peek_max()
        return self.peek_min()

    def pop_best(self) -> BnBNode:
        if self.sense == Sense.MINIMIZE:
            return self.pop_min()
        return self.pop_max()

    def pop_worst(self) -> BnBNode:
        if self.sense == Sense.MINIMIZE:
            return self.pop_max()
        return self.pop_min()
