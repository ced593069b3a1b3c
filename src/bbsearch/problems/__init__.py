"""
Concrete Problem Families

Modules:
- knapsack: 0/1 knapsack with a ratio-greedy fractional bound
- integer_program: box-constrained integer convex programs with continuous
  relaxations solved by scipy
"""

from .integer_program import BoxNode, IntegerProgram, IntegerSolution
from .knapsack import (
    KnapsackItem,
    KnapsackNode,
    KnapsackProblem,
    KnapsackSolution,
    read_knapsack,
    translate_solution,
)

__all__ = [
    "BoxNode",
    "IntegerProgram",
    "IntegerSolution",
    "KnapsackItem",
    "KnapsackNode",
    "KnapsackProblem",
    "KnapsackSolution",
    "read_knapsack",
    "translate_solution",
]
