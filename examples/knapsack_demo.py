import logging
import time

import numpy as np

from bbsearch import BranchAndBound, SearchParams
from bbsearch.problems import KnapsackProblem, translate_solution

logging.basicConfig(level=logging.INFO, format="%(name)s - %(message)s")


def random_instance(n=60, seed=0):
    rng = np.random.default_rng(seed)
    weights = rng.integers(10, 100, size=n)
    # Correlated values make the bound weak and the tree large
    values = weights + rng.integers(0, 10, size=n)
    capacity = int(weights.sum() // 2)
    return KnapsackProblem.from_arrays(
        capacity, weights.tolist(), values.tolist(), params=SearchParams(print_interval=2000)
    )


problem = random_instance()
problem.use_integral_tolerance()

start = time.perf_counter()
engine = BranchAndBound(problem)
solution, num_bounded = engine.run()
elapsed = time.perf_counter() - start

numbers, names = translate_solution(solution, problem)
print(f"Value: {solution.value} after bounding {num_bounded} nodes in {elapsed:.2f}s")
print(f"Items: {numbers}")
print(f"Stats: {engine.stats}")
